"""Tests for the status endpoints."""

from fastapi.testclient import TestClient

from simpletask import __version__
from simpletask.main import ROOT_MESSAGE


def test_health_check(client: TestClient) -> None:
    """Test that health check returns healthy status."""
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["version"] == __version__


def test_root_reports_running(client: TestClient) -> None:
    """Test that the root path answers with a plain-text status line."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == ROOT_MESSAGE
