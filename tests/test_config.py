"""Tests for settings loaded from the environment."""

import os
from pathlib import Path

import pytest

from simpletask.config import load_settings
from simpletask.store import STORAGE_KEY

ENV_VARS = [
    "PORT",
    "SIMPLETASK_HOST",
    "SIMPLETASK_PORT",
    "SIMPLETASK_STATIC_DIR",
    "SIMPLETASK_DATA_FILE",
    "SIMPLETASK_STORAGE_KEY",
    "SIMPLETASK_CORS_ORIGINS",
    "SIMPLETASK_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    """Test the settings used when nothing is configured."""
    settings = load_settings(dotenv=False)
    assert settings.host == "127.0.0.1"
    assert settings.port == 3000
    assert settings.static_dir == Path("public")
    assert settings.data_file.name == "storage.json"
    assert settings.storage_key == STORAGE_KEY
    assert settings.cors_origins == ["*"]
    assert settings.log_level == "INFO"


def test_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Test that prefixed variables override the defaults."""
    monkeypatch.setenv("SIMPLETASK_HOST", "0.0.0.0")
    monkeypatch.setenv("SIMPLETASK_PORT", "8080")
    monkeypatch.setenv("SIMPLETASK_STATIC_DIR", str(tmp_path / "dist"))
    monkeypatch.setenv("SIMPLETASK_DATA_FILE", str(tmp_path / "tasks.json"))
    monkeypatch.setenv("SIMPLETASK_STORAGE_KEY", "other_key")
    monkeypatch.setenv("SIMPLETASK_CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("SIMPLETASK_LOG_LEVEL", "debug")

    settings = load_settings(dotenv=False)

    assert settings.host == "0.0.0.0"
    assert settings.port == 8080
    assert settings.static_dir == tmp_path / "dist"
    assert settings.data_file == tmp_path / "tasks.json"
    assert settings.storage_key == "other_key"
    assert settings.cors_origins == ["http://a.test", "http://b.test"]
    assert settings.log_level == "DEBUG"


def test_plain_port_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that PORT is honored when the prefixed variable is absent."""
    monkeypatch.setenv("PORT", "5000")
    assert load_settings(dotenv=False).port == 5000

    monkeypatch.setenv("SIMPLETASK_PORT", "6000")
    assert load_settings(dotenv=False).port == 6000


def test_invalid_port_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that a non-numeric port is ignored."""
    monkeypatch.setenv("SIMPLETASK_PORT", "eighty")
    assert load_settings(dotenv=False).port == 3000


def test_dotenv_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Test that a .env file in the working directory is read."""
    (tmp_path / ".env").write_text("SIMPLETASK_PORT=7070\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    try:
        assert load_settings().port == 7070
    finally:
        # load_dotenv writes straight into os.environ
        os.environ.pop("SIMPLETASK_PORT", None)
