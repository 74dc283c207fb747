"""Pytest fixtures for the SimpleTask tests."""

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from loguru import logger

from simpletask.config import Settings
from simpletask.main import create_app
from simpletask.storage import MemoryStorage
from simpletask.store import TaskStore

from .fakes import TickingClock


@pytest.fixture
def clock() -> TickingClock:
    """A clock that advances 1 ms per reading."""
    return TickingClock()


@pytest.fixture
def storage() -> MemoryStorage:
    """Empty in-memory key-value storage."""
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage, clock: TickingClock) -> TaskStore:
    """A fresh task store backed by in-memory storage."""
    return TaskStore(storage, clock=clock)


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect loguru messages at WARNING and above."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def static_dir(tmp_path: Path) -> Path:
    """A static asset directory with an index page and one script."""
    public = tmp_path / "public"
    (public / "assets").mkdir(parents=True)
    (public / "index.html").write_text("<html><body>SimpleTask</body></html>", encoding="utf-8")
    (public / "assets" / "app.js").write_text("console.log('tasks');", encoding="utf-8")
    (tmp_path / "secret.txt").write_text("not for you", encoding="utf-8")
    return public


@pytest.fixture
def client(static_dir: Path) -> TestClient:
    """Create a test client for the static file server."""
    return TestClient(create_app(Settings(static_dir=static_dir)))
