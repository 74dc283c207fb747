"""Durable local key-value storage.

The task store persists its whole state as a single string value under a
fixed key. Any object with ``get_item``/``set_item``/``remove_item`` will do;
two implementations are provided here.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Protocol

from loguru import logger


class StorageError(Exception):
    """Raised when the backing medium cannot be read or written."""


class KeyValueStorage(Protocol):
    """String key to string value storage."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage that lives as long as the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        """Initialize with an optional set of existing items."""
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        """Return the value stored under key, or None if not set."""
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        """Remove key if present."""
        self._items.pop(key, None)

    def clear(self) -> None:
        """Remove all items. Useful for testing."""
        self._items.clear()


class JsonFileStorage:
    """Storage that keeps every key in one JSON object on disk.

    The file is re-read on every access so that a value written by another
    run of the program is always picked up.
    """

    def __init__(self, path: str | Path) -> None:
        """Point the storage at a file; it is created on first write."""
        self.path = Path(path).expanduser()

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Cannot read storage file {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"Storage file {self.path} does not hold a JSON object")
        items: dict[str, str] = {}
        for key, value in data.items():
            if not isinstance(value, str):
                logger.warning(
                    "Ignoring key '{}' in {}: expected a string value, got {}",
                    key,
                    self.path,
                    type(value).__name__,
                )
                continue
            items[str(key)] = value
        return items

    def _write_all(self, items: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(items, f, indent=2)
                os.replace(tmp_name, self.path)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Cannot write storage file {self.path}: {exc}") from exc
        logger.debug("Wrote {} key(s) to {}", len(items), self.path)

    def get_item(self, key: str) -> str | None:
        """Return the value stored under key, or None if not set."""
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        items = self._read_all()
        items[key] = value
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        """Remove key if present."""
        items = self._read_all()
        if key in items:
            del items[key]
            self._write_all(items)
