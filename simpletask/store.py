"""Task store: the single owner of the to-do list.

The store keeps the task list in memory, keeps it sorted, derives the active
task count, writes the whole list to local key-value storage after every
change and reads it back on construction. Consumers render from ``read()``
and hear about changes through ``subscribe()``.
"""

import json
import secrets
import string
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from loguru import logger
from pydantic import ValidationError

from simpletask.models import PersistedState, StoredTasks, Task, TaskSnapshot
from simpletask.storage import KeyValueStorage
from simpletask.validation import TOO_LONG_MESSAGE, TaskValidationError, validate_text_content

STORAGE_KEY = "simple_task_data"

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 7

Listener = Callable[[TaskSnapshot], None]
Clock = Callable[[], int]


def now_ms() -> int:
    """Return the current time in milliseconds since the epoch."""
    return int(datetime.now(UTC).timestamp() * 1000)


def generate_task_id(timestamp: int) -> str:
    """Build an id from a millisecond timestamp and a random base36 suffix."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LENGTH))
    return f"{timestamp}-{suffix}"


def sort_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Return tasks ordered active first, then completed, newest interaction first."""
    return sorted(tasks, key=lambda t: (t.is_completed, -t.last_interacted_at))


def count_active(tasks: Iterable[Task]) -> int:
    """Count tasks that are not completed."""
    return sum(1 for t in tasks if not t.is_completed)


class TaskStore:
    """In-memory task list with local persistence and change notification."""

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = STORAGE_KEY,
        clock: Clock = now_ms,
    ) -> None:
        """Initialize the store and rehydrate any state saved under key."""
        self._storage = storage
        self._key = key
        self._clock = clock
        self._listeners: list[Listener] = []
        self._tasks: list[Task] = []
        self._active_tasks_count = 0
        self._rehydrate()

    @property
    def active_tasks_count(self) -> int:
        """Number of tasks not yet completed."""
        return self._active_tasks_count

    def read(self) -> TaskSnapshot:
        """Return the current sorted tasks and active count."""
        return TaskSnapshot(
            tasks=tuple(self._tasks),
            active_tasks_count=self._active_tasks_count,
        )

    def get(self, task_id: str) -> Task | None:
        """Get a task by its ID, or None if not found."""
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for state changes. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def add(self, raw_text: str) -> None:
        """Add a new active task.

        Blank text is ignored. Text longer than the maximum length raises
        TaskValidationError and leaves the list untouched.
        """
        text = raw_text.strip()
        result = validate_text_content(text)
        if not result.ok:
            if result.reason == TOO_LONG_MESSAGE:
                logger.warning("Rejected task of {} characters: {}", len(text), result.reason)
                raise TaskValidationError(result)
            logger.warning("Attempted to add an empty task.")
            return

        timestamp = self._clock()
        task_id = generate_task_id(timestamp)
        while self.get(task_id) is not None:
            task_id = generate_task_id(timestamp)

        task = Task(
            id=task_id,
            text_content=text,
            is_completed=False,
            created_at=timestamp,
            completed_at=None,
            last_interacted_at=timestamp,
        )
        logger.debug("Adding task {}", task.id)
        self._commit([task, *self._tasks])

    def toggle_completion(self, task_id: str) -> None:
        """Flip a task between active and completed. Unknown IDs are ignored."""
        if self.get(task_id) is None:
            logger.debug("Toggle ignored, no task {}", task_id)
            return

        timestamp = self._clock()
        updated: list[Task] = []
        for task in self._tasks:
            if task.id == task_id:
                completed = not task.is_completed
                task = task.model_copy(
                    update={
                        "is_completed": completed,
                        "completed_at": timestamp if completed else None,
                        "last_interacted_at": timestamp,
                    }
                )
            updated.append(task)
        self._commit(updated)

    def delete(self, task_id: str) -> None:
        """Remove a task. Unknown IDs are ignored."""
        remaining = [t for t in self._tasks if t.id != task_id]
        if len(remaining) == len(self._tasks):
            logger.debug("Delete ignored, no task {}", task_id)
            return
        self._commit(remaining)

    def _commit(self, tasks: list[Task]) -> None:
        self._set_state(tasks)
        self._persist()
        self._notify()

    def _set_state(self, tasks: Iterable[Task]) -> None:
        self._tasks = sort_tasks(tasks)
        self._active_tasks_count = count_active(self._tasks)

    def _persist(self) -> None:
        payload = PersistedState(state=StoredTasks(tasks=list(self._tasks)))
        try:
            self._storage.set_item(self._key, payload.model_dump_json())
        except Exception:
            # In-memory state stays as is; durability is best effort.
            logger.exception("Failed to persist {} task(s) under '{}'", len(self._tasks), self._key)

    def _notify(self) -> None:
        snapshot = self.read()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Task store listener {!r} failed", listener)

    def _rehydrate(self) -> None:
        try:
            raw = self._storage.get_item(self._key)
        except Exception:
            logger.exception("Failed to read saved tasks under '{}'; starting empty", self._key)
            return
        if raw is None:
            return

        try:
            data = json.loads(raw)
        except ValueError as exc:
            logger.error("Saved tasks under '{}' are not valid JSON: {}", self._key, exc)
            return

        records = _extract_task_records(data)
        if records is None:
            logger.error("Saved tasks under '{}' have an unexpected layout", self._key)
            return

        tasks: list[Task] = []
        seen: set[str] = set()
        for record in records:
            try:
                task = Task.model_validate(record)
            except ValidationError as exc:
                logger.warning("Skipping malformed saved task: {}", exc.errors()[0]["msg"])
                continue
            if task.id in seen:
                logger.warning("Skipping saved task with duplicate id {}", task.id)
                continue
            seen.add(task.id)
            tasks.append(task)

        self._set_state(tasks)
        logger.info(
            "Rehydrated {} task(s), {} active, from '{}'",
            len(self._tasks),
            self._active_tasks_count,
            self._key,
        )


def _extract_task_records(data: object) -> list | None:
    """Pull the raw task list out of a persisted envelope."""
    if not isinstance(data, dict):
        return None
    state = data.get("state", {})
    if not isinstance(state, dict):
        return None
    records = state.get("tasks", [])
    return records if isinstance(records, list) else None
