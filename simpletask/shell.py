"""Terminal rendering of the task list.

The shell owns no task rules. It draws whatever the store reports and
forwards gestures (submit text, toggle, delete) to the store.
"""

from loguru import logger
from rich.console import Console, Group, RenderableType
from rich.table import Table
from rich.text import Text

from simpletask.models import Task, TaskSnapshot
from simpletask.store import TaskStore
from simpletask.validation import validate_text_content

EMPTY_LIST_MESSAGE = "You have no tasks yet! Start by adding one above."
NO_ACTIVE_MESSAGE = "You have no tasks! Start by adding one."


def header_text(active_tasks_count: int) -> str:
    """Summary line shown above the list."""
    if active_tasks_count == 0:
        return NO_ACTIVE_MESSAGE
    noun = "task" if active_tasks_count == 1 else "tasks"
    return f"You have {active_tasks_count} {noun} to do"


def _task_table(title: str, tasks: list[Task], completed: bool) -> Table:
    table = Table(title=title, title_justify="left", show_header=False, box=None, pad_edge=False)
    table.add_column("done", width=3)
    table.add_column("text", overflow="fold", ratio=1)
    table.add_column("id", style="dim", no_wrap=True)
    for task in tasks:
        mark = "[x]" if completed else "[ ]"
        style = "strike dim italic" if completed else "bold"
        table.add_row(Text(mark), Text(task.text_content, style=style), Text(task.id))
    return table


def render_snapshot(snapshot: TaskSnapshot) -> RenderableType:
    """Build the renderable for one state of the store."""
    parts: list[RenderableType] = [Text(header_text(snapshot.active_tasks_count), style="bold blue")]

    if not snapshot.tasks:
        parts.append(Text(EMPTY_LIST_MESSAGE, style="italic dim"))
        return Group(*parts)

    active = [t for t in snapshot.tasks if not t.is_completed]
    completed = [t for t in snapshot.tasks if t.is_completed]
    if active:
        parts.append(_task_table("Active Tasks", active, completed=False))
    if completed:
        parts.append(_task_table("Completed Tasks", completed, completed=True))
    return Group(*parts)


class TaskShell:
    """Connects a TaskStore to a rich Console."""

    def __init__(self, store: TaskStore, console: Console | None = None, *, live: bool = False) -> None:
        self.store = store
        self.console = console or Console()
        self.live = live
        self._unsubscribe = store.subscribe(self._on_change)

    def render(self) -> None:
        """Draw the current state."""
        self.console.print(render_snapshot(self.store.read()))

    def submit(self, text: str) -> bool:
        """Add a task from user input.

        Returns True when the input was accepted and may be cleared, False
        when it was rejected and should stay in the input box.
        """
        trimmed = text.strip()
        result = validate_text_content(trimmed)
        if not result.ok:
            logger.warning("Validation failed for new task input: {}", result.reason)
            return False
        self.store.add(trimmed)
        return True

    def toggle(self, task_id: str) -> None:
        self.store.toggle_completion(task_id)

    def delete(self, task_id: str) -> None:
        self.store.delete(task_id)

    def close(self) -> None:
        """Stop listening to the store."""
        self._unsubscribe()

    def _on_change(self, snapshot: TaskSnapshot) -> None:
        if self.live:
            self.console.print(render_snapshot(snapshot))
