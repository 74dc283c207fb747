"""Pydantic models for SimpleTask.

These models describe the task records that the store keeps in memory and
serializes to local storage.
"""

from pydantic import BaseModel, ConfigDict, Field, StrictBool, model_validator

from simpletask.validation import MAX_TEXT_LENGTH


class Task(BaseModel):
    """A task item in the to-do list."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique identifier for the task")
    text_content: str = Field(
        ...,
        min_length=1,
        max_length=MAX_TEXT_LENGTH,
        description="The trimmed task text (1-1000 characters)",
    )
    is_completed: StrictBool = Field(default=False, description="Whether the task has been completed")
    created_at: int = Field(..., description="Creation time, ms since epoch")
    completed_at: int | None = Field(
        default=None,
        description="Completion time, ms since epoch; None while incomplete",
    )
    last_interacted_at: int = Field(
        ...,
        description="Time of creation or the most recent completion toggle, ms since epoch",
    )

    @model_validator(mode="after")
    def check_consistency(self) -> "Task":
        if self.text_content != self.text_content.strip():
            raise ValueError("text_content must not have leading or trailing whitespace")
        if self.is_completed != (self.completed_at is not None):
            raise ValueError("completed_at must be set exactly when is_completed is true")
        return self


class TaskSnapshot(BaseModel):
    """Read-only view of the store's state."""

    model_config = ConfigDict(frozen=True)

    tasks: tuple[Task, ...] = ()
    active_tasks_count: int = 0


class StoredTasks(BaseModel):
    """The part of the store's state that is persisted."""

    tasks: list[Task] = Field(default_factory=list)


class PersistedState(BaseModel):
    """Envelope written to local storage under the store's key.

    The active task count is deliberately absent; it is recomputed on load.
    """

    state: StoredTasks = Field(default_factory=StoredTasks)
    version: int = 0


class HealthResponse(BaseModel):
    """Response from the health check endpoint."""

    status: str = "healthy"
    version: str = "1.0.0"
