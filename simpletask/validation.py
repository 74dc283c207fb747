"""Content checks for task text."""

from dataclasses import dataclass

MAX_TEXT_LENGTH = 1000

EMPTY_MESSAGE = "Task content cannot be empty"
TOO_LONG_MESSAGE = "Task content is too long"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation check: pass, or fail with a reason."""

    ok: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.ok


class TaskValidationError(ValueError):
    """Raised when task text is rejected in a way the caller must hear about."""

    def __init__(self, result: ValidationResult) -> None:
        super().__init__(result.reason)
        self.result = result


def validate_text_content(text: str) -> ValidationResult:
    """Validate already-trimmed task text against the content rules."""
    if not text:
        return ValidationResult(ok=False, reason=EMPTY_MESSAGE)
    if len(text) > MAX_TEXT_LENGTH:
        return ValidationResult(ok=False, reason=TOO_LONG_MESSAGE)
    return ValidationResult(ok=True)
