"""Custom exceptions for the TodoPro data-access core."""

from __future__ import annotations

from typing import Any


class TodoProCoreError(Exception):
    """Base exception for all TodoPro core errors."""


class NotFoundError(TodoProCoreError):
    """Raised when a todo does not exist in the backing store."""

    def __init__(self, todo_id: str):
        super().__init__(f"Todo with ID {todo_id} not found")
        self.todo_id = todo_id


class ValidationFailure(TodoProCoreError):
    """Raised when an entity or value object violates one of its invariants.

    Attributes:
        field: Name of the offending field (e.g. "title", "id")
        reason: Human-readable description of the violated constraint
    """

    def __init__(self, field: str, reason: str):
        super().__init__(f"Invalid {field}: {reason}")
        self.field = field
        self.reason = reason


class EmptyIdentity(ValidationFailure):
    """Raised when an identity is built from a blank string."""

    def __init__(self):
        super().__init__("id", "Todo ID must be a non-empty string")


class InvalidIdentityFormat(ValidationFailure):
    """Raised when no registered validator accepts an identity string."""

    def __init__(self, supported_types: list[str]):
        self.supported_types = list(supported_types)
        super().__init__(
            "id",
            "Todo ID must be a valid format. Supported formats: "
            + ", ".join(self.supported_types),
        )


class InvalidTodoTitle(ValidationFailure):
    """Raised when a todo title is empty, too short or too long."""

    def __init__(self, reason: str):
        super().__init__("title", reason)


class InvalidTodoPriority(ValidationFailure):
    """Raised when a priority level is not one of low/medium/high."""

    def __init__(self, level: Any):
        super().__init__("priority", f"'{level}' is not one of low, medium, high")


class TodoAlreadyCompleted(ValidationFailure):
    """Raised when completing a todo that is already completed."""

    def __init__(self):
        super().__init__("completed", "Todo is already completed")


class BackendFailure(TodoProCoreError):
    """Opaque wrapper around an unexpected storage driver error."""

    def __init__(self, cause: BaseException, backend: str | None = None):
        prefix = f"{backend} backend failure" if backend else "Backend failure"
        super().__init__(f"{prefix}: {cause}")
        self.cause = cause
        self.backend = backend


class IdentityRegistryError(TodoProCoreError):
    """Raised when the identity validator registry is in an inconsistent state.

    This is an internal error, not a validation failure: it signals that the
    registry is empty, or that classification disagreed with validation.
    """
