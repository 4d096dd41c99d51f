"""Todo entity and its value objects.

All models here are frozen pydantic models: a change always produces a new
instance. Construction failures surface as ``ValidationFailure`` (with the
offending field and violated constraint), never as a raw pydantic error.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from todopro_core.models.exceptions import (
    InvalidTodoPriority,
    InvalidTodoTitle,
    TodoAlreadyCompleted,
    ValidationFailure,
)
from todopro_core.models.identity import Identity

TITLE_MIN_LENGTH = 2
TITLE_MAX_LENGTH = 255
OVERDUE_AFTER_DAYS = 7

PriorityLevel = Literal["low", "medium", "high"]
PRIORITY_VALUES: dict[str, int] = {"low": 1, "medium": 2, "high": 3}


def normalize_timestamp(value: Any) -> datetime | None:
    """Coerce a timestamp to an aware UTC datetime with millisecond precision.

    Naive datetimes (and naive ISO strings) are taken to be UTC already.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if not isinstance(value, datetime):
        raise TypeError(f"expected a datetime, got {type(value).__name__}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    else:
        value = value.astimezone(UTC)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def utc_now() -> datetime:
    return normalize_timestamp(datetime.now(UTC))


def _validation_failure(exc: ValidationError) -> ValidationFailure:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ())) or "todo"
    cause = error.get("ctx", {}).get("error")
    reason = str(cause) if cause is not None else error.get("msg", str(exc))
    return ValidationFailure(field, reason)


class DomainModel(BaseModel):
    """Frozen pydantic base translating validation errors to ValidationFailure."""

    model_config = ConfigDict(
        frozen=True, arbitrary_types_allowed=True, extra="forbid"
    )

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise _validation_failure(exc) from exc


class TodoTitle(DomainModel):
    """Todo title: 2-255 characters once surrounding whitespace is trimmed."""

    value: str

    def __init__(self, value: Any = None, **data: Any):
        super().__init__(value=value, **data)

    @field_validator("value", mode="before")
    @classmethod
    def validate_value(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise InvalidTodoTitle("cannot be empty")
        title = v.strip()
        if len(title) > TITLE_MAX_LENGTH:
            raise InvalidTodoTitle(f"cannot exceed {TITLE_MAX_LENGTH} characters")
        if len(title) < TITLE_MIN_LENGTH:
            raise InvalidTodoTitle(
                f"must be at least {TITLE_MIN_LENGTH} characters long"
            )
        return title

    def equals(self, other: TodoTitle) -> bool:
        return self.value == other.value

    def __str__(self) -> str:
        return self.value


class TodoPriority(DomainModel):
    """Priority level of a todo (low < medium < high)."""

    level: PriorityLevel = "medium"

    def __init__(self, level: Any = "medium", **data: Any):
        super().__init__(level=level, **data)

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: Any) -> str:
        if isinstance(v, str) and v.strip().lower() in PRIORITY_VALUES:
            return v.strip().lower()
        raise InvalidTodoPriority(v)

    @property
    def numeric_value(self) -> int:
        return PRIORITY_VALUES[self.level]

    def is_higher_than(self, other: TodoPriority) -> bool:
        return self.numeric_value > other.numeric_value

    def equals(self, other: TodoPriority) -> bool:
        return self.level == other.level

    def __str__(self) -> str:
        return self.level


def coerce_title(value: Any) -> TodoTitle:
    """Accept a TodoTitle, a raw string or a ``{"value": ...}`` shape."""
    if isinstance(value, TodoTitle):
        return value
    if isinstance(value, Mapping):
        return TodoTitle(value.get("value"))
    return TodoTitle(value)


def coerce_priority(value: Any) -> TodoPriority:
    """Accept a TodoPriority, a raw level or a ``{"level": ...}`` shape."""
    if isinstance(value, TodoPriority):
        return value
    if value is None:
        return TodoPriority()
    if isinstance(value, Mapping):
        return TodoPriority(value.get("level"))
    return TodoPriority(value)


def _coerce_identity(value: Any) -> Identity | None:
    if value is None or isinstance(value, Identity):
        return value
    return Identity(value)


class Todo(DomainModel):
    """Immutable todo entity.

    Attributes:
        id: Identity assigned by a repository; None while transient
        title: Validated title value object
        completed: Completion flag
        priority: Priority value object (default medium)
        created_at: Creation timestamp (UTC, millisecond precision)
        due_date: Optional due timestamp (UTC, millisecond precision)
    """

    id: Identity | None = None
    title: TodoTitle
    completed: bool = False
    priority: TodoPriority = Field(default_factory=TodoPriority)
    created_at: datetime = Field(
        default_factory=utc_now,
        validation_alias=AliasChoices("created_at", "createdAt"),
    )
    due_date: datetime | None = Field(
        default=None, validation_alias=AliasChoices("due_date", "dueDate")
    )

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> Identity | None:
        return _coerce_identity(v)

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: Any) -> TodoTitle:
        return coerce_title(v)

    @field_validator("priority", mode="before")
    @classmethod
    def validate_priority(cls, v: Any) -> TodoPriority:
        return coerce_priority(v)

    @field_validator("created_at", "due_date", mode="before")
    @classmethod
    def validate_timestamps(cls, v: Any) -> datetime | None:
        try:
            return normalize_timestamp(v)
        except (TypeError, ValueError) as e:
            raise ValueError(f"invalid timestamp: {e}") from e

    @property
    def title_value(self) -> str:
        return self.title.value

    @property
    def string_id(self) -> str | None:
        return self.id.value if self.id is not None else None

    def with_changes(self, **changes: Any) -> Todo:
        """Return a copy with ``changes`` applied and re-validated.

        ``id`` may only be set on a transient todo; ``created_at`` never changes.
        """
        if "created_at" in changes:
            raise ValidationFailure("created_at", "cannot be changed")
        if "id" in changes and self.id is not None:
            raise ValidationFailure("id", "cannot be changed once assigned")
        data = {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "priority": self.priority,
            "created_at": self.created_at,
            "due_date": self.due_date,
        }
        data.update(changes)
        return type(self)(**data)

    def with_id(self, todo_id: Identity) -> Todo:
        return self.with_changes(id=todo_id)

    def toggle(self) -> Todo:
        return self.with_changes(completed=not self.completed)

    def can_be_completed(self) -> bool:
        return not self.completed

    def complete(self) -> Todo:
        if not self.can_be_completed():
            raise TodoAlreadyCompleted()
        return self.with_changes(completed=True)

    def reopen(self) -> Todo:
        return self.with_changes(completed=False)

    def update_title(self, title: str | TodoTitle) -> Todo:
        return self.with_changes(title=title)

    def update_priority(self, priority: str | TodoPriority) -> Todo:
        return self.with_changes(priority=priority)

    def update_due_date(self, due_date: datetime | None) -> Todo:
        return self.with_changes(due_date=due_date)

    def is_overdue(self, now: datetime | None = None) -> bool:
        """Whether the todo is late.

        A due date in the past makes a todo overdue; without a due date it is
        overdue once it is more than seven days old. Completed todos never are.
        """
        if self.completed:
            return False
        now = normalize_timestamp(now) if now is not None else utc_now()
        if self.due_date is not None:
            return now > self.due_date
        return self.created_at < now - timedelta(days=OVERDUE_AFTER_DAYS)

    def equals(self, other: Todo) -> bool:
        """Identity-based equality; transient todos are never equal."""
        if self.id is None or other.id is None:
            return False
        return self.id.equals(other.id)

    def ensure_valid(self) -> None:
        """Check invariants spanning several fields.

        Raises:
            ValidationFailure: If the due date precedes the creation date
        """
        if self.due_date is not None and self.due_date < self.created_at:
            raise ValidationFailure("due_date", "Due date cannot be before creation date")


class TodoChanges(DomainModel):
    """Partial update payload for a todo.

    Title and priority may arrive as primitives or as value-object shapes
    (``{"value": ...}`` / ``{"level": ...}``); both resolve to value objects.
    Only supplied fields are applied. Passing ``due_date=None`` clears the due
    date, while ``None`` for any other field is ignored.
    """

    model_config = ConfigDict(
        frozen=True, arbitrary_types_allowed=True, extra="forbid", populate_by_name=True
    )

    title: TodoTitle | None = None
    completed: bool | None = None
    priority: TodoPriority | None = None
    due_date: datetime | None = Field(
        default=None, validation_alias=AliasChoices("due_date", "dueDate")
    )

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: Any) -> TodoTitle | None:
        return None if v is None else coerce_title(v)

    @field_validator("priority", mode="before")
    @classmethod
    def validate_priority(cls, v: Any) -> TodoPriority | None:
        return None if v is None else coerce_priority(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def validate_due_date(cls, v: Any) -> datetime | None:
        try:
            return normalize_timestamp(v)
        except (TypeError, ValueError) as e:
            raise ValueError(f"invalid timestamp: {e}") from e

    @classmethod
    def from_payload(cls, changes: TodoChanges | Mapping[str, Any] | None) -> TodoChanges:
        if isinstance(changes, TodoChanges):
            return changes
        return cls(**dict(changes or {}))

    def supplied(self) -> dict[str, Any]:
        """Fields to apply, keyed by entity attribute name."""
        result = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if value is None and name != "due_date":
                continue
            result[name] = value
        return result

    def is_empty(self) -> bool:
        return not self.supplied()

    def apply_to(self, todo: Todo) -> Todo:
        return todo.with_changes(**self.supplied())
