"""Todo-specific specifications."""

from __future__ import annotations

from datetime import datetime

from todopro_core.models.specification import Specification
from todopro_core.models.todo import (
    OVERDUE_AFTER_DAYS,
    Todo,
    TodoPriority,
    normalize_timestamp,
    utc_now,
)


class CompletedTodoSpecification(Specification[Todo]):
    def is_satisfied_by(self, candidate: Todo) -> bool:
        return candidate.completed


class ActiveTodoSpecification(Specification[Todo]):
    def is_satisfied_by(self, candidate: Todo) -> bool:
        return not candidate.completed


class PriorityTodoSpecification(Specification[Todo]):
    """Matches todos with exactly the given priority level."""

    def __init__(self, level: str | TodoPriority):
        self.priority = level if isinstance(level, TodoPriority) else TodoPriority(level)

    def is_satisfied_by(self, candidate: Todo) -> bool:
        return candidate.priority.equals(self.priority)


class HighPriorityTodoSpecification(PriorityTodoSpecification):
    def __init__(self):
        super().__init__("high")


class OverdueTodoSpecification(Specification[Todo]):
    """Active todos created more than seven whole days before ``current_date``.

    The reference date is fixed when the specification is built so that
    evaluation stays pure.
    """

    def __init__(self, current_date: datetime | None = None):
        self.current_date = (
            normalize_timestamp(current_date) if current_date is not None else utc_now()
        )

    def is_satisfied_by(self, candidate: Todo) -> bool:
        if candidate.completed:
            return False
        days_since_creation = (self.current_date - candidate.created_at).days
        return days_since_creation > OVERDUE_AFTER_DAYS


class DueBeforeTodoSpecification(Specification[Todo]):
    """Todos with a due date strictly before ``moment``."""

    def __init__(self, moment: datetime):
        self.moment = normalize_timestamp(moment)

    def is_satisfied_by(self, candidate: Todo) -> bool:
        return candidate.due_date is not None and candidate.due_date < self.moment


class TitleContainsTodoSpecification(Specification[Todo]):
    """Case-insensitive substring match on the title."""

    def __init__(self, text: str):
        self.text = text.lower()

    def is_satisfied_by(self, candidate: Todo) -> bool:
        return self.text in candidate.title_value.lower()
