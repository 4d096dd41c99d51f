"""Business rules that span a todo's fields or several todos."""

from __future__ import annotations

from datetime import datetime

from todopro_core.models import Todo
from todopro_core.models.todo import normalize_timestamp, utc_now

MAX_AGE_MULTIPLIER = 3


class TodoDomainService:
    """Stateless todo rules: urgency scoring and business ordering."""

    @staticmethod
    def days_since_creation(todo: Todo, current_date: datetime | None = None) -> int:
        current_date = normalize_timestamp(current_date) if current_date else utc_now()
        return (current_date - todo.created_at).days

    @classmethod
    def calculate_urgency_score(cls, todo: Todo, current_date: datetime | None = None) -> float:
        """Priority weight scaled by age, up to 4x after three weeks.

        Completed todos score 0.
        """
        if todo.completed:
            return 0
        age_weight = min(cls.days_since_creation(todo, current_date) / 7, MAX_AGE_MULTIPLIER)
        return todo.priority.numeric_value * (1 + age_weight)

    @staticmethod
    def can_complete(todo: Todo) -> tuple[bool, str | None]:
        """Whether ``todo`` may be completed, with the reason when not."""
        if todo.completed:
            return False, "Todo is already completed"
        return True, None

    @classmethod
    def sort_by_priority(
        cls, todos: list[Todo], current_date: datetime | None = None
    ) -> list[Todo]:
        """Active todos first, each group by urgency score, highest first."""
        current_date = normalize_timestamp(current_date) if current_date else utc_now()
        return sorted(
            todos,
            key=lambda todo: (
                todo.completed,
                -cls.calculate_urgency_score(todo, current_date),
            ),
        )
