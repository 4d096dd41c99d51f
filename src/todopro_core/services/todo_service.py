"""Todo service - Use cases on top of the todo repository.

This service layer sits between commands and repositories. It composes
entity behaviour, specifications and repository calls; it never touches a
storage engine directly.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from todopro_core.models import (
    ActiveTodoSpecification,
    CompletedTodoSpecification,
    HighPriorityTodoSpecification,
    NotFoundError,
    PredicateSpecification,
    Specification,
    TitleContainsTodoSpecification,
    Todo,
    TodoChanges,
)
from todopro_core.models.todo import utc_now
from todopro_core.repositories import TodoRepository
from todopro_core.services.todo_domain_service import TodoDomainService

StatusFilter = Literal["all", "active", "completed"]
SortOrder = Literal["created", "urgency"]


class TodoStats(BaseModel):
    """Counts shown by the stats command."""

    total: int
    active: int
    completed: int
    overdue: int
    high_priority: int


def overdue_specification(now: datetime | None = None) -> Specification[Todo]:
    """Todos that are late at ``now`` (see ``Todo.is_overdue``)."""
    moment = now or utc_now()
    return PredicateSpecification(lambda todo: todo.is_overdue(moment), name="overdue")


class TodoService:
    """Service for todo use cases.

    This service encapsulates business rules and orchestrates todo operations
    using the todo repository.
    """

    def __init__(self, todo_repository: TodoRepository):
        """Initialize the todo service.

        Args:
            todo_repository: TodoRepository implementation for data access
        """
        self.repository = todo_repository

    async def add_todo(
        self,
        title: str,
        *,
        priority: str = "medium",
        due_date: datetime | str | None = None,
    ) -> Todo:
        """Create a new todo.

        Args:
            title: Todo title (2-255 characters)
            priority: "low", "medium" or "high"
            due_date: Optional due date (ISO format or datetime)

        Returns:
            The stored Todo, carrying its new identity
        """
        todo = Todo(title=title, priority=priority, due_date=due_date)
        todo_id = await self.repository.create(todo)
        return await self.get_todo(todo_id)

    async def get_todo(self, todo_id: str) -> Todo:
        """Get a specific todo by ID.

        Raises:
            NotFoundError: If no todo has this ID
        """
        todo = await self.repository.get_by_id(todo_id)
        if todo is None:
            raise NotFoundError(todo_id)
        return todo

    async def list_todos(
        self,
        *,
        status: StatusFilter = "all",
        high_priority: bool = False,
        overdue: bool = False,
        search: str | None = None,
        sort: SortOrder = "created",
    ) -> list[Todo]:
        """List todos matching every given filter.

        Args:
            status: "all", "active" or "completed"
            high_priority: Only high priority todos
            overdue: Only overdue todos
            search: Case-insensitive title substring
            sort: "created" (newest first) or "urgency"

        Returns:
            List of Todo objects matching the criteria
        """
        specs: list[Specification[Todo]] = []
        if status == "active":
            specs.append(ActiveTodoSpecification())
        elif status == "completed":
            specs.append(CompletedTodoSpecification())
        if high_priority:
            specs.append(HighPriorityTodoSpecification())
        if overdue:
            specs.append(overdue_specification())
        if search:
            specs.append(TitleContainsTodoSpecification(search))

        if not specs:
            todos = await self.repository.get_all()
        else:
            combined = specs[0]
            for spec in specs[1:]:
                combined = combined & spec
            todos = await self.repository.find_by_specification(combined)

        if sort == "urgency":
            return TodoDomainService.sort_by_priority(todos)
        return todos

    async def update_todo(
        self,
        todo_id: str,
        *,
        title: str | None = None,
        priority: str | None = None,
        due_date: datetime | str | None = None,
        clear_due_date: bool = False,
    ) -> Todo:
        """Update an existing todo; omitted fields are kept.

        Returns:
            Updated Todo object
        """
        changes: dict = {}
        if title is not None:
            changes["title"] = title
        if priority is not None:
            changes["priority"] = priority
        if clear_due_date:
            changes["due_date"] = None
        elif due_date is not None:
            changes["due_date"] = due_date

        await self.repository.update(todo_id, TodoChanges.from_payload(changes))
        return await self.get_todo(todo_id)

    async def complete_todo(self, todo_id: str) -> Todo:
        """Mark a todo as completed.

        Raises:
            TodoAlreadyCompleted: If the todo is already completed
        """
        todo = (await self.get_todo(todo_id)).complete()
        await self.repository.update(todo_id, {"completed": todo.completed})
        return todo

    async def reopen_todo(self, todo_id: str) -> Todo:
        """Mark a todo as not completed."""
        todo = (await self.get_todo(todo_id)).reopen()
        await self.repository.update(todo_id, {"completed": todo.completed})
        return todo

    async def toggle_todo(self, todo_id: str) -> Todo:
        """Flip a todo's completion flag."""
        todo = (await self.get_todo(todo_id)).toggle()
        await self.repository.update(todo_id, {"completed": todo.completed})
        return todo

    async def delete_todo(self, todo_id: str) -> None:
        await self.repository.delete(todo_id)

    async def get_stats(self) -> TodoStats:
        """Summarise the store."""
        todos = await self.repository.get_all()
        late = overdue_specification()
        high = HighPriorityTodoSpecification()
        completed = sum(1 for todo in todos if todo.completed)
        return TodoStats(
            total=len(todos),
            active=len(todos) - completed,
            completed=completed,
            overdue=sum(1 for todo in todos if late.is_satisfied_by(todo)),
            high_priority=sum(1 for todo in todos if high.is_satisfied_by(todo)),
        )
