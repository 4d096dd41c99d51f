"""Unit tests for TodoService (services/todo_service.py).

The service runs against a real in-memory repository; repository errors are
simulated with AsyncMock where needed.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from todopro_core.adapters.in_memory import InMemoryTodoRepository
from todopro_core.models import (
    InvalidTodoPriority,
    InvalidTodoTitle,
    NotFoundError,
    Todo,
    TodoAlreadyCompleted,
    ValidationFailure,
)
from todopro_core.models.todo import utc_now
from todopro_core.services.todo_service import TodoService, TodoStats, overdue_specification

UNKNOWN_ID = "123e4567e89b12d3a456426614174000"


@pytest.fixture()
def repo() -> InMemoryTodoRepository:
    return InMemoryTodoRepository()


@pytest.fixture()
def service(repo) -> TodoService:
    return TodoService(repo)


async def _seed(repo, title, *, days_old=0, **fields) -> str:
    created = utc_now() - timedelta(days=days_old)
    return await repo.create(Todo(title=title, created_at=created, **fields))


# ---------------------------------------------------------------------------
# add / get
# ---------------------------------------------------------------------------


class TestAddTodo:
    @pytest.mark.asyncio
    async def test_returns_stored_todo(self, service):
        todo = await service.add_todo("Buy milk", priority="high")
        assert todo.id is not None
        assert todo.title_value == "Buy milk"
        assert todo.priority.level == "high"
        assert todo.completed is False

    @pytest.mark.asyncio
    async def test_due_date_string_parsed(self, service):
        todo = await service.add_todo("Buy milk", due_date="2999-01-01T10:00:00Z")
        assert todo.due_date == datetime(2999, 1, 1, 10, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_invalid_title(self, service, repo):
        with pytest.raises(InvalidTodoTitle):
            await service.add_todo(" ")
        assert await repo.count() == 0

    @pytest.mark.asyncio
    async def test_invalid_priority(self, service):
        with pytest.raises(InvalidTodoPriority):
            await service.add_todo("Buy milk", priority="urgent")

    @pytest.mark.asyncio
    async def test_due_date_in_past(self, service):
        with pytest.raises(ValidationFailure):
            await service.add_todo("Buy milk", due_date="2000-01-01T00:00:00Z")


class TestGetTodo:
    @pytest.mark.asyncio
    async def test_found(self, service, repo):
        todo_id = await _seed(repo, "Buy milk")
        assert (await service.get_todo(todo_id)).string_id == todo_id

    @pytest.mark.asyncio
    async def test_missing_raises(self, service):
        with pytest.raises(NotFoundError):
            await service.get_todo(UNKNOWN_ID)


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


class TestListTodos:
    @pytest_asyncio.fixture()
    async def seeded(self, repo):
        await _seed(repo, "Old low", days_old=20, priority="low")
        await _seed(repo, "Done high", days_old=3, priority="high", completed=True)
        await _seed(repo, "Fresh high", days_old=1, priority="high")
        await _seed(repo, "Fresh medium", priority="medium")

    @pytest.mark.asyncio
    async def test_all_newest_first(self, service, seeded):
        titles = [t.title_value for t in await service.list_todos()]
        assert titles == ["Fresh medium", "Fresh high", "Done high", "Old low"]

    @pytest.mark.asyncio
    async def test_status_filters(self, service, seeded):
        active = [t.title_value for t in await service.list_todos(status="active")]
        done = [t.title_value for t in await service.list_todos(status="completed")]
        assert active == ["Fresh medium", "Fresh high", "Old low"]
        assert done == ["Done high"]

    @pytest.mark.asyncio
    async def test_combined_filters(self, service, seeded):
        todos = await service.list_todos(status="active", high_priority=True)
        assert [t.title_value for t in todos] == ["Fresh high"]

    @pytest.mark.asyncio
    async def test_overdue_filter(self, service, seeded):
        todos = await service.list_todos(overdue=True)
        assert [t.title_value for t in todos] == ["Old low"]

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, service, seeded):
        todos = await service.list_todos(search="FRESH")
        assert [t.title_value for t in todos] == ["Fresh medium", "Fresh high"]

    @pytest.mark.asyncio
    async def test_sort_by_urgency(self, service, seeded):
        titles = [t.title_value for t in await service.list_todos(sort="urgency")]
        # Old low: 1 * (1 + 20/7) > Fresh high: 3 * (1 + 1/7) > Fresh medium: 2
        assert titles == ["Old low", "Fresh high", "Fresh medium", "Done high"]


# ---------------------------------------------------------------------------
# update / status changes / delete
# ---------------------------------------------------------------------------


class TestUpdateTodo:
    @pytest.mark.asyncio
    async def test_updates_only_given_fields(self, service, repo):
        todo_id = await _seed(repo, "Buy milk", priority="low")
        todo = await service.update_todo(todo_id, title="Buy oat milk")
        assert todo.title_value == "Buy oat milk"
        assert todo.priority.level == "low"

    @pytest.mark.asyncio
    async def test_clear_due_date(self, service, repo):
        todo_id = await _seed(repo, "Buy milk", due_date=utc_now() + timedelta(days=1))
        todo = await service.update_todo(todo_id, clear_due_date=True)
        assert todo.due_date is None

    @pytest.mark.asyncio
    async def test_missing(self, service):
        with pytest.raises(NotFoundError):
            await service.update_todo(UNKNOWN_ID, title="Buy milk")


class TestStatusChanges:
    @pytest.mark.asyncio
    async def test_complete(self, service, repo):
        todo_id = await _seed(repo, "Buy milk")
        assert (await service.complete_todo(todo_id)).completed is True
        assert (await repo.get_by_id(todo_id)).completed is True

    @pytest.mark.asyncio
    async def test_complete_twice(self, service, repo):
        todo_id = await _seed(repo, "Buy milk", completed=True)
        with pytest.raises(TodoAlreadyCompleted):
            await service.complete_todo(todo_id)

    @pytest.mark.asyncio
    async def test_reopen(self, service, repo):
        todo_id = await _seed(repo, "Buy milk", completed=True)
        await service.reopen_todo(todo_id)
        assert (await repo.get_by_id(todo_id)).completed is False

    @pytest.mark.asyncio
    async def test_toggle_twice(self, service, repo):
        todo_id = await _seed(repo, "Buy milk")
        assert (await service.toggle_todo(todo_id)).completed is True
        assert (await service.toggle_todo(todo_id)).completed is False

    @pytest.mark.asyncio
    async def test_delete(self, service, repo):
        todo_id = await _seed(repo, "Buy milk")
        await service.delete_todo(todo_id)
        assert await repo.get_by_id(todo_id) is None

    @pytest.mark.asyncio
    async def test_delete_missing(self, service):
        with pytest.raises(NotFoundError):
            await service.delete_todo(UNKNOWN_ID)

    @pytest.mark.asyncio
    async def test_repository_error_propagates(self):
        repo = AsyncMock()
        repo.delete.side_effect = NotFoundError(UNKNOWN_ID)
        with pytest.raises(NotFoundError):
            await TodoService(repo).delete_todo(UNKNOWN_ID)


# ---------------------------------------------------------------------------
# stats / overdue
# ---------------------------------------------------------------------------


class TestStats:
    @pytest.mark.asyncio
    async def test_empty(self, service):
        assert await service.get_stats() == TodoStats(
            total=0, active=0, completed=0, overdue=0, high_priority=0
        )

    @pytest.mark.asyncio
    async def test_counts(self, service, repo):
        await _seed(repo, "Old", days_old=10)
        await _seed(repo, "High", priority="high")
        await _seed(repo, "Done", priority="high", completed=True, days_old=30)

        stats = await service.get_stats()

        assert stats.total == 3
        assert stats.active == 2
        assert stats.completed == 1
        assert stats.overdue == 1
        assert stats.high_priority == 2


class TestOverdueSpecification:
    def test_past_due_date(self):
        now = datetime(2024, 5, 10, tzinfo=UTC)
        todo = Todo(
            title="Pay rent",
            created_at=datetime(2024, 5, 1, tzinfo=UTC),
            due_date=datetime(2024, 5, 5, tzinfo=UTC),
        )
        assert overdue_specification(now).is_satisfied_by(todo)

    def test_future_due_date_on_old_todo(self):
        now = datetime(2024, 5, 30, tzinfo=UTC)
        todo = Todo(
            title="Pay rent",
            created_at=datetime(2024, 5, 1, tzinfo=UTC),
            due_date=datetime(2024, 6, 5, tzinfo=UTC),
        )
        assert not overdue_specification(now).is_satisfied_by(todo)
