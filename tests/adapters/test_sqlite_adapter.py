"""Tests specific to the SQLite todo adapter."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from todopro_core.adapters.sqlite import SqliteTodoRepository
from todopro_core.adapters.sqlite.connection import DatabaseConnection
from todopro_core.models import (
    IdentityFactory,
    IdentityRegistryError,
    IdentityValidatorRegistry,
    ObjectIdValidator,
    Todo,
)


@pytest.fixture(autouse=True)
def reset_connections():
    DatabaseConnection.close_all()
    yield
    DatabaseConnection.close_all()


class TestFilePersistence:
    @pytest.mark.asyncio
    async def test_data_visible_to_second_repository(self, tmp_path):
        db = tmp_path / "todos.db"
        todo_id = await SqliteTodoRepository(db_path=db).create(Todo(title="Buy milk"))

        other = SqliteTodoRepository(db_path=str(db))
        stored = await other.get_by_id(todo_id)

        assert stored is not None
        assert stored.title_value == "Buy milk"

    @pytest.mark.asyncio
    async def test_survives_reconnect(self, tmp_path):
        db = tmp_path / "todos.db"
        todo_id = await SqliteTodoRepository(db_path=db).create(Todo(title="Buy milk"))
        DatabaseConnection.close_all()

        assert await SqliteTodoRepository(db_path=db).count() == 1
        assert (await SqliteTodoRepository(db_path=db).get_by_id(todo_id)) is not None

    @pytest.mark.asyncio
    async def test_memory_repositories_are_isolated(self):
        first = SqliteTodoRepository(db_path=":memory:")
        second = SqliteTodoRepository(db_path=":memory:")
        await first.create(Todo(title="Buy milk"))
        assert await second.count() == 0
        first.close()
        second.close()


class TestStoredFormat:
    @pytest.mark.asyncio
    async def test_timestamps_stored_as_iso_strings(self, tmp_path):
        repo = SqliteTodoRepository(db_path=tmp_path / "todos.db")
        created = datetime(2024, 5, 1, 9, 0, 0, 250000, tzinfo=UTC)
        todo_id = await repo.create(Todo(title="Buy milk", created_at=created))

        row = repo.driver.connection.execute(
            "SELECT created_at, due_date, completed FROM todos WHERE id = ?", (todo_id,)
        ).fetchone()

        assert row["created_at"] == "2024-05-01T09:00:00.250+00:00"
        assert row["due_date"] is None
        assert row["completed"] == 0

    @pytest.mark.asyncio
    async def test_ids_are_uuid_hex(self):
        repo = SqliteTodoRepository(db_path=":memory:")
        todo_id = await repo.create(Todo(title="Buy milk"))
        assert len(todo_id) == 32
        assert (await repo.get_by_id(todo_id)).id.is_uuid()
        repo.close()


class TestIdentityRegistry:
    @pytest.mark.asyncio
    async def test_objectid_only_registry_rejected_before_any_write(self, tmp_path):
        db = tmp_path / "todos.db"
        objectid_only = IdentityFactory(IdentityValidatorRegistry([ObjectIdValidator()]))

        with pytest.raises(IdentityRegistryError, match="sqlite allocates uuid"):
            SqliteTodoRepository(db_path=db, identity_factory=objectid_only)

        assert await SqliteTodoRepository(db_path=db).count() == 0
