"""Active-record implementation of TodoRepository using peewee.

Each repository binds the ``TodoRecord`` model to its own database for the
duration of every operation, so several repositories can coexist.
"""

from __future__ import annotations

import uuid
from typing import Any

from peewee import (
    BooleanField,
    CharField,
    Database,
    DateTimeField,
    Model,
    SqliteDatabase,
)

from todopro_core.adapters.base import DriverTodoRepository, Record, TodoStorageDriver
from todopro_core.models import IdentityFactory
from todopro_core.models.todo import normalize_timestamp


def _new_id() -> str:
    return uuid.uuid4().hex


class TodoRecord(Model):
    """Active record for one row of the ``todos`` table."""

    id = CharField(primary_key=True, max_length=32, default=_new_id)
    title = CharField(max_length=255)
    completed = BooleanField(default=False, index=True)
    priority = CharField(max_length=10, default="medium")
    created_at = DateTimeField()
    due_date = DateTimeField(null=True)

    class Meta:
        table_name = "todos"


def _to_fields(values: Record) -> Record:
    fields = dict(values)
    for key in ("created_at", "due_date"):
        if fields.get(key) is not None:
            fields[key] = normalize_timestamp(fields[key]).replace(tzinfo=None)
    return fields


class ActiveRecordTodoDriver(TodoStorageDriver):
    """Driver delegating persistence to ``TodoRecord`` instances."""

    name = "peewee"

    def __init__(self, database: Database):
        self.database = database
        self.database.connect(reuse_if_open=True)
        with self.database.bind_ctx([TodoRecord]):
            self.database.create_tables([TodoRecord], safe=True)

    def insert(self, record: Record) -> str:
        with self.database.bind_ctx([TodoRecord]), self.database.atomic():
            instance = TodoRecord.create(**_to_fields(record))
        return instance.id

    def fetch_one(self, todo_id: str) -> TodoRecord | None:
        with self.database.bind_ctx([TodoRecord]):
            return TodoRecord.get_or_none(TodoRecord.id == todo_id)

    def fetch_many(self, completed: bool | None = None) -> list[TodoRecord]:
        with self.database.bind_ctx([TodoRecord]):
            query = TodoRecord.select().order_by(TodoRecord.created_at.desc())
            if completed is not None:
                query = query.where(TodoRecord.completed == completed)
            return list(query)

    def map_row(self, row: Any) -> Record:
        return {
            "id": row.id,
            "title": row.title,
            "completed": row.completed,
            "priority": row.priority,
            "created_at": normalize_timestamp(row.created_at),
            "due_date": normalize_timestamp(row.due_date),
        }

    def update(self, todo_id: str, values: Record) -> bool:
        with self.database.bind_ctx([TodoRecord]), self.database.atomic():
            instance = TodoRecord.get_or_none(TodoRecord.id == todo_id)
            if instance is None:
                return False
            for key, value in _to_fields(values).items():
                setattr(instance, key, value)
            instance.save()
        return True

    def delete(self, todo_id: str) -> bool:
        with self.database.bind_ctx([TodoRecord]), self.database.atomic():
            instance = TodoRecord.get_or_none(TodoRecord.id == todo_id)
            if instance is None:
                return False
            instance.delete_instance()
        return True

    def count(self, completed: bool | None = None) -> int:
        with self.database.bind_ctx([TodoRecord]):
            query = TodoRecord.select()
            if completed is not None:
                query = query.where(TodoRecord.completed == completed)
            return query.count()

    def clear(self) -> None:
        with self.database.bind_ctx([TodoRecord]), self.database.atomic():
            TodoRecord.delete().execute()

    def close(self) -> None:
        if not self.database.is_closed():
            self.database.close()


class ActiveRecordTodoRepository(DriverTodoRepository):
    """Peewee active-record implementation of todo repository."""

    def __init__(
        self,
        database: Database | str | None = None,
        identity_factory: IdentityFactory | None = None,
    ):
        """Initialize the repository.

        Args:
            database: Peewee database, SQLite file path, or None for ``:memory:``
            identity_factory: Optional identity factory
        """
        if database is None or isinstance(database, str):
            database = SqliteDatabase(database or ":memory:")
        super().__init__(ActiveRecordTodoDriver(database), identity_factory)
