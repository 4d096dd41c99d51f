"""In-memory todo storage, held in process memory only."""

from __future__ import annotations

import uuid
from typing import Any

from todopro_core.adapters.base import DriverTodoRepository, Record, TodoStorageDriver
from todopro_core.models import IdentityFactory


class InMemoryTodoDriver(TodoStorageDriver):
    """Dict-backed driver mapping identity strings to record snapshots.

    Records are copied on the way in and out so callers never share mutable
    state with the store. Concurrent writers resolve last-writer-wins.
    """

    name = "memory"

    def __init__(self):
        self._records: dict[str, Record] = {}

    def insert(self, record: Record) -> str:
        todo_id = uuid.uuid4().hex
        self._records[todo_id] = {**record, "id": todo_id}
        return todo_id

    def fetch_one(self, todo_id: str) -> Record | None:
        record = self._records.get(todo_id)
        return dict(record) if record is not None else None

    def fetch_many(self, completed: bool | None = None) -> list[Record]:
        return [
            dict(record)
            for record in self._records.values()
            if completed is None or record["completed"] is completed
        ]

    def map_row(self, row: Any) -> Record:
        return row

    def update(self, todo_id: str, values: Record) -> bool:
        if todo_id not in self._records:
            return False
        self._records[todo_id] = {**self._records[todo_id], **values}
        return True

    def delete(self, todo_id: str) -> bool:
        return self._records.pop(todo_id, None) is not None

    def count(self, completed: bool | None = None) -> int:
        return len(self.fetch_many(completed))

    def clear(self) -> None:
        self._records.clear()


class InMemoryTodoRepository(DriverTodoRepository):
    """Todo repository that keeps everything in process memory."""

    def __init__(self, identity_factory: IdentityFactory | None = None):
        super().__init__(InMemoryTodoDriver(), identity_factory)
