"""SQLite implementation of TodoRepository."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any

from todopro_core.adapters.base import DriverTodoRepository, Record, TodoStorageDriver
from todopro_core.adapters.sqlite.connection import MEMORY_PATH, get_connection
from todopro_core.adapters.sqlite.utils import (
    build_update_clause,
    generate_id,
    parse_datetime,
    row_to_dict,
    to_iso,
)
from todopro_core.models import IdentityFactory

_TIMESTAMP_COLUMNS = ("created_at", "due_date")


def _to_columns(values: Record) -> Record:
    columns = dict(values)
    for key in _TIMESTAMP_COLUMNS:
        if key in columns:
            columns[key] = to_iso(columns[key])
    if "completed" in columns:
        columns["completed"] = int(columns["completed"])
    return columns


def _completed_clause(completed: bool | None) -> tuple[str, list[Any]]:
    if completed is None:
        return "", []
    return " WHERE completed = ?", [int(completed)]


class SqliteTodoDriver(TodoStorageDriver):
    """Driver issuing plain SQL against the ``todos`` table."""

    name = "sqlite"

    def __init__(self, db_path: str | Path | None = None):
        """Initialize SQLite todo driver.

        Args:
            db_path: Optional database file path or ``:memory:``.
                If None, uses default location.
        """
        self.db_path = db_path
        self._connection: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = get_connection(self.db_path)
        return self._connection

    def insert(self, record: Record) -> str:
        todo_id = generate_id()
        columns = {"id": todo_id, **_to_columns(record)}
        placeholders = ", ".join("?" for _ in columns)
        with self.connection:
            self.connection.execute(
                f"INSERT INTO todos ({', '.join(columns)}) VALUES ({placeholders})",
                list(columns.values()),
            )
        return todo_id

    def fetch_one(self, todo_id: str) -> sqlite3.Row | None:
        cursor = self.connection.execute("SELECT * FROM todos WHERE id = ?", (todo_id,))
        return cursor.fetchone()

    def fetch_many(self, completed: bool | None = None) -> list[sqlite3.Row]:
        where, params = _completed_clause(completed)
        cursor = self.connection.execute(
            f"SELECT * FROM todos{where} ORDER BY created_at DESC", params
        )
        return cursor.fetchall()

    def map_row(self, row: Any) -> Record:
        data = row_to_dict(row)
        data["completed"] = bool(data["completed"])
        data["created_at"] = parse_datetime(data["created_at"])
        data["due_date"] = parse_datetime(data.get("due_date"))
        return data

    def update(self, todo_id: str, values: Record) -> bool:
        set_clause, params = build_update_clause(_to_columns(values))
        with self.connection:
            cursor = self.connection.execute(
                f"UPDATE todos SET {set_clause} WHERE id = ?", [*params, todo_id]
            )
        return cursor.rowcount > 0

    def delete(self, todo_id: str) -> bool:
        with self.connection:
            cursor = self.connection.execute("DELETE FROM todos WHERE id = ?", (todo_id,))
        return cursor.rowcount > 0

    def count(self, completed: bool | None = None) -> int:
        where, params = _completed_clause(completed)
        cursor = self.connection.execute(f"SELECT COUNT(*) FROM todos{where}", params)
        return cursor.fetchone()[0]

    def clear(self) -> None:
        with self.connection:
            self.connection.execute("DELETE FROM todos")

    def close(self) -> None:
        # Shared file connections are closed at exit
        if self._connection is not None and str(self.db_path) == MEMORY_PATH:
            self._connection.close()
            self._connection = None


class SqliteTodoRepository(DriverTodoRepository):
    """SQLite implementation of todo repository."""

    def __init__(
        self,
        db_path: str | Path | None = None,
        identity_factory: IdentityFactory | None = None,
    ):
        super().__init__(SqliteTodoDriver(db_path), identity_factory)
