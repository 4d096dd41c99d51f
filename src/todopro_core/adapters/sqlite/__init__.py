"""SQLite adapter module - Local database storage implementation."""

from todopro_core.adapters.sqlite.connection import DatabaseConnection, get_connection
from todopro_core.adapters.sqlite.todo_repository import (
    SqliteTodoDriver,
    SqliteTodoRepository,
)

__all__ = [
    "SqliteTodoRepository",
    "SqliteTodoDriver",
    "DatabaseConnection",
    "get_connection",
]
