"""Storage adapters implementing TodoRepository.

The in-memory and SQLite adapters are imported eagerly; the ORM and document
store adapters pull in their drivers on import and are loaded on demand.
"""

from todopro_core.adapters.base import (
    DriverTodoRepository,
    TodoStorageDriver,
    sort_newest_first,
)
from todopro_core.adapters.in_memory import InMemoryTodoRepository
from todopro_core.adapters.sqlite import SqliteTodoRepository

__all__ = [
    "DriverTodoRepository",
    "TodoStorageDriver",
    "sort_newest_first",
    "InMemoryTodoRepository",
    "SqliteTodoRepository",
]
