"""
Strategy Pattern: Storage Strategy Container

Each storage backend is a strategy that builds its todo repository once. The
StorageStrategyContext holds the strategy chosen at startup and hands the
repository to services, which never know which backend they are using.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from todopro_core.models.config_models import StorageContext
from todopro_core.repositories import TodoRepository


class StorageStrategy(ABC):
    """
    Abstract base class for storage strategies.

    Adapter modules are imported inside each strategy so that a backend's
    driver library is only loaded when that backend is selected.
    """

    @abstractmethod
    def get_todo_repository(self) -> TodoRepository:
        """Get todo repository implementation for this strategy."""

    @property
    @abstractmethod
    def storage_type(self) -> str:
        """Get storage type identifier (for logging/debugging)."""


class MemoryStorageStrategy(StorageStrategy):
    """Process-memory storage; data is lost when the process exits."""

    def __init__(self):
        from todopro_core.adapters.in_memory import InMemoryTodoRepository

        self._todo_repo = InMemoryTodoRepository()

    def get_todo_repository(self) -> TodoRepository:
        return self._todo_repo

    @property
    def storage_type(self) -> str:
        return "memory"


class SqliteStorageStrategy(StorageStrategy):
    """
    Local SQLite storage strategy using the stdlib driver.
    """

    def __init__(self, db_path: str):
        """
        Initialize local strategy.

        Args:
            db_path: Path to SQLite database file
        """
        from todopro_core.adapters.sqlite import SqliteTodoRepository

        self.db_path = db_path
        self._todo_repo = SqliteTodoRepository(db_path=db_path)

    def get_todo_repository(self) -> TodoRepository:
        return self._todo_repo

    @property
    def storage_type(self) -> str:
        return "sqlite"


class SqlAlchemyStorageStrategy(StorageStrategy):
    """Relational storage through SQLAlchemy; source is a database URL."""

    def __init__(self, url: str):
        from todopro_core.adapters.sqlalchemy_orm import SqlAlchemyTodoRepository

        self.url = url
        self._todo_repo = SqlAlchemyTodoRepository(url)

    def get_todo_repository(self) -> TodoRepository:
        return self._todo_repo

    @property
    def storage_type(self) -> str:
        return "sqlalchemy"


class PeeweeStorageStrategy(StorageStrategy):
    """Active-record storage through peewee; source is a SQLite file path."""

    def __init__(self, db_path: str):
        from todopro_core.adapters.active_record import ActiveRecordTodoRepository

        self.db_path = db_path
        self._todo_repo = ActiveRecordTodoRepository(db_path)

    def get_todo_repository(self) -> TodoRepository:
        return self._todo_repo

    @property
    def storage_type(self) -> str:
        return "peewee"


class MongoStorageStrategy(StorageStrategy):
    """Document storage in MongoDB; source is a connection string."""

    def __init__(self, uri: str):
        from todopro_core.adapters.mongo import MongoTodoRepository

        self.uri = uri
        self._todo_repo = MongoTodoRepository(uri=uri)

    def get_todo_repository(self) -> TodoRepository:
        return self._todo_repo

    @property
    def storage_type(self) -> str:
        return "mongodb"


def create_storage_strategy(context: StorageContext) -> StorageStrategy:
    """Build the strategy for a configured context."""
    if context.backend == "memory":
        return MemoryStorageStrategy()
    if context.backend == "sqlite":
        return SqliteStorageStrategy(db_path=context.source)
    if context.backend == "sqlalchemy":
        return SqlAlchemyStorageStrategy(url=context.source)
    if context.backend == "peewee":
        return PeeweeStorageStrategy(db_path=context.source)
    if context.backend == "mongodb":
        return MongoStorageStrategy(uri=context.source)
    raise ValueError(f"Unknown storage backend: {context.backend}")


class StorageStrategyContext:
    """
    Strategy context that provides access to the todo repository.

    Usage:
        # At startup
        strategy = SqliteStorageStrategy(db_path="/path/to/db")
        context = StorageStrategyContext(strategy)

        # In services
        todo_repo = context.todo_repository
        await todo_repo.create(todo)  # Works regardless of strategy
    """

    def __init__(self, strategy: StorageStrategy):
        """
        Initialize strategy context.

        Args:
            strategy: Storage strategy for the active backend
        """
        self._strategy = strategy

    def switch_strategy(self, new_strategy: StorageStrategy):
        """Switch to a new storage strategy at runtime (advanced use case)."""
        self._strategy = new_strategy

    @property
    def todo_repository(self) -> TodoRepository:
        """Get todo repository from current strategy."""
        return self._strategy.get_todo_repository()

    @property
    def storage_type(self) -> str:
        """Get storage type (for logging/debugging only)."""
        return self._strategy.storage_type

    @property
    def strategy(self) -> StorageStrategy:
        """Get underlying strategy (for advanced use cases)."""
        return self._strategy
