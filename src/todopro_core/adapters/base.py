"""Generic repository adapter parameterised by a storage driver.

Every backend implements the same ``TodoRepository`` contract through
``DriverTodoRepository``. Serialisation of value objects, partial-update
normalisation, absence mapping, newest-first ordering, specification
filtering and error wrapping live here once; a backend only supplies a
``TodoStorageDriver`` with its engine-specific glue.

Drivers exchange *records* with the repository: plain dicts with the keys
``title`` (str), ``completed`` (bool), ``priority`` (str), ``created_at``
(aware UTC datetime) and ``due_date`` (aware UTC datetime or None). Rows
read back are converted to records (plus ``id``) by ``map_row``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from todopro_core.models import (
    BackendFailure,
    IdentityFactory,
    IdentityRegistryError,
    NotFoundError,
    Specification,
    Todo,
    TodoChanges,
    TodoPriority,
    TodoProCoreError,
    TodoTitle,
)
from todopro_core.repositories import TodoRepository
from todopro_core.utils.logger import get_logger

R = TypeVar("R")

Record = dict[str, Any]


class TodoStorageDriver(ABC):
    """Engine-specific storage operations used by DriverTodoRepository.

    Drivers are synchronous; they never see domain objects, only records.
    """

    name: str = "storage"
    # Identity format of the ids ``insert`` allocates
    id_type: str = "uuid"

    @abstractmethod
    def insert(self, record: Record) -> str:
        """Store a new record and return the identity the backend allocated."""

    @abstractmethod
    def fetch_one(self, todo_id: str) -> Any | None:
        """Return the raw row for ``todo_id`` or None."""

    @abstractmethod
    def fetch_many(self, completed: bool | None = None) -> list[Any]:
        """Return raw rows, optionally filtered by completion flag."""

    @abstractmethod
    def map_row(self, row: Any) -> Record:
        """Convert a raw row into a record carrying an ``id`` key."""

    @abstractmethod
    def update(self, todo_id: str, values: Record) -> bool:
        """Apply ``values`` to the stored row; False if nothing matched."""

    @abstractmethod
    def delete(self, todo_id: str) -> bool:
        """Remove the stored row; False if nothing matched."""

    @abstractmethod
    def count(self, completed: bool | None = None) -> int:
        """Count rows, optionally filtered by completion flag."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every row."""

    def accepts_id(self, todo_id: str) -> bool:
        """Whether ``todo_id`` could name a row in this backend at all."""
        return True

    def map_error(self, error: Exception) -> TodoProCoreError:
        """Translate a driver exception into a core error."""
        return BackendFailure(error, backend=self.name)

    def close(self) -> None:
        """Release driver resources (connections, clients)."""


def todo_to_record(todo: Todo) -> Record:
    """Flatten a todo into a record of primitives."""
    return {
        "title": todo.title_value,
        "completed": todo.completed,
        "priority": todo.priority.level,
        "created_at": todo.created_at,
        "due_date": todo.due_date,
    }


def changes_to_record(values: Mapping[str, Any]) -> Record:
    """Flatten supplied update fields (value objects included) into primitives."""
    record: Record = {}
    for key, value in values.items():
        if isinstance(value, TodoTitle):
            value = value.value
        elif isinstance(value, TodoPriority):
            value = value.level
        record[key] = value
    return record


def sort_newest_first(todos: list[Todo]) -> list[Todo]:
    """Order by creation time, newest first; ties keep their incoming order."""
    return sorted(todos, key=lambda todo: todo.created_at, reverse=True)


class DriverTodoRepository(TodoRepository):
    """TodoRepository implemented once on top of a TodoStorageDriver."""

    def __init__(
        self,
        driver: TodoStorageDriver,
        identity_factory: IdentityFactory | None = None,
    ):
        """Initialize the repository.

        Args:
            driver: Backend-specific storage driver
            identity_factory: Factory holding the identity validator registry.
                Defaults to a factory with the built-in validators.

        Raises:
            IdentityRegistryError: If the registry cannot validate the
                identities the driver allocates
        """
        self.driver = driver
        self.identities = identity_factory or IdentityFactory()
        accepted = self.identities.registry.type_names()
        if driver.id_type not in accepted:
            driver.close()
            raise IdentityRegistryError(
                f"{driver.name} allocates {driver.id_type} identities but the registry"
                f" only accepts: {', '.join(accepted) or 'none'}"
            )
        self.logger = get_logger(f"adapters.{driver.name}")

    def _call(self, operation: str, func: Callable[..., R], *args: Any) -> R:
        """Invoke a driver operation, wrapping driver errors exactly once."""
        try:
            return func(*args)
        except TodoProCoreError:
            raise
        except Exception as e:
            self.logger.error("%s %s failed: %s", self.driver.name, operation, e)
            raise self.driver.map_error(e) from e

    def _is_resolvable(self, todo_id: str) -> bool:
        return self.identities.is_valid(todo_id) and self.driver.accepts_id(todo_id)

    def _to_entity(self, row: Any) -> Todo:
        record = self._call("map_row", self.driver.map_row, row)
        return Todo(
            id=self.identities.create(str(record["id"])),
            title=record["title"],
            completed=bool(record["completed"]),
            priority=record["priority"],
            created_at=record["created_at"],
            due_date=record.get("due_date"),
        )

    async def _list(self, completed: bool | None) -> list[Todo]:
        rows = self._call("fetch_many", self.driver.fetch_many, completed)
        return sort_newest_first([self._to_entity(row) for row in rows])

    async def create(self, todo: Todo) -> str:
        todo.ensure_valid()
        raw_id = self._call("insert", self.driver.insert, todo_to_record(todo))
        if not raw_id:
            raise BackendFailure(
                RuntimeError("backend returned no identity"), backend=self.driver.name
            )
        identity = self.identities.create(str(raw_id))
        self.logger.debug("created todo %s (%s)", identity, identity.type_name)
        return identity.value

    async def get_by_id(self, todo_id: str) -> Todo | None:
        if not self._is_resolvable(todo_id):
            return None
        row = self._call("fetch_one", self.driver.fetch_one, todo_id)
        return self._to_entity(row) if row is not None else None

    async def get_all(self) -> list[Todo]:
        return await self._list(None)

    async def get_active(self) -> list[Todo]:
        return await self._list(False)

    async def get_completed(self) -> list[Todo]:
        return await self._list(True)

    async def update(
        self, todo_id: str, changes: TodoChanges | Mapping[str, Any]
    ) -> None:
        payload = TodoChanges.from_payload(changes)
        if not self._is_resolvable(todo_id):
            raise NotFoundError(todo_id)

        row = self._call("fetch_one", self.driver.fetch_one, todo_id)
        if row is None:
            raise NotFoundError(todo_id)

        payload.apply_to(self._to_entity(row)).ensure_valid()
        values = changes_to_record(payload.supplied())
        if not values:
            return

        if not self._call("update", self.driver.update, todo_id, values):
            raise NotFoundError(todo_id)
        self.logger.debug("updated todo %s: %s", todo_id, sorted(values))

    async def delete(self, todo_id: str) -> None:
        if not self._is_resolvable(todo_id):
            raise NotFoundError(todo_id)
        if not self._call("delete", self.driver.delete, todo_id):
            raise NotFoundError(todo_id)
        self.logger.debug("deleted todo %s", todo_id)

    async def count(self) -> int:
        return self._call("count", self.driver.count, None)

    async def count_active(self) -> int:
        return self._call("count", self.driver.count, False)

    async def count_completed(self) -> int:
        return self._call("count", self.driver.count, True)

    async def find_by_specification(self, specification: Specification[Todo]) -> list[Todo]:
        todos = await self.get_all()
        return [todo for todo in todos if specification.is_satisfied_by(todo)]

    async def clear(self) -> None:
        self._call("clear", self.driver.clear)

    def close(self) -> None:
        self.driver.close()
