"""Repository abstraction layer for TodoPro core.

This module defines the abstract base class (interface) for todo storage,
following the hexagonal architecture (Ports & Adapters) pattern.

The repository hides the storage engine (in-memory, SQLite, SQLAlchemy,
peewee, MongoDB) so that callers depend only on this contract. Every list
operation returns todos ordered by creation time, newest first.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from todopro_core.models import Specification, Todo, TodoChanges


class TodoRepository(ABC):
    """Abstract base class for todo persistence operations.

    This interface defines all CRUD, query and count operations for todos,
    ensuring that different storage backends implement a consistent contract.
    """

    @abstractmethod
    async def create(self, todo: Todo) -> str:
        """Persist a new todo.

        Args:
            todo: Transient Todo to store

        Returns:
            Canonical string form of the identity allocated by the backend

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            ValidationFailure: If the todo violates its invariants
            BackendFailure: If the storage driver fails
        """
        raise NotImplementedError("TodoRepository.create() must be implemented by adapter")

    @abstractmethod
    async def get_by_id(self, todo_id: str) -> Todo | None:
        """Get a specific todo by ID.

        Args:
            todo_id: Identity string returned by create()

        Returns:
            Todo object, or None if it does not exist

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
        """
        raise NotImplementedError(
            "TodoRepository.get_by_id() must be implemented by adapter"
        )

    @abstractmethod
    async def get_all(self) -> list[Todo]:
        """List every todo, newest first.

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
        """
        raise NotImplementedError("TodoRepository.get_all() must be implemented by adapter")

    @abstractmethod
    async def get_active(self) -> list[Todo]:
        """List todos that are not completed, newest first.

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
        """
        raise NotImplementedError(
            "TodoRepository.get_active() must be implemented by adapter"
        )

    @abstractmethod
    async def get_completed(self) -> list[Todo]:
        """List completed todos, newest first.

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
        """
        raise NotImplementedError(
            "TodoRepository.get_completed() must be implemented by adapter"
        )

    @abstractmethod
    async def update(
        self, todo_id: str, changes: TodoChanges | Mapping[str, Any]
    ) -> None:
        """Apply a partial update to an existing todo.

        Args:
            todo_id: Identity string of the todo
            changes: Fields to change; omitted fields are preserved

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            NotFoundError: If todo does not exist
            ValidationFailure: If the changes are invalid
        """
        raise NotImplementedError("TodoRepository.update() must be implemented by adapter")

    @abstractmethod
    async def delete(self, todo_id: str) -> None:
        """Delete a todo.

        Args:
            todo_id: Identity string of the todo

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            NotFoundError: If todo does not exist
        """
        raise NotImplementedError("TodoRepository.delete() must be implemented by adapter")

    @abstractmethod
    async def count(self) -> int:
        """Count every todo.

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
        """
        raise NotImplementedError("TodoRepository.count() must be implemented by adapter")

    @abstractmethod
    async def count_active(self) -> int:
        """Count todos that are not completed.

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
        """
        raise NotImplementedError(
            "TodoRepository.count_active() must be implemented by adapter"
        )

    @abstractmethod
    async def count_completed(self) -> int:
        """Count completed todos.

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
        """
        raise NotImplementedError(
            "TodoRepository.count_completed() must be implemented by adapter"
        )

    @abstractmethod
    async def find_by_specification(self, specification: Specification[Todo]) -> list[Todo]:
        """List todos satisfying a specification, newest first.

        Args:
            specification: Predicate evaluated against each stored todo

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
        """
        raise NotImplementedError(
            "TodoRepository.find_by_specification() must be implemented by adapter"
        )

    @abstractmethod
    async def clear(self) -> None:
        """Remove every todo from the backing store.

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
        """
        raise NotImplementedError("TodoRepository.clear() must be implemented by adapter")
