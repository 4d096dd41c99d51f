"""MongoDB implementation of TodoRepository using pymongo.

Identities are ObjectIds rendered as 24 hex characters. Any string that is
not a valid ObjectId cannot name a document and is treated as absent.
"""

from __future__ import annotations

from typing import Any

from bson import ObjectId
from pymongo import DESCENDING, MongoClient
from pymongo.collection import Collection

from todopro_core.adapters.base import DriverTodoRepository, Record, TodoStorageDriver
from todopro_core.models import IdentityFactory
from todopro_core.models.todo import normalize_timestamp

DEFAULT_DATABASE = "todopro"
DEFAULT_COLLECTION = "todos"


def _completed_filter(completed: bool | None) -> dict[str, Any]:
    return {} if completed is None else {"completed": completed}


class MongoTodoDriver(TodoStorageDriver):
    """Driver storing one document per todo."""

    name = "mongodb"
    id_type = "objectid"

    def __init__(self, collection: Collection, client: MongoClient | None = None):
        self.collection = collection
        self._client = client

    def accepts_id(self, todo_id: str) -> bool:
        return ObjectId.is_valid(todo_id)

    def insert(self, record: Record) -> str:
        result = self.collection.insert_one(dict(record))
        return str(result.inserted_id)

    def fetch_one(self, todo_id: str) -> dict[str, Any] | None:
        return self.collection.find_one({"_id": ObjectId(todo_id)})

    def fetch_many(self, completed: bool | None = None) -> list[dict[str, Any]]:
        cursor = self.collection.find(_completed_filter(completed)).sort(
            "created_at", DESCENDING
        )
        return list(cursor)

    def map_row(self, row: Any) -> Record:
        return {
            "id": str(row["_id"]),
            "title": row["title"],
            "completed": row.get("completed", False),
            "priority": row.get("priority", "medium"),
            "created_at": normalize_timestamp(row["created_at"]),
            "due_date": normalize_timestamp(row.get("due_date")),
        }

    def update(self, todo_id: str, values: Record) -> bool:
        result = self.collection.update_one({"_id": ObjectId(todo_id)}, {"$set": values})
        return result.matched_count > 0

    def delete(self, todo_id: str) -> bool:
        result = self.collection.delete_one({"_id": ObjectId(todo_id)})
        return result.deleted_count > 0

    def count(self, completed: bool | None = None) -> int:
        return self.collection.count_documents(_completed_filter(completed))

    def clear(self) -> None:
        self.collection.delete_many({})

    def close(self) -> None:
        if self._client is not None:
            self._client.close()


class MongoTodoRepository(DriverTodoRepository):
    """MongoDB implementation of todo repository."""

    def __init__(
        self,
        collection: Collection | None = None,
        *,
        uri: str | None = None,
        database: str | None = None,
        collection_name: str = DEFAULT_COLLECTION,
        identity_factory: IdentityFactory | None = None,
    ):
        """Initialize the repository.

        Args:
            collection: Ready collection to use; takes precedence over ``uri``
            uri: MongoDB connection string used when no collection is given
            database: Database name for ``uri``; defaults to the one named
                in the URI, then "todopro"
            collection_name: Collection name for ``uri``
            identity_factory: Optional identity factory
        """
        client = None
        if collection is None:
            client = MongoClient(uri or "mongodb://localhost:27017", tz_aware=True)
            db = client[database] if database else client.get_default_database(DEFAULT_DATABASE)
            collection = db[collection_name]
        super().__init__(MongoTodoDriver(collection, client), identity_factory)
