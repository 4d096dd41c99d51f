"""SQLAlchemy 2.x ORM implementation of TodoRepository.

Works with any database SQLAlchemy can reach. Timestamps are stored as naive
UTC ``DateTime`` columns and re-tagged as UTC when read back.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, Engine, String, create_engine, delete, func, select
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from todopro_core.adapters.base import DriverTodoRepository, Record, TodoStorageDriver
from todopro_core.models import IdentityFactory
from todopro_core.models.todo import normalize_timestamp

MEMORY_URL = "sqlite://"


def _naive_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return normalize_timestamp(value).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class TodoRow(Base):
    """ORM mapping of the ``todos`` table.

    Ids are uuid4 hex strings generated client-side by a Python column
    default when the row is flushed. There is no ``server_default`` because
    no UUID expression is portable across dialects (SQLite has none), so
    rows inserted outside the ORM must supply their own ``id``.
    """

    __tablename__ = "todos"

    id: Mapped[str] = mapped_column(
        String(32), primary_key=True, default=lambda: uuid.uuid4().hex
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default="medium")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    due_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)


def create_todo_engine(url: str = MEMORY_URL, **kwargs: Any) -> Engine:
    """Create an engine for ``url`` with the todos table in place.

    In-memory SQLite shares one connection so every session sees the same
    database.
    """
    if url == MEMORY_URL:
        kwargs.setdefault("poolclass", StaticPool)
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    engine = create_engine(url, **kwargs)
    Base.metadata.create_all(engine)
    return engine


class SqlAlchemyTodoDriver(TodoStorageDriver):
    """Driver persisting todos through SQLAlchemy sessions."""

    name = "sqlalchemy"

    def __init__(self, engine: Engine):
        self.engine = engine
        self._sessionmaker = sessionmaker(
            bind=engine, autoflush=False, expire_on_commit=False
        )

    def _session(self) -> Session:
        return self._sessionmaker()

    @staticmethod
    def _to_columns(values: Record) -> Record:
        columns = dict(values)
        for key in ("created_at", "due_date"):
            if key in columns:
                columns[key] = _naive_utc(columns[key])
        return columns

    def insert(self, record: Record) -> str:
        with self._session() as session, session.begin():
            row = TodoRow(**self._to_columns(record))
            session.add(row)
            session.flush()
            return row.id

    def fetch_one(self, todo_id: str) -> TodoRow | None:
        with self._session() as session:
            return session.get(TodoRow, todo_id)

    def fetch_many(self, completed: bool | None = None) -> list[TodoRow]:
        stmt = select(TodoRow).order_by(TodoRow.created_at.desc())
        if completed is not None:
            stmt = stmt.where(TodoRow.completed == completed)
        with self._session() as session:
            return list(session.scalars(stmt))

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
        with self._session() as session, session.begin():
            row = session.get(TodoRow, todo_id)
            if row is None:
                return False
            for key, value in self._to_columns(values).items():
                setattr(row, key, value)
        return True

    def delete(self, todo_id: str) -> bool:
        with self._session() as session, session.begin():
            result = session.execute(delete(TodoRow).where(TodoRow.id == todo_id))
        return result.rowcount > 0

    def count(self, completed: bool | None = None) -> int:
        stmt = select(func.count()).select_from(TodoRow)
        if completed is not None:
            stmt = stmt.where(TodoRow.completed == completed)
        with self._session() as session:
            return session.scalar(stmt) or 0

    def clear(self) -> None:
        with self._session() as session, session.begin():
            session.execute(delete(TodoRow))

    def close(self) -> None:
        self.engine.dispose()


class SqlAlchemyTodoRepository(DriverTodoRepository):
    """SQLAlchemy ORM implementation of todo repository."""

    def __init__(
        self,
        engine: Engine | str | None = None,
        identity_factory: IdentityFactory | None = None,
    ):
        """Initialize the repository.

        Args:
            engine: Engine, database URL, or None for a private in-memory database
            identity_factory: Optional identity factory
        """
        if engine is None or isinstance(engine, str):
            engine = create_todo_engine(engine or MEMORY_URL)
        super().__init__(SqlAlchemyTodoDriver(engine), identity_factory)
