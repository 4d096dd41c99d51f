"""Database connection management for the SQLite todo store.

Connections are shared per database file for the life of the process. The
special path ``:memory:`` always yields a fresh private database.
"""

from __future__ import annotations

import atexit
import os
import sqlite3
from pathlib import Path

from platformdirs import user_data_dir

from todopro_core.adapters.sqlite.schema import ALL_STATEMENTS
from todopro_core.utils.logger import get_logger

MEMORY_PATH = ":memory:"


def default_db_path() -> Path:
    return Path(user_data_dir("todopro_core")) / "todos.db"


class DatabaseConnection:
    """Process-wide registry of SQLite connections, one per database file.

    Provides:
    - Connection reuse per path
    - WAL mode for file databases
    - Automatic directory creation
    - Owner-only file permissions
    - Schema creation on first connect
    - Graceful cleanup on exit
    """

    _connections: dict[Path, sqlite3.Connection] = {}
    _cleanup_registered = False

    @classmethod
    def get_connection(cls, db_path: str | Path | None = None) -> sqlite3.Connection:
        """Get or create a database connection.

        Args:
            db_path: Path to database file, ``:memory:``, or None for the default

        Returns:
            sqlite3.Connection with the todos schema in place
        """
        if str(db_path) == MEMORY_PATH:
            return cls._open(MEMORY_PATH)

        db_path = Path(db_path) if db_path is not None else default_db_path()
        if db_path in cls._connections:
            return cls._connections[db_path]

        db_path.parent.mkdir(parents=True, exist_ok=True)
        is_new_database = not db_path.exists()

        connection = cls._open(str(db_path))
        connection.execute("PRAGMA journal_mode = WAL")

        if is_new_database:
            os.chmod(db_path, 0o600)
            get_logger("adapters.sqlite").info("created todo database at %s", db_path)

        cls._connections[db_path] = connection
        if not cls._cleanup_registered:
            atexit.register(cls.close_all)
            cls._cleanup_registered = True

        return connection

    @staticmethod
    def _open(database: str) -> sqlite3.Connection:
        connection = sqlite3.connect(
            database,
            check_same_thread=False,
            timeout=30.0,
        )
        connection.row_factory = sqlite3.Row
        with connection:
            for statement in ALL_STATEMENTS:
                connection.execute(statement)
        return connection

    @classmethod
    def close_connection(cls, db_path: str | Path | None = None) -> None:
        """Close the shared connection for ``db_path``, if open."""
        db_path = Path(db_path) if db_path is not None else default_db_path()
        connection = cls._connections.pop(db_path, None)
        if connection is not None:
            connection.commit()
            connection.close()

    @classmethod
    def close_all(cls) -> None:
        """Close every shared connection."""
        for db_path in list(cls._connections):
            try:
                cls.close_connection(db_path)
            except sqlite3.Error as e:
                get_logger("adapters.sqlite").warning("failed to close %s: %s", db_path, e)


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Helper function to get database connection.

    Args:
        db_path: Optional path to database file

    Returns:
        Configured sqlite3.Connection
    """
    return DatabaseConnection.get_connection(db_path)
