"""Database schema for the SQLite todo store."""

from __future__ import annotations

# Timestamps are ISO-8601 UTC strings with millisecond precision
CREATE_TODOS_TABLE = """
CREATE TABLE IF NOT EXISTS todos (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    completed BOOLEAN NOT NULL DEFAULT 0,
    priority TEXT NOT NULL DEFAULT 'medium',
    created_at TEXT NOT NULL,
    due_date TEXT
)
"""

CREATE_TODOS_COMPLETED_INDEX = """
CREATE INDEX IF NOT EXISTS idx_todos_completed ON todos(completed)
"""

ALL_STATEMENTS = [
    CREATE_TODOS_TABLE,
    CREATE_TODOS_COMPLETED_INDEX,
]
