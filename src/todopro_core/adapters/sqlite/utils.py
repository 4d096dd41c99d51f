"""Utility functions for SQLite adapter."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from todopro_core.models.todo import normalize_timestamp


def generate_id() -> str:
    """Generate a new identity string.

    Returns:
        32 hex character UUID (e.g., "123e4567e89b12d3a456426614174000")
    """
    return uuid.uuid4().hex


def to_iso(value: datetime | None) -> str | None:
    """Format a timestamp for storage.

    Returns:
        ISO format UTC string with millisecond precision, or None
    """
    if value is None:
        return None
    return normalize_timestamp(value).isoformat(timespec="milliseconds")


def parse_datetime(value: str | datetime | None) -> datetime | None:
    """Parse a stored timestamp back into an aware UTC datetime."""
    if value is None:
        return None
    return normalize_timestamp(value)


def row_to_dict(row: Any) -> dict[str, Any]:
    """Convert sqlite3.Row to dictionary.

    Args:
        row: sqlite3.Row object

    Returns:
        Dictionary with column names as keys
    """
    if row is None:
        return {}
    return dict(row)


def build_update_clause(updates: dict[str, Any]) -> tuple[str, list[Any]]:
    """Build SQL UPDATE SET clause from updates dictionary.

    Unlike a filter, a None value is written as NULL.

    Args:
        updates: Dictionary of column names to new values

    Returns:
        Tuple of (SET clause string, parameters list)
    """
    set_parts = []
    params = []

    for key, value in updates.items():
        set_parts.append(f"{key} = ?")
        params.append(value)

    return ", ".join(set_parts), params
