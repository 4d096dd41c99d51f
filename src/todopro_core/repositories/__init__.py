"""Repository interfaces for TodoPro core.

This package contains the abstract base class (ABC) that defines the contract
for todo persistence. It is the "Port" in the Hexagonal Architecture.

Implementations (Adapters) are in:
- todopro_core.adapters.in_memory (process memory)
- todopro_core.adapters.sqlite (embedded SQL, stdlib sqlite3)
- todopro_core.adapters.sqlalchemy_orm (relational ORM)
- todopro_core.adapters.active_record (peewee active-record ORM)
- todopro_core.adapters.mongo (MongoDB document store)
"""

from .repository import TodoRepository

__all__ = [
    "TodoRepository",
]
