"""Services module for TodoPro core - Business logic layer."""

from .todo_domain_service import TodoDomainService
from .todo_service import TodoService, TodoStats

__all__ = [
    "TodoService",
    "TodoStats",
    "TodoDomainService",
]
