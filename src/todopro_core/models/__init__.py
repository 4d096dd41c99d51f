"""TodoPro core domain models.

This package contains the todo entity, its value objects, the identity type,
the specification engine and the error taxonomy shared by every storage
adapter.
"""

from .exceptions import (
    BackendFailure,
    EmptyIdentity,
    IdentityRegistryError,
    InvalidIdentityFormat,
    InvalidTodoPriority,
    InvalidTodoTitle,
    NotFoundError,
    TodoAlreadyCompleted,
    TodoProCoreError,
    ValidationFailure,
)
from .identity import (
    Identity,
    IdentityFactory,
    IdentityValidator,
    IdentityValidatorRegistry,
    ObjectIdValidator,
    UuidValidator,
)
from .specification import (
    AndSpecification,
    NotSpecification,
    OrSpecification,
    PredicateSpecification,
    Specification,
)
from .todo import Todo, TodoChanges, TodoPriority, TodoTitle
from .todo_specifications import (
    ActiveTodoSpecification,
    CompletedTodoSpecification,
    DueBeforeTodoSpecification,
    HighPriorityTodoSpecification,
    OverdueTodoSpecification,
    PriorityTodoSpecification,
    TitleContainsTodoSpecification,
)

__all__ = [
    # Entity and value objects
    "Todo",
    "TodoChanges",
    "TodoTitle",
    "TodoPriority",
    # Identity
    "Identity",
    "IdentityFactory",
    "IdentityValidator",
    "IdentityValidatorRegistry",
    "UuidValidator",
    "ObjectIdValidator",
    # Specifications
    "Specification",
    "AndSpecification",
    "OrSpecification",
    "NotSpecification",
    "PredicateSpecification",
    "ActiveTodoSpecification",
    "CompletedTodoSpecification",
    "HighPriorityTodoSpecification",
    "PriorityTodoSpecification",
    "OverdueTodoSpecification",
    "DueBeforeTodoSpecification",
    "TitleContainsTodoSpecification",
    # Errors
    "TodoProCoreError",
    "NotFoundError",
    "ValidationFailure",
    "EmptyIdentity",
    "InvalidIdentityFormat",
    "InvalidTodoTitle",
    "InvalidTodoPriority",
    "TodoAlreadyCompleted",
    "BackendFailure",
    "IdentityRegistryError",
]
