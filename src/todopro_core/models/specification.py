"""Composable predicate ("specification") engine.

Specifications are stateless, side-effect free predicates over a candidate.
They combine into new specifications with ``and_``, ``or_`` and ``not_``
(or the ``&``, ``|`` and ``~`` operators). Grouping follows the nesting of
calls only; there is no implicit precedence.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class Specification(ABC, Generic[T]):
    """Abstract predicate over candidates of type ``T``."""

    @abstractmethod
    def is_satisfied_by(self, candidate: T) -> bool:
        """Return True if ``candidate`` satisfies this specification."""

    def and_(self, other: Specification[T]) -> Specification[T]:
        return AndSpecification(self, other)

    def or_(self, other: Specification[T]) -> Specification[T]:
        return OrSpecification(self, other)

    def not_(self) -> Specification[T]:
        return NotSpecification(self)

    def __and__(self, other: Specification[T]) -> Specification[T]:
        return self.and_(other)

    def __or__(self, other: Specification[T]) -> Specification[T]:
        return self.or_(other)

    def __invert__(self) -> Specification[T]:
        return self.not_()


class AndSpecification(Specification[T]):
    """Satisfied when both operands are; the right one is skipped if the left fails."""

    def __init__(self, left: Specification[T], right: Specification[T]):
        self.left = left
        self.right = right

    def is_satisfied_by(self, candidate: T) -> bool:
        return self.left.is_satisfied_by(candidate) and self.right.is_satisfied_by(
            candidate
        )

    def __repr__(self) -> str:
        return f"({self.left!r} AND {self.right!r})"


class OrSpecification(Specification[T]):
    """Satisfied when either operand is; the right one is skipped if the left holds."""

    def __init__(self, left: Specification[T], right: Specification[T]):
        self.left = left
        self.right = right

    def is_satisfied_by(self, candidate: T) -> bool:
        return self.left.is_satisfied_by(candidate) or self.right.is_satisfied_by(
            candidate
        )

    def __repr__(self) -> str:
        return f"({self.left!r} OR {self.right!r})"


class NotSpecification(Specification[T]):
    def __init__(self, specification: Specification[T]):
        self.specification = specification

    def is_satisfied_by(self, candidate: T) -> bool:
        return not self.specification.is_satisfied_by(candidate)

    def __repr__(self) -> str:
        return f"NOT {self.specification!r}"


class PredicateSpecification(Specification[T]):
    """Leaf specification wrapping a plain callable.

    The callable must be pure; it is invoked once per candidate.
    """

    def __init__(self, predicate: Callable[[T], bool], name: str | None = None):
        self.predicate = predicate
        self.name = name or getattr(predicate, "__name__", "predicate")

    def is_satisfied_by(self, candidate: T) -> bool:
        return bool(self.predicate(candidate))

    def __repr__(self) -> str:
        return f"PredicateSpecification({self.name})"
