"""Todo identity value type.

An identity wraps the raw identifier string handed out by a storage backend
and classifies it against an ordered registry of format validators. The
registry is an explicit object so callers can extend it (e.g. with a ULID
validator) without touching the built-in validators:

    registry = IdentityValidatorRegistry.default()
    registry.add_validator(UlidValidator())
    todo_id = Identity("01ARZ3NDEKTSV4RRFFQ69G5FAV", registry)
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterator

from todopro_core.models.exceptions import (
    EmptyIdentity,
    IdentityRegistryError,
    InvalidIdentityFormat,
)

# 32 hex digits (uuid4().hex) or the canonical dashed form, any version
UUID_HEX_PATTERN = re.compile(r"[0-9a-f]{32}", re.IGNORECASE)
UUID_DASHED_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE
)

# BSON ObjectId: 12 bytes rendered as 24 hex digits
OBJECT_ID_PATTERN = re.compile(r"[0-9a-f]{24}", re.IGNORECASE)


class IdentityValidator(ABC):
    """Strategy deciding whether a raw string is an identity of one format."""

    @abstractmethod
    def is_valid(self, raw: str) -> bool:
        """Return True if ``raw`` is an identifier of this format."""

    @abstractmethod
    def type_name(self) -> str:
        """Short tag naming the format (e.g. "uuid")."""


class UuidValidator(IdentityValidator):
    def is_valid(self, raw: str) -> bool:
        return bool(UUID_HEX_PATTERN.fullmatch(raw) or UUID_DASHED_PATTERN.fullmatch(raw))

    def type_name(self) -> str:
        return "uuid"


class ObjectIdValidator(IdentityValidator):
    def is_valid(self, raw: str) -> bool:
        return OBJECT_ID_PATTERN.fullmatch(raw) is not None

    def type_name(self) -> str:
        return "objectid"


class IdentityValidatorRegistry:
    """Ordered, extensible collection of identity validators.

    Registration order matters: the first validator accepting a raw string
    decides its type tag.
    """

    def __init__(self, validators: list[IdentityValidator] | None = None):
        self._validators: list[IdentityValidator] = list(validators or [])

    @classmethod
    def default(cls) -> IdentityValidatorRegistry:
        """Build a fresh registry holding the built-in validators."""
        return cls([UuidValidator(), ObjectIdValidator()])

    def add_validator(self, validator: IdentityValidator) -> None:
        """Append a validator after the ones already registered."""
        self._validators.append(validator)

    def type_names(self) -> list[str]:
        return [v.type_name() for v in self._validators]

    def accepts(self, raw: str) -> bool:
        return any(v.is_valid(raw) for v in self._validators)

    def find(self, raw: str) -> IdentityValidator | None:
        """Return the first validator accepting ``raw``, or None."""
        for validator in self._validators:
            if validator.is_valid(raw):
                return validator
        return None

    def __iter__(self) -> Iterator[IdentityValidator]:
        return iter(self._validators)

    def __len__(self) -> int:
        return len(self._validators)


class Identity:
    """Validated, typed todo identifier.

    Equality is exact (case-sensitive) comparison of the raw string; no
    normalisation happens across formats.

    Raises:
        EmptyIdentity: If ``raw`` is blank
        InvalidIdentityFormat: If no registered validator accepts ``raw``
        IdentityRegistryError: If the registry is empty or inconsistent
    """

    __slots__ = ("_value", "_type_name")

    def __init__(self, raw: str, registry: IdentityValidatorRegistry | None = None):
        if registry is None:
            registry = IdentityValidatorRegistry.default()
        self._validate(raw, registry)
        self._value = raw
        self._type_name = self._classify(raw, registry).type_name()

    @staticmethod
    def _validate(raw: str, registry: IdentityValidatorRegistry) -> None:
        if not isinstance(raw, str) or not raw.strip():
            raise EmptyIdentity()
        if len(registry) == 0:
            raise IdentityRegistryError("No identity validators are registered")
        if not registry.accepts(raw):
            raise InvalidIdentityFormat(registry.type_names())

    @staticmethod
    def _classify(raw: str, registry: IdentityValidatorRegistry) -> IdentityValidator:
        validator = registry.find(raw)
        if validator is None:
            raise IdentityRegistryError(f"No validator found for identity '{raw}'")
        return validator

    @classmethod
    def from_string(
        cls, raw: str, registry: IdentityValidatorRegistry | None = None
    ) -> Identity:
        return cls(raw, registry)

    @property
    def value(self) -> str:
        return self._value

    @property
    def type_name(self) -> str:
        return self._type_name

    def is_uuid(self) -> bool:
        return self._type_name == "uuid"

    def is_object_id(self) -> bool:
        return self._type_name == "objectid"

    def equals(self, other: Identity) -> bool:
        return self._value == other._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Identity):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash(self._value)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"Identity({self._value!r}, type={self._type_name!r})"


class IdentityFactory:
    """Builds identities against one injected validator registry."""

    def __init__(self, registry: IdentityValidatorRegistry | None = None):
        if registry is None:
            registry = IdentityValidatorRegistry.default()
        self.registry = registry

    def create(self, raw: str) -> Identity:
        return Identity(raw, self.registry)

    def is_valid(self, raw: str) -> bool:
        """Check ``raw`` without raising."""
        return isinstance(raw, str) and bool(raw.strip()) and self.registry.accepts(raw)
