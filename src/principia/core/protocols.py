"""
Canonical protocol definitions for principia.

Manifesto:
    Protocols define contracts without inheritance. An entity does not need
    to extend a base class to be stored; it only needs an ``id``. A service
    does not need a concrete repository; it only needs the CRUD shape.

Architecture:
    ::

        protocols.py
        ├── Identifiable   — "has a gettable identifier" capability
        └── Repository[T]  — create / find_all / find_by_id / update / delete

    Consumers:
        core/repository.py, domain/users.py

Guardrails:
    ❌ DON'T: Add implementation logic to protocol classes
    ✅ DO: Keep protocols pure contracts; implementations live elsewhere

Tags:
    protocol, entity, repository, contracts, principia
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class Identifiable(Protocol):
    """
    Minimal capability contract for storable entities.

    Any object with an ``id`` attribute satisfies it: dataclasses, pydantic
    models, named tuples. The identifier must be hashable and must not change
    while the entity is stored.

    Examples:
        >>> from dataclasses import dataclass
        >>> @dataclass
        ... class Note:
        ...     id: str
        ...     body: str
        >>> isinstance(Note("n-1", "hi"), Identifiable)
        True
    """

    @property
    def id(self) -> Hashable: ...


@runtime_checkable
class Repository(Protocol[T]):
    """
    CRUD contract over a single entity type.

    Absence is always an error: ``find_by_id``, ``update`` and ``delete``
    raise :class:`~principia.core.errors.NotFoundError` for unknown keys, and
    ``create`` raises :class:`~principia.core.errors.DuplicateKeyError` for
    known ones.
    """

    def create(self, entity: T) -> T:
        """Store a new entity and return it unchanged."""
        ...

    def find_all(self) -> list[T]:
        """Return every stored entity, in no particular order."""
        ...

    def find_by_id(self, key: Hashable) -> T:
        """Return the entity stored under ``key``."""
        ...

    def update(self, entity: T) -> T:
        """Replace the stored entity with the same identifier."""
        ...

    def delete(self, key: Hashable) -> None:
        """Remove the entity stored under ``key``."""
        ...


__all__ = [
    "Identifiable",
    "Repository",
]
