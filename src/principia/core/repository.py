"""Generic in-memory repository with CRUD semantics.

Provides :class:`InMemoryRepository` — a keyed store over a single entity
type. Any entity exposing an identifier can be stored: by default the
identifier is the entity's ``id`` attribute (the
:class:`~principia.core.protocols.Identifiable` contract), and callers may
pass any ``key=`` callable instead.

Architecture::

    ┌────────────────────────────────────────────────────────────────────┐
    │                     InMemoryRepository[T]                          │
    │                                                                    │
    │   _entities: dict[key, T]   ← one entity per identifier            │
    │   _key: Callable[[T], key]  ← default: entity.id                   │
    │   _copy: Callable[[T], T]   ← deepcopy, or identity                │
    │                                                                    │
    │   create(entity)      → T      DuplicateKeyError                   │
    │   find_all()          → list[T]                                    │
    │   find_by_id(key)     → T      NotFoundError                       │
    │   update(entity)      → T      NotFoundError                       │
    │   delete(key)         → None   NotFoundError                       │
    │   find_where(pred)    → list[T]                                    │
    │   exists(key) / count() / ids()                                    │
    └────────────────────────────────────────────────────────────────────┘

Ownership:
    The repository owns what it stores. Entities are deep-copied on the way
    in and on the way out, so mutating a returned object never changes the
    stored one; only ``update`` does. Pass ``copy_entities=False`` (or set
    ``PRINCIPIA_COPY_ENTITIES=false``) to store references, which is safe
    for immutable entities.

Concurrency:
    No locking. Share an instance across threads only behind the caller's
    own mutual exclusion.

Usage:
    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class Note:
    ...     id: str
    ...     body: str
    >>> notes = InMemoryRepository(Note)
    >>> notes.create(Note("a", "first"))
    Note(id='a', body='first')
    >>> notes.find_by_id("a").body
    'first'

Tags:
    repository, in-memory, crud, generic, principia
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Hashable
from typing import Any, Generic, TypeVar

from principia.core.errors import DuplicateKeyError, NotFoundError, ValidationError
from principia.core.logging import get_logger
from principia.core.protocols import Identifiable
from principia.core.settings import get_settings

logger = get_logger(__name__)

T = TypeVar("T")

KeyFunc = Callable[[Any], Hashable]


def entity_id(entity: Any) -> Hashable:
    """Default key function: read the entity's ``id`` attribute."""
    if not isinstance(entity, Identifiable):
        raise ValidationError(
            f"{type(entity).__name__} does not expose an 'id' attribute",
            field="id",
        )
    return entity.id


def _identity(entity: T) -> T:
    return entity


class InMemoryRepository(Generic[T]):
    """In-memory keyed store over a single entity type.

    Parameters:
        entity_type: The stored type. Only used to name the entity in errors
                     and log events; nothing is type-checked at runtime.
        key: Callable mapping an entity to its identifier.  Defaults to
             :func:`entity_id` (the ``id`` attribute).
        copy_entities: Deep-copy entities on store and on read.  ``None``
                       falls back to ``PrincipiaSettings.copy_entities``.
    """

    def __init__(
        self,
        entity_type: type[T] | None = None,
        *,
        key: KeyFunc | None = None,
        copy_entities: bool | None = None,
    ) -> None:
        self._entities: dict[Hashable, T] = {}
        self._entity_name = entity_type.__name__ if entity_type is not None else "Entity"
        self._key: KeyFunc = key or entity_id
        if copy_entities is None:
            copy_entities = get_settings().copy_entities
        self._copy: Callable[[T], T] = copy.deepcopy if copy_entities else _identity

    @property
    def entity_name(self) -> str:
        return self._entity_name

    # -- CRUD ------------------------------------------------------------

    def create(self, entity: T) -> T:
        """Store a new entity.

        Returns the entity unchanged.

        Raises:
            DuplicateKeyError: An entity with the same identifier is stored;
                the stored one is left as it was.
            ValidationError: The entity's identifier is not populated.
        """
        key = self._key_of(entity)
        if key in self._entities:
            logger.debug("duplicate_key_rejected", entity_type=self._entity_name, entity_id=key)
            raise DuplicateKeyError(self._entity_name, key)

        self._entities[key] = self._copy(entity)
        logger.debug("entity_created", entity_type=self._entity_name, entity_id=key)
        return entity

    def find_all(self) -> list[T]:
        """Return all stored entities. Order is unspecified."""
        return [self._copy(entity) for entity in self._entities.values()]

    def find_by_id(self, key: Hashable) -> T:
        """Return the entity stored under ``key``.

        Raises:
            NotFoundError: Nothing is stored under ``key``.
        """
        try:
            entity = self._entities[key]
        except KeyError:
            raise self._not_found(key) from None
        return self._copy(entity)

    def update(self, entity: T) -> T:
        """Replace the stored entity that has the same identifier.

        The stored value is replaced entirely; there is no field-level merge.

        Raises:
            NotFoundError: No entity with this identifier is stored.
            ValidationError: The entity's identifier is not populated.
        """
        key = self._key_of(entity)
        if key not in self._entities:
            raise self._not_found(key)

        self._entities[key] = self._copy(entity)
        logger.debug("entity_updated", entity_type=self._entity_name, entity_id=key)
        return entity

    def delete(self, key: Hashable) -> None:
        """Remove the entity stored under ``key``.

        Raises:
            NotFoundError: Nothing is stored under ``key``.
        """
        try:
            del self._entities[key]
        except KeyError:
            raise self._not_found(key) from None
        logger.debug("entity_deleted", entity_type=self._entity_name, entity_id=key)

    # -- Queries ---------------------------------------------------------

    def find_where(self, predicate: Callable[[T], Any]) -> list[T]:
        """Return the entities for which ``predicate`` is truthy.

        The predicate sees the same copies the caller gets back, so it
        cannot change stored state.
        """
        return [
            candidate
            for candidate in map(self._copy, self._entities.values())
            if predicate(candidate)
        ]

    def exists(self, key: Hashable) -> bool:
        return key in self._entities

    def count(self) -> int:
        return len(self._entities)

    def ids(self) -> list[Hashable]:
        return list(self._entities)

    def __contains__(self, key: object) -> bool:
        return key in self._entities

    def __len__(self) -> int:
        return len(self._entities)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._entity_name}, count={len(self._entities)})"

    # -- Internals -------------------------------------------------------

    def _key_of(self, entity: T) -> Hashable:
        key = self._key(entity)
        if key is None or key == "":
            raise ValidationError(
                f"{self._entity_name} identifier is not populated",
                field="id",
                value=key,
            )
        return key

    def _not_found(self, key: Hashable) -> NotFoundError:
        logger.debug("entity_not_found", entity_type=self._entity_name, entity_id=key)
        return NotFoundError(self._entity_name, key)


__all__ = [
    "InMemoryRepository",
    "KeyFunc",
    "entity_id",
]
