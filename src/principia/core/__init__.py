"""Principia Core -- the generic repository and its cross-cutting concerns.

Manifesto:
    Every "service + repository" example needs the same foundation: a keyed
    store that owns its entities, a clear contract for what counts as an
    entity, and errors that say exactly which key was missing or taken.

    - **Protocol-first:** Identifiable and Repository are protocols, not bases
    - **Explicit failure:** Absence and duplication raise typed errors
    - **Sync-only:** Every operation is an immediate in-memory lookup

Architecture::

    Layer 1 -- Contracts & Errors
        protocols.py       Identifiable, Repository[T]
        errors.py          PrincipiaError hierarchy (NotFoundError, DuplicateKeyError)

    Layer 2 -- Storage
        repository.py      InMemoryRepository[T] (CRUD + finders)

    Layer 3 -- Cross-Cutting Concerns
        logging.py         Structured logging (structlog)
        settings.py        PrincipiaSettings (pydantic-settings)
"""

from principia.core.errors import (
    ConfigError,
    DuplicateKeyError,
    ErrorCategory,
    NotFoundError,
    PrincipiaError,
    RepositoryError,
    ValidationError,
    categorize_error,
)
from principia.core.logging import configure_logging, get_logger
from principia.core.protocols import Identifiable, Repository
from principia.core.repository import InMemoryRepository, entity_id
from principia.core.settings import PrincipiaSettings, get_settings

__all__ = [
    # errors
    "ErrorCategory",
    "PrincipiaError",
    "RepositoryError",
    "DuplicateKeyError",
    "NotFoundError",
    "ValidationError",
    "ConfigError",
    "categorize_error",
    # protocols
    "Identifiable",
    "Repository",
    # repository
    "InMemoryRepository",
    "entity_id",
    # logging / settings
    "configure_logging",
    "get_logger",
    "PrincipiaSettings",
    "get_settings",
]
