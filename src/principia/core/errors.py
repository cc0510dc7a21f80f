"""
Structured error types for principia.

Provides a small hierarchy of typed errors for the repository layer and the
services built on top of it. Every error carries a category, a free-form
context dict, and an optional chained cause so that callers can log it with
``to_dict()`` instead of parsing messages.

Manifesto:
    - **Typed Error Hierarchy:** Absence and duplication are distinct types
    - **Errors Never Pass Silently:** Every failure reaches the immediate caller
    - **Rich Context:** Errors carry the entity type and key they refer to
    - **Error Chaining:** Preserve original exceptions while adding context

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                      PrincipiaError                             │
        │  (category, context, cause)                                     │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                 │
        │  RepositoryError        ValidationError       ConfigError       │
        │  (REPOSITORY)           (VALIDATION)          (CONFIG)          │
        │       │                                                         │
        │  DuplicateKeyError                                              │
        │  NotFoundError                                                  │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = NotFoundError("User", "u-1")
    >>> str(error)
    "User with id 'u-1' not found"
    >>> error.category
    <ErrorCategory.REPOSITORY: 'REPOSITORY'>
    >>> error.to_dict()["key"]
    'u-1'

Guardrails:
    ❌ DON'T: Return ``None`` from a finder to signal absence
    ✅ DO: Raise NotFoundError and let the caller decide

    ❌ DON'T: Swallow the original exception
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, repository, validation, principia
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification and routing.

    Attributes:
        REPOSITORY: Missing or duplicate entities in a repository
        VALIDATION: Malformed input rejected before it is stored
        CONFIG: Missing or invalid settings
        INTERNAL: Bugs, unexpected state
        UNKNOWN: Uncategorized errors
    """

    REPOSITORY = "REPOSITORY"
    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


class PrincipiaError(Exception):
    """
    Base exception for all principia errors.

    Subclasses set ``default_category`` to classify themselves. Instances
    carry:

    - **category:** ErrorCategory for routing and reporting
    - **context:** dict of structured metadata
    - **cause:** optional underlying exception (also set as ``__cause__``)

    Examples:
        >>> error = PrincipiaError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> error.with_context(operation="import").context
        {'operation': 'import'}
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context: dict[str, Any] = dict(context or {})
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> PrincipiaError:
        """
        Add context to this error (fluent API).

        Usage:
            raise NotFoundError("User", user_id).with_context(operation="rename")
        """
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# REPOSITORY ERRORS
# =============================================================================


class RepositoryError(PrincipiaError):
    """
    Error raised by a repository about a specific entity key.

    Attributes:
        entity_type: Name of the stored entity type (e.g. ``"User"``)
        key: The value the operation was called with
        field: Which attribute ``key`` is a value of (``"id"`` unless a
               service enforces uniqueness on something else)
    """

    default_category = ErrorCategory.REPOSITORY

    def __init__(
        self,
        message: str,
        *,
        entity_type: str,
        key: Any,
        field: str = "id",
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.entity_type = entity_type
        self.key = key
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["entity_type"] = self.entity_type
        result["key"] = self.key
        result["field"] = self.field
        return result


class DuplicateKeyError(RepositoryError):
    """An entity with the same identifier (or unique field) is already stored."""

    def __init__(self, entity_type: str, key: Any, *, field: str = "id", **kwargs: Any):
        super().__init__(
            f"{entity_type} with {field} {key!r} already exists",
            entity_type=entity_type,
            key=key,
            field=field,
            **kwargs,
        )


class NotFoundError(RepositoryError):
    """No entity with the given identifier is stored."""

    def __init__(self, entity_type: str, key: Any, *, field: str = "id", **kwargs: Any):
        super().__init__(
            f"{entity_type} with {field} {key!r} not found",
            entity_type=entity_type,
            key=key,
            field=field,
            **kwargs,
        )


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(PrincipiaError):
    """
    Input validation error.

    Raised before anything is stored, so the repository is never left with
    a half-formed entity.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(PrincipiaError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, PrincipiaError):
        return error.category
    if isinstance(error, LookupError):
        return ErrorCategory.REPOSITORY
    if isinstance(error, (ValueError, TypeError)):
        return ErrorCategory.VALIDATION
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "PrincipiaError",
    "RepositoryError",
    "DuplicateKeyError",
    "NotFoundError",
    "ValidationError",
    "ConfigError",
    "categorize_error",
]
