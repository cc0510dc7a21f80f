"""User domain: entity, repository wrapper, validator and service.

Shows how a domain wires itself to the generic repository without
subclassing it. ``UserRepository`` *holds* an
:class:`~principia.core.repository.InMemoryRepository` and adds the finders
the domain needs; ``UserService`` validates input before anything is stored.

Architecture::

    UserService ──validate_user()──► UserRepository ──► InMemoryRepository[User]
       register / rename             add / get / list_all / save / remove
       deactivate / remove           find_by_email / find_active

Tags:
    domain, users, service, composition, validation, principia
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, replace

from principia.core.errors import DuplicateKeyError, ValidationError
from principia.core.logging import get_logger
from principia.core.repository import InMemoryRepository

logger = get_logger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class User:
    id: str
    email: str
    name: str
    active: bool = True


def validate_user(user: User) -> User:
    """Check a user before it is stored.

    Raises:
        ValidationError: naming the first field that fails.
    """
    if not user.id or not user.id.strip():
        raise ValidationError("User id must not be blank", field="id", value=user.id)
    if not user.name or not user.name.strip():
        raise ValidationError("User name must not be blank", field="name", value=user.name)
    if not _EMAIL_RE.match(user.email or ""):
        raise ValidationError(
            f"Invalid email address: {user.email!r}", field="email", value=user.email
        )
    return user


class UserRepository:
    """User storage built on a generic repository by composition."""

    def __init__(self, store: InMemoryRepository[User] | None = None) -> None:
        if store is None:
            store = InMemoryRepository(User)
        self._store = store

    def add(self, user: User) -> User:
        return self._store.create(user)

    def get(self, user_id: str) -> User:
        return self._store.find_by_id(user_id)

    def list_all(self) -> list[User]:
        return self._store.find_all()

    def save(self, user: User) -> User:
        return self._store.update(user)

    def remove(self, user_id: str) -> None:
        self._store.delete(user_id)

    def find_by_email(self, email: str) -> User | None:
        """Case-insensitive lookup. Returns ``None`` when no user matches."""
        wanted = email.strip().lower()
        matches = self._store.find_where(lambda user: user.email.lower() == wanted)
        return matches[0] if matches else None

    def find_active(self) -> list[User]:
        return self._store.find_where(lambda user: user.active)

    def __len__(self) -> int:
        return len(self._store)


class UserService:
    """Application service for managing users.

    Every mutation validates first and then goes through the repository, so
    the store never holds an invalid user. Repository errors
    (``NotFoundError``, ``DuplicateKeyError``) propagate unchanged.
    """

    def __init__(self, users: UserRepository | None = None) -> None:
        self.users = users if users is not None else UserRepository()

    def register(self, email: str, name: str, user_id: str | None = None) -> User:
        """Create a user.

        A fresh hex id is generated when ``user_id`` is not given. Emails
        are unique, compared case-insensitively.

        Raises:
            ValidationError: Blank name/id or malformed email.
            DuplicateKeyError: The id or the email is already taken.
        """
        user = validate_user(
            User(id=user_id or uuid.uuid4().hex, email=email.strip(), name=name.strip())
        )
        if self.users.find_by_email(user.email) is not None:
            raise DuplicateKeyError("User", user.email, field="email")

        self.users.add(user)
        logger.info("user_registered", user_id=user.id)
        return user

    def get(self, user_id: str) -> User:
        return self.users.get(user_id)

    def list_users(self, active_only: bool = False) -> list[User]:
        if active_only:
            return self.users.find_active()
        return self.users.list_all()

    def rename(self, user_id: str, name: str) -> User:
        user = validate_user(replace(self.users.get(user_id), name=name.strip()))
        self.users.save(user)
        logger.info("user_renamed", user_id=user_id)
        return user

    def deactivate(self, user_id: str) -> User:
        user = replace(self.users.get(user_id), active=False)
        self.users.save(user)
        logger.info("user_deactivated", user_id=user_id)
        return user

    def remove(self, user_id: str) -> None:
        self.users.remove(user_id)
        logger.info("user_removed", user_id=user_id)


__all__ = [
    "User",
    "UserRepository",
    "UserService",
    "validate_user",
]
