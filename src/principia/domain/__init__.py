"""Example domains built on :mod:`principia.core` by composition."""

from principia.domain.users import User, UserRepository, UserService, validate_user

__all__ = [
    "User",
    "UserRepository",
    "UserService",
    "validate_user",
]
