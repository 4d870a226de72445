"""Core database package: declarative base, repository, and exceptions."""

from __future__ import annotations

from .base import NAMING_CONVENTION, Base, UUIDPKMixin
from .exceptions import ConstraintViolationError, NotFoundError, RepositoryError
from .inspection import is_loaded
from .repository import BaseRepository

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "BaseRepository",
    "ConstraintViolationError",
    "NotFoundError",
    "RepositoryError",
    "UUIDPKMixin",
    "is_loaded",
]
