"""Database repository exceptions.

Custom exceptions for repository operations that carry better error
messages than raw SQLAlchemy exceptions.
"""
from __future__ import annotations

from typing import Any


class RepositoryError(Exception):
    """Base exception for repository operations."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize repository error.

        Args:
            message: Error description
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Format error message with details."""
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class NotFoundError(RepositoryError):
    """Entity not found in database.

    Attributes:
        model_name: Name of the model class that wasn't found
        identifier: The key/value that was searched for
    """

    def __init__(self, model_name: str, identifier: dict[str, Any]):
        """Initialize not found error.

        Args:
            model_name: Name of the model (e.g., "User", "Post")
            identifier: Key-value pairs used in the search (e.g., {"id": uuid})
        """
        self.model_name = model_name
        self.identifier = identifier

        id_str = ", ".join(f"{k}={v!r}" for k, v in identifier.items())
        message = f"{model_name} not found with {id_str}"

        super().__init__(message, details={"model": model_name, **identifier})

    def __repr__(self) -> str:
        """Repr for debugging."""
        return f"NotFoundError(model={self.model_name!r}, identifier={self.identifier!r})"


class ConstraintViolationError(RepositoryError):
    """Write rejected by a database constraint (unique or foreign key).

    Wraps ``sqlalchemy.exc.IntegrityError`` so callers outside the data layer
    do not depend on driver-specific messages.
    """

    def __init__(self, model_name: str, operation: str, reason: str):
        """Initialize constraint violation error.

        Args:
            model_name: Name of the model being written
            operation: Repository operation that failed (create, update, ...)
            reason: Driver message describing the violated constraint
        """
        self.model_name = model_name
        self.operation = operation
        super().__init__(
            f"{model_name} {operation} violates a database constraint",
            details={"model": model_name, "reason": reason},
        )


__all__ = [
    "ConstraintViolationError",
    "NotFoundError",
    "RepositoryError",
]
