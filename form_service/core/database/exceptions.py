"""Repository exceptions.

Custom exceptions for repository operations that give better error
messages and typing than raw driver exceptions.
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
    """Entity not found in the store.

    Attributes:
        model_name: Name of the entity that wasn't found
        identifier: The key/value that was searched for
    """

    def __init__(self, model_name: str, identifier: dict[str, Any]):
        self.model_name = model_name
        self.identifier = identifier

        id_str = ", ".join(f"{k}={v!r}" for k, v in identifier.items())
        message = f"{model_name} not found with {id_str}"

        super().__init__(message, details={"model": model_name, **identifier})

    def __repr__(self) -> str:
        """Repr for debugging."""
        return f"NotFoundError(model={self.model_name!r}, identifier={self.identifier!r})"


class InvalidIdentifierError(RepositoryError):
    """A string could not be parsed as an entity identifier."""

    def __init__(self, value: str, field: str = "id"):
        self.value = value
        self.field = field
        super().__init__(f"Invalid {field}", details={"field": field, "value": value})


class InvalidCursorError(RepositoryError):
    """A pagination token is garbled or carries an invalid identifier.

    This is a client-input error and must not be retried.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__("Invalid pagination token", details={"reason": reason})


class StoreExecutionError(RepositoryError):
    """The document store rejected or failed a query.

    The driver exception is chained as ``__cause__``.
    """

    def __init__(self, operation: str, collection: str):
        self.operation = operation
        self.collection = collection
        super().__init__(
            f"Store operation {operation!r} failed",
            details={"collection": collection},
        )


__all__ = [
    "InvalidCursorError",
    "InvalidIdentifierError",
    "NotFoundError",
    "RepositoryError",
    "StoreExecutionError",
]
