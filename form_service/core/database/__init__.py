"""Document store primitives shared by repositories."""

from .exceptions import (
    InvalidCursorError,
    InvalidIdentifierError,
    NotFoundError,
    RepositoryError,
    StoreExecutionError,
)
from .types import ObjectIdField, parse_object_id

__all__ = [
    "InvalidCursorError",
    "InvalidIdentifierError",
    "NotFoundError",
    "ObjectIdField",
    "RepositoryError",
    "StoreExecutionError",
    "parse_object_id",
]
