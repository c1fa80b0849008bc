"""Pydantic-compatible types for BSON values."""

from __future__ import annotations

from typing import Annotated, Any

from bson import ObjectId
from pydantic import PlainSerializer, PlainValidator, WithJsonSchema

from .exceptions import InvalidIdentifierError


def _validate_object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    msg = f"Invalid ObjectId: {value!r}"
    raise ValueError(msg)


ObjectIdField = Annotated[
    ObjectId,
    PlainValidator(_validate_object_id),
    PlainSerializer(str, return_type=str, when_used="json"),
    WithJsonSchema({"type": "string", "pattern": "^[0-9a-f]{24}$"}),
]
"""An ``ObjectId`` that accepts hex strings and serializes to hex in JSON."""


def parse_object_id(value: str, field: str = "id") -> ObjectId:
    """Parse a hex string into an ``ObjectId``.

    Raises:
        InvalidIdentifierError: If ``value`` is not a 24-character hex id.
    """
    if not ObjectId.is_valid(value):
        raise InvalidIdentifierError(value, field=field)
    return ObjectId(value)
