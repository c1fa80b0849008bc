"""Cursor encoding and decoding for event pagination.

A cursor records the identity of the last row on a page so the next query
can resume the sorted scan right after it.

The cursor format is:
1. JSON object ``{"last_id": <hex ObjectId>, "timestamp": <ISO 8601>}``
2. Base64 URL-safe encoded (with padding) for use in query strings

Only ``last_id`` participates in the boundary comparison. ``timestamp`` is
the row's creation time and is carried for diagnostics.

Example:
    {"last_id":"65f0c0ffee0000000000abcd","timestamp":"2025-01-15T10:30:00Z"}

Encoded: eyJsYXN0X2lkIjoiNjVmMGMwZmZlZTAwMDAwMDAwMDBhYmNkIiwidGltZXN0YW1wIjoiMjAyNS0wMS0xNVQxMDozMDowMFoifQ==
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from datetime import datetime

from bson import ObjectId
from pydantic import BaseModel, Field

from form_service.core.database.exceptions import InvalidCursorError

logger = logging.getLogger(__name__)


class CursorData(BaseModel):
    """Decoded pagination cursor.

    Attributes:
        last_id: Hex id of the last row on the previous page. Empty means
            "no boundary".
        timestamp: Creation time of that row.
    """

    last_id: str = Field(default="", description="Last-seen entity id")
    timestamp: datetime | None = Field(default=None, description="Last-seen creation time")

    model_config = {"frozen": True}

    @property
    def has_boundary(self) -> bool:
        """Whether the cursor restricts the scan at all."""
        return bool(self.last_id)

    @property
    def object_id(self) -> ObjectId | None:
        """``last_id`` as an ``ObjectId``, or None when there is no boundary."""
        return ObjectId(self.last_id) if self.last_id else None


class CursorCodec:
    """Encode and decode pagination tokens.

    Tokens are opaque to API callers; they must be passed back unchanged.

    Usage:
        token = CursorCodec.encode(CursorData(last_id=str(event.id), timestamp=event.created_at))
        cursor = CursorCodec.decode(token)
    """

    @staticmethod
    def encode(data: CursorData) -> str:
        """Encode cursor data to an opaque token.

        Returns:
            URL-safe base64 string, or an empty string if the cursor could
            not be serialized. Callers treat an empty token as "no next page".
        """
        try:
            payload = json.dumps(data.model_dump(mode="json"), separators=(",", ":"))
        except (TypeError, ValueError):
            logger.exception("Failed to serialize pagination cursor")
            return ""
        return base64.urlsafe_b64encode(payload.encode()).decode()

    @staticmethod
    def decode(token: str) -> CursorData:
        """Decode a token back to cursor data.

        Raises:
            InvalidCursorError: If the token is not valid base64url, is not a
                JSON object, or carries a malformed ``last_id``.
        """
        try:
            raw = base64.b64decode(token.encode("ascii"), altchars=b"-_", validate=True)
            payload = json.loads(raw.decode("utf-8"))
        except (binascii.Error, ValueError) as e:
            raise InvalidCursorError("malformed token") from e

        if not isinstance(payload, dict):
            raise InvalidCursorError("token payload is not an object")

        try:
            cursor = CursorData.model_validate(payload)
        except ValueError as e:
            raise InvalidCursorError("malformed cursor") from e

        if cursor.last_id and not ObjectId.is_valid(cursor.last_id):
            raise InvalidCursorError("invalid cursor id")

        return cursor


__all__ = ["CursorCodec", "CursorData"]
