"""Event and session documents.

Events and sessions live in separate collections. Sessions are never
persisted inside an event document; ``Event.sessions`` is filled by the
session join stage of the aggregation pipeline at read time.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta
from enum import StrEnum
from typing import Any, Literal, Self

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, model_validator

from form_service.core.database.types import ObjectIdField

# Validation context for documents read back from the store.
STORED_DOCUMENT: dict[str, Any] = {"stored": True}


class EventStatus(StrEnum):
    """Lifecycle status of an event."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class EventVisibility(StrEnum):
    """Whether a published event is listed in public search."""

    PUBLIC = "public"
    PRIVATE = "private"


class GeoJSONPoint(BaseModel):
    """GeoJSON point for the 2dsphere index.

    Coordinates are ``[longitude, latitude]``. An event without a location
    keeps the ``(0, 0)`` sentinel so the field is always array-typed.
    """

    type: Literal["Point"] = "Point"
    coordinates: tuple[float, float] = (0.0, 0.0)

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]


class Location(BaseModel):
    name: str = ""
    address: str = ""
    place_id: str = ""
    coordinates: GeoJSONPoint = Field(default_factory=GeoJSONPoint)


class DetailBlock(BaseModel):
    """A text or image content block of the event page."""

    type: Literal["text", "image"]
    data: dict[str, Any] = Field(default_factory=dict)


class FAQ(BaseModel):
    question: str
    answer: str


class Session(BaseModel):
    """A scheduled occurrence of an event, stored in the sessions collection."""

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    id: ObjectIdField = Field(default_factory=ObjectId, alias="_id")
    event_id: ObjectIdField
    name: str = ""
    # None means unlimited
    capacity: int | None = None
    start_time: datetime
    end_time: datetime
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    def is_duplicate_of(self, other: Session) -> bool:
        """Whether both sessions share an identical (start, end) pair."""
        return self.start_time == other.start_time and self.end_time == other.end_time

    def check_valid(self) -> None:
        """Validate time and capacity constraints.

        Raises:
            ValueError: If start is not before end or capacity is negative.
        """
        if self.start_time >= self.end_time:
            msg = "start_time must be before end_time"
            raise ValueError(msg)
        if self.capacity is not None and self.capacity < 0:
            msg = "capacity must be non-negative"
            raise ValueError(msg)

    @model_validator(mode="after")
    def _validate_schedule(self, info: ValidationInfo) -> Self:
        # Stored sessions load unchecked so legacy rows stay listable.
        if not (info.context or {}).get("stored"):
            self.check_valid()
        return self


def find_duplicate_sessions(sessions: Sequence[Session]) -> tuple[int, int] | None:
    """Return indexes of the first two sessions with identical time ranges."""
    seen: dict[tuple[datetime, datetime], int] = {}
    for index, session in enumerate(sessions):
        key = (session.start_time, session.end_time)
        if key in seen:
            return seen[key], index
        seen[key] = index
    return None


class Event(BaseModel):
    """An event document with its joined sessions."""

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    id: ObjectIdField | None = Field(default=None, alias="_id")
    title: str = ""
    merchant_id: str = ""
    summary: str = ""
    status: str = EventStatus.DRAFT
    visibility: str = EventVisibility.PRIVATE
    cover_image_url: str = ""
    location: Location = Field(default_factory=Location)
    sessions: list[Session] = Field(default_factory=list)
    detail: list[DetailBlock] = Field(default_factory=list)
    faq: list[FAQ] = Field(default_factory=list)
    created_at: datetime | None = None
    created_by: str = ""
    updated_at: datetime | None = None
    updated_by: str = ""

    def is_public(self) -> bool:
        """Published and public events appear in public search."""
        return self.status == EventStatus.PUBLISHED and self.visibility == EventVisibility.PUBLIC

    def to_document(self) -> dict[str, Any]:
        """Return the document stored in the events collection.

        Joined sessions are dropped; they live in their own collection.
        """
        document = self.model_dump(by_alias=True, exclude={"sessions"})
        if document.get("_id") is None:
            document.pop("_id", None)
        document["status"] = str(self.status)
        document["visibility"] = str(self.visibility)
        document["location"]["coordinates"]["coordinates"] = list(
            self.location.coordinates.coordinates
        )
        return document
