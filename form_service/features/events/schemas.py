"""Pydantic schemas for the events API."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from form_service.core.pagination import Pagination
from form_service.features.events.models import Event, Session


class GeoPointResponse(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: list[float] = Field(default_factory=lambda: [0.0, 0.0])


class LocationResponse(BaseModel):
    name: str = ""
    address: str = ""
    place_id: str = ""
    coordinates: GeoPointResponse = Field(default_factory=GeoPointResponse)


class DetailBlockResponse(BaseModel):
    type: str
    data: dict[str, Any] = Field(default_factory=dict)


class FAQResponse(BaseModel):
    question: str
    answer: str


class SessionResponse(BaseModel):
    """A scheduled session of an event."""

    id: str
    event_id: str
    name: str = ""
    capacity: int | None = None
    start_time: datetime
    end_time: datetime

    @classmethod
    def from_session(cls, session: Session) -> SessionResponse:
        return cls(
            id=str(session.id),
            event_id=str(session.event_id),
            name=session.name,
            capacity=session.capacity,
            start_time=session.start_time,
            end_time=session.end_time,
        )


class EventResponse(BaseModel):
    """Event with its sessions as returned by the API."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "665f1c2e9b1e8a3d4c5b6a79",
                "title": "Night market food tour",
                "merchant_id": "merchant-42",
                "status": "published",
                "visibility": "public",
                "sessions": [],
            },
        },
    )

    id: str
    title: str
    merchant_id: str
    summary: str = ""
    status: str
    visibility: str
    cover_image_url: str = ""
    location: LocationResponse = Field(default_factory=LocationResponse)
    sessions: list[SessionResponse] = Field(default_factory=list)
    detail: list[DetailBlockResponse] = Field(default_factory=list)
    faq: list[FAQResponse] = Field(default_factory=list)
    created_at: datetime | None = None
    created_by: str = ""
    updated_at: datetime | None = None
    updated_by: str = ""

    @classmethod
    def from_event(cls, event: Event) -> EventResponse:
        return cls(
            id=str(event.id),
            title=event.title,
            merchant_id=event.merchant_id,
            summary=event.summary,
            status=str(event.status),
            visibility=str(event.visibility),
            cover_image_url=event.cover_image_url,
            location=LocationResponse(
                name=event.location.name,
                address=event.location.address,
                place_id=event.location.place_id,
                coordinates=GeoPointResponse(
                    coordinates=list(event.location.coordinates.coordinates),
                ),
            ),
            sessions=[SessionResponse.from_session(s) for s in event.sessions],
            detail=[DetailBlockResponse(type=d.type, data=d.data) for d in event.detail],
            faq=[FAQResponse(question=f.question, answer=f.answer) for f in event.faq],
            created_at=event.created_at,
            created_by=event.created_by,
            updated_at=event.updated_at,
            updated_by=event.updated_by,
        )


class EventListResponse(BaseModel):
    """A page of events with pagination metadata.

    ``pagination.next_page_token`` is opaque; pass it back unchanged as
    ``page_token`` to fetch the following page.
    """

    events: list[EventResponse]
    pagination: Pagination
