"""API routers for the events feature.

Endpoints:
    Console (tenant-scoped, requires ``X-Merchant-ID``):
        GET {api_prefix}/events              - List the merchant's events
        GET {api_prefix}/events/{event_id}   - Get one of the merchant's events

    Public:
        GET {public_prefix}/events            - Search published, public events
        GET {public_prefix}/events/{event_id} - Get a published event

Pagination:
    Offset mode: pass ``page`` (1-based) and ``page_size``. Responses carry
    ``total_count``, ``current_page`` and ``total_pages`` when the total
    could be computed.

    Cursor mode: pass the previous response's ``next_page_token`` as
    ``page_token``. A ``page`` number always takes precedence over a token.

Example Usage:
    GET /public/events?location_lat=25.0330&location_lng=121.5654&location_radius=2000
    GET /api/v1/events?status=published&page=2&page_size=10
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, Depends, Query

# Runtime imports: FastAPI resolves these annotations when building routes.
from form_service.core.dependencies.services import get_event_service
from form_service.core.pagination import INT32_MAX, INT32_MIN
from form_service.core.dependencies.tenant import get_merchant_id
from form_service.features.events.filters import SortField, SortOrder  # noqa: TC001
from form_service.features.events.requests import EventListRequest, PublicSearchRequest
from form_service.features.events.schemas import EventListResponse, EventResponse
from form_service.features.events.service import EventService  # noqa: TC001

if TYPE_CHECKING:
    from form_service.features.events.repository import EventListResult

console_router = APIRouter(prefix="/events", tags=["events"])
public_router = APIRouter(prefix="/events", tags=["public-events"])

EventServiceDep = Annotated[EventService, Depends(get_event_service)]
MerchantIdDep = Annotated[str, Depends(get_merchant_id)]


def _to_list_response(result: EventListResult) -> EventListResponse:
    return EventListResponse(
        events=[EventResponse.from_event(event) for event in result.events],
        pagination=result.pagination,
    )


# ──────────────────────────────────────────────────────────────
# Console Endpoints
# ──────────────────────────────────────────────────────────────


@console_router.get(
    "",
    response_model=EventListResponse,
    summary="List events",
    description="List the merchant's events with their sessions, filtered and paginated.",
    responses={400: {"description": "Invalid page token"}, 401: {"description": "Missing merchant"}},
)
async def list_events(
    service: EventServiceDep,
    merchant_id: MerchantIdDep,
    status: str | None = None,
    visibility: str | None = None,
    title_search: Annotated[str | None, Query(max_length=200)] = None,
    session_start_from: Annotated[str | None, Query(description="RFC 3339 timestamp")] = None,
    session_start_to: Annotated[str | None, Query(description="RFC 3339 timestamp")] = None,
    sort_by: SortField | None = None,
    sort_order: SortOrder | None = None,
    page_token: str | None = None,
    page: Annotated[int | None, Query(ge=INT32_MIN, le=INT32_MAX, description="1-based")] = None,
    page_size: Annotated[int | None, Query(ge=INT32_MIN, le=INT32_MAX)] = None,
) -> EventListResponse:
    """List events for the calling merchant."""
    request = EventListRequest(
        status=status,
        visibility=visibility,
        title_search=title_search,
        session_start_from=session_start_from,
        session_start_to=session_start_to,
        sort_by=sort_by,
        sort_order=sort_order,
        page_token=page_token,
        page=page,
        page_size=page_size,
    )
    result = await service.list_events(request, merchant_id)
    return _to_list_response(result)


@console_router.get(
    "/{event_id}",
    response_model=EventResponse,
    summary="Get an event",
    description="Fetch one of the merchant's events with all of its sessions.",
    responses={400: {"description": "Malformed event id"}, 404: {"description": "Event not found"}},
)
async def get_event(
    event_id: str,
    service: EventServiceDep,
    merchant_id: MerchantIdDep,
) -> EventResponse:
    event = await service.get_event(event_id, merchant_id)
    return EventResponse.from_event(event)


# ──────────────────────────────────────────────────────────────
# Public Endpoints
# ──────────────────────────────────────────────────────────────


@public_router.get(
    "",
    response_model=EventListResponse,
    summary="Search public events",
    description=(
        "Search published, public events by text, location and session window. "
        "Location filtering applies only when both latitude and longitude are given."
    ),
    responses={400: {"description": "Invalid page token"}},
)
async def search_events(
    service: EventServiceDep,
    title_search: Annotated[str | None, Query(max_length=200)] = None,
    location_lat: Annotated[float | None, Query(ge=-90, le=90)] = None,
    location_lng: Annotated[float | None, Query(ge=-180, le=180)] = None,
    location_radius: Annotated[int | None, Query(ge=0, description="Meters")] = None,
    session_start_from: Annotated[str | None, Query(description="RFC 3339 timestamp")] = None,
    session_start_to: Annotated[str | None, Query(description="RFC 3339 timestamp")] = None,
    sort_by: SortField | None = None,
    sort_order: SortOrder | None = None,
    page_token: str | None = None,
    page: Annotated[int | None, Query(ge=INT32_MIN, le=INT32_MAX, description="1-based")] = None,
    page_size: Annotated[int | None, Query(ge=INT32_MIN, le=INT32_MAX)] = None,
) -> EventListResponse:
    """Search events visible to everyone."""
    request = PublicSearchRequest(
        title_search=title_search,
        location_lat=location_lat,
        location_lng=location_lng,
        location_radius=location_radius,
        session_start_from=session_start_from,
        session_start_to=session_start_to,
        sort_by=sort_by,
        sort_order=sort_order,
        page_token=page_token,
        page=page,
        page_size=page_size,
    )
    result = await service.search_public_events(request)
    return _to_list_response(result)


@public_router.get(
    "/{event_id}",
    response_model=EventResponse,
    summary="Get a public event",
    description="Fetch a published event by id, e.g. for sharing links.",
    responses={400: {"description": "Malformed event id"}, 404: {"description": "Event not found"}},
)
async def get_public_event(event_id: str, service: EventServiceDep) -> EventResponse:
    event = await service.get_public_event(event_id)
    return EventResponse.from_event(event)
