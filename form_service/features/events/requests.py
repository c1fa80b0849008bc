"""Translate raw list/search request parameters into filters.

Request values arrive as loosely typed API inputs: session windows are
RFC 3339 strings, and page/page size may be absent or out of range. The
rules applied here:

- the page size defaults to the configured default (falling back to 20)
  and a requested size is honoured only when ``0 < page_size <= max``
  (max falls back to 100);
- a positive page number sets ``offset = (page - 1) * limit`` and clears
  any page token;
- empty strings are treated as absent, and unparsable timestamps are
  ignored rather than rejected.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from form_service.core.pagination import INT32_MAX, INT32_MIN
from form_service.core.settings.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from form_service.core.utils import first_available, positive_or_none
from form_service.features.events.filters import (
    EventFilter,
    PublicEventFilter,
    SortField,
    SortOrder,
)
from form_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from form_service.core.settings.pagination import PaginationSettings

lazy_logger = get_lazy_logger(__name__)


class ListRequestBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    title_search: str | None = None
    session_start_from: str | None = None
    session_start_to: str | None = None
    sort_by: SortField | None = None
    sort_order: SortOrder | None = None
    page_token: str | None = None
    # 32-bit bounds keep the derived offset within a BSON int64
    page: int | None = Field(default=None, ge=INT32_MIN, le=INT32_MAX)
    page_size: int | None = Field(default=None, ge=INT32_MIN, le=INT32_MAX)


class EventListRequest(ListRequestBase):
    """Console list request for one merchant."""

    status: str | None = None
    visibility: str | None = None


class PublicSearchRequest(ListRequestBase):
    """Public search request."""

    location_lat: float | None = Field(default=None, ge=-90, le=90)
    location_lng: float | None = Field(default=None, ge=-180, le=180)
    location_radius: int | None = Field(default=None, ge=0)


def parse_rfc3339(value: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp, returning None when absent or invalid."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        lazy_logger.debug(lambda: f"requests.parse_rfc3339({value!r}) -> ignored")
        return None
    # RFC 3339 requires an explicit offset.
    if parsed.tzinfo is None:
        return None
    return parsed


def resolve_page_size(
    page_size: int | None,
    settings: PaginationSettings | None = None,
) -> int:
    """Return the effective limit for a requested page size."""
    default_size = first_available(
        lambda: positive_or_none(settings.default_page_size) if settings else None,
        lambda: DEFAULT_PAGE_SIZE,
    )
    max_size = first_available(
        lambda: positive_or_none(settings.max_page_size) if settings else None,
        lambda: MAX_PAGE_SIZE,
    )
    if page_size is not None and 0 < page_size <= max_size:
        return page_size
    return default_size


def _none_if_empty(value: str | None) -> str | None:
    return value or None


def _common_filter_fields(
    request: ListRequestBase,
    settings: PaginationSettings | None,
) -> dict[str, object]:
    return {
        "title_search": _none_if_empty(request.title_search),
        "session_start_from": parse_rfc3339(request.session_start_from),
        "session_start_to": parse_rfc3339(request.session_start_to),
        "sort_by": request.sort_by,
        "sort_order": request.sort_order,
        "page_token": _none_if_empty(request.page_token),
        "limit": resolve_page_size(request.page_size, settings),
        "offset": 0,
    }


def build_event_filter(
    request: EventListRequest,
    merchant_id: str,
    settings: PaginationSettings | None = None,
) -> EventFilter:
    """Build a console filter scoped to ``merchant_id``."""
    event_filter = EventFilter(
        merchant_id=merchant_id,
        status=_none_if_empty(request.status),
        visibility=_none_if_empty(request.visibility),
        **_common_filter_fields(request, settings),
    )
    return event_filter.with_page(request.page or 0)


def build_public_filter(
    request: PublicSearchRequest,
    settings: PaginationSettings | None = None,
) -> PublicEventFilter:
    """Build a public search filter; location applies only with both coordinates."""
    public_filter = PublicEventFilter(
        location_lat=request.location_lat,
        location_lng=request.location_lng,
        location_radius=request.location_radius,
        **_common_filter_fields(request, settings),
    )
    return public_filter.with_page(request.page or 0)


__all__ = [
    "EventListRequest",
    "PublicSearchRequest",
    "build_event_filter",
    "build_public_filter",
    "parse_rfc3339",
    "resolve_page_size",
]
