"""Filter models for event queries.

A filter is a request-scoped value: every field is optional except the
tenant id of console queries, and ``limit``/``offset`` always carry a value.
A page number and a page token are mutually exclusive pagination inputs;
``with_page`` applies a page number and clears any token.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field

from form_service.core.settings.pagination import DEFAULT_PAGE_SIZE

SortField = Literal["created_at", "updated_at"]
SortOrder = Literal["asc", "desc"]


class BaseEventFilter(BaseModel):
    """Criteria shared by console and public event queries."""

    model_config = ConfigDict(frozen=True)

    title_search: str | None = None
    session_start_from: datetime | None = None
    session_start_to: datetime | None = None
    sort_by: SortField | None = None
    sort_order: SortOrder | None = None
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    offset: int = Field(default=0, ge=0)
    page_token: str | None = None

    @property
    def has_session_window(self) -> bool:
        return self.session_start_from is not None or self.session_start_to is not None

    def with_page(self, page: int) -> Self:
        """Switch to page-number pagination.

        A positive page number overrides any page token; other values leave
        the filter unchanged.
        """
        if page <= 0:
            return self
        return self.model_copy(update={"offset": (page - 1) * self.limit, "page_token": None})


class EventFilter(BaseEventFilter):
    """Tenant-scoped console query."""

    merchant_id: str
    status: str | None = None
    visibility: str | None = None


class PublicEventFilter(BaseEventFilter):
    """Query over published, public events of every tenant."""

    location_lat: float | None = Field(default=None, ge=-90, le=90)
    location_lng: float | None = Field(default=None, ge=-180, le=180)
    location_radius: int | None = Field(default=None, ge=0)

    @property
    def has_location(self) -> bool:
        return self.location_lat is not None and self.location_lng is not None
