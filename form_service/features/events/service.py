"""Service layer for the events feature."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from form_service.core.database import InvalidCursorError, InvalidIdentifierError, NotFoundError
from form_service.core.exceptions import BadRequestException, NotFoundException
from form_service.features.events.requests import build_event_filter, build_public_filter
from form_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from form_service.core.settings.pagination import PaginationSettings
    from form_service.features.events.models import Event
    from form_service.features.events.repository import EventListResult, EventRepository
    from form_service.features.events.requests import EventListRequest, PublicSearchRequest

# Standard logger for INFO/WARNING/ERROR
logger = logging.getLogger(__name__)
# Lazy logger for DEBUG (zero overhead when DEBUG disabled)
lazy_logger = get_lazy_logger(__name__)


class EventService:
    """Service for event listing and lookup.

    Handles:
    - Console listing scoped to one merchant
    - Public search over published, public events
    - Single-event retrieval for both audiences

    Repository errors caused by client input become 400/404 responses.
    Store failures propagate unchanged.
    """

    def __init__(
        self,
        repo: EventRepository,
        pagination_settings: PaginationSettings | None = None,
    ) -> None:
        self._repo = repo
        self._pagination_settings = pagination_settings

    async def list_events(self, request: EventListRequest, merchant_id: str) -> EventListResult:
        """List a merchant's events.

        Raises:
            BadRequestException: If the page token is invalid
        """
        event_filter = build_event_filter(request, merchant_id, self._pagination_settings)
        try:
            result = await self._repo.find(event_filter)
        except InvalidCursorError as exc:
            raise _invalid_page_token(exc) from exc

        lazy_logger.debug(
            lambda: f"service.list_events(merchant_id={merchant_id!r}) -> {len(result.events)} events",
        )
        return result

    async def search_public_events(self, request: PublicSearchRequest) -> EventListResult:
        """Search published, public events.

        Raises:
            BadRequestException: If the page token is invalid
        """
        public_filter = build_public_filter(request, self._pagination_settings)
        try:
            result = await self._repo.find_public(public_filter)
        except InvalidCursorError as exc:
            raise _invalid_page_token(exc) from exc

        lazy_logger.debug(
            lambda: f"service.search_public_events(has_location={public_filter.has_location}) "
            f"-> {len(result.events)} events",
        )
        return result

    async def get_event(self, event_id: str, merchant_id: str) -> Event:
        """Get a merchant's event by id.

        Raises:
            BadRequestException: If ``event_id`` is malformed
            NotFoundException: If the event does not exist for this merchant
        """
        try:
            return await self._repo.find_by_id(event_id, merchant_id=merchant_id)
        except InvalidIdentifierError as exc:
            raise _invalid_event_id(exc) from exc
        except NotFoundError as exc:
            raise _event_not_found(event_id) from exc

    async def get_public_event(self, event_id: str) -> Event:
        """Get a published event by id (for sharing links)."""
        try:
            event = await self._repo.find_public_by_id(event_id)
        except InvalidIdentifierError as exc:
            raise _invalid_event_id(exc) from exc
        except NotFoundError as exc:
            raise _event_not_found(event_id) from exc

        lazy_logger.debug(lambda: f"service.get_public_event({event_id}) -> found")
        return event


def _invalid_page_token(exc: InvalidCursorError) -> BadRequestException:
    logger.info("Rejected invalid page token", extra={"reason": exc.reason})
    return BadRequestException(
        detail="Invalid page token",
        type="invalid-page-token",
    )


def _invalid_event_id(exc: InvalidIdentifierError) -> BadRequestException:
    return BadRequestException(
        detail=f"Invalid event id: {exc.value!r}",
        type="invalid-event-id",
        extra={"event_id": exc.value},
    )


def _event_not_found(event_id: str) -> NotFoundException:
    return NotFoundException(
        detail=f"Event {event_id} not found",
        type="event-not-found",
        extra={"event_id": event_id},
    )


__all__ = ["EventService"]
