"""Repository for the events feature."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from bson import ObjectId
from pymongo.errors import PyMongoError

from form_service.core.database import NotFoundError, StoreExecutionError, parse_object_id
from form_service.core.pagination import Pagination, is_cursor_mode, process_page
from form_service.features.events.executor import QueryExecutor
from form_service.features.events.models import Event, EventStatus
from form_service.features.events.pipeline import (
    build_event_plan,
    build_single_event_plan,
    console_base_query,
    public_base_query,
)
from form_service.infra.database.session import EVENTS_COLLECTION
from form_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pymongo.asynchronous.database import AsyncDatabase

    from form_service.core.settings.pagination import PaginationSettings
    from form_service.features.events.filters import (
        BaseEventFilter,
        EventFilter,
        PublicEventFilter,
    )

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)


@dataclass(frozen=True)
class EventListResult:
    """A page of events with their pagination metadata."""

    events: list[Event]
    pagination: Pagination


class EventRepository:
    """Event persistence on top of the events and sessions collections.

    ``find`` and ``find_public`` share one engine: a base selection is
    built per caller, then the same plan builder, executor and pagination
    processor produce the page.
    """

    def __init__(
        self,
        database: AsyncDatabase[dict[str, Any]],
        pagination_settings: PaginationSettings | None = None,
    ) -> None:
        self._collection = database[EVENTS_COLLECTION]
        self._executor = QueryExecutor(self._collection)
        self._pagination_settings = pagination_settings

    async def create(self, event: Event) -> Event:
        """Insert a new event; sessions are not persisted with it."""
        now = datetime.now(UTC)
        created = event.model_copy(
            update={
                "id": event.id or ObjectId(),
                "created_at": now,
                "updated_at": now,
                "sessions": [],
            },
        )
        try:
            await self._collection.insert_one(created.to_document())
        except PyMongoError as exc:
            raise StoreExecutionError("insert", EVENTS_COLLECTION) from exc

        logger.info(
            "Event created",
            extra={"event_id": str(created.id), "merchant_id": created.merchant_id},
        )
        return created

    async def find_by_id(self, event_id: str, *, merchant_id: str | None = None) -> Event:
        """Fetch one event with all of its sessions.

        Args:
            event_id: Hex event id
            merchant_id: Restrict the lookup to this tenant when given

        Raises:
            InvalidIdentifierError: If ``event_id`` is malformed
            NotFoundError: If no matching event exists
        """
        query: dict[str, Any] = {"_id": parse_object_id(event_id, field="event_id")}
        if merchant_id is not None:
            query["merchant_id"] = merchant_id
        return await self._find_one(query, event_id)

    async def find_public_by_id(self, event_id: str) -> Event:
        """Fetch one published event with all of its sessions."""
        query = {
            "_id": parse_object_id(event_id, field="event_id"),
            "status": str(EventStatus.PUBLISHED),
        }
        return await self._find_one(query, event_id)

    async def update(self, event_id: str, event: Event) -> Event:
        """Replace the stored event document.

        Raises:
            InvalidIdentifierError: If ``event_id`` is malformed
            NotFoundError: If the event does not exist
        """
        object_id = parse_object_id(event_id, field="event_id")
        updated = event.model_copy(update={"id": object_id, "updated_at": datetime.now(UTC)})
        try:
            result = await self._collection.replace_one({"_id": object_id}, updated.to_document())
        except PyMongoError as exc:
            raise StoreExecutionError("replace", EVENTS_COLLECTION) from exc

        if result.matched_count == 0:
            raise NotFoundError("Event", {"id": event_id})

        lazy_logger.debug(lambda: f"db.update({event_id}) -> replaced")
        return updated

    async def delete(self, event_id: str) -> None:
        object_id = parse_object_id(event_id, field="event_id")
        try:
            result = await self._collection.delete_one({"_id": object_id})
        except PyMongoError as exc:
            raise StoreExecutionError("delete", EVENTS_COLLECTION) from exc

        if result.deleted_count == 0:
            raise NotFoundError("Event", {"id": event_id})

        logger.info("Event deleted", extra={"event_id": event_id})

    async def count_by_status(self, status: str) -> int:
        try:
            count = await self._collection.count_documents({"status": status})
        except PyMongoError as exc:
            raise StoreExecutionError("count", EVENTS_COLLECTION) from exc

        lazy_logger.debug(lambda: f"db.count_by_status({status!r}) -> {count}")
        return count

    async def exists_by_id(self, event_id: str) -> bool:
        object_id = parse_object_id(event_id, field="event_id")
        try:
            count = await self._collection.count_documents({"_id": object_id}, limit=1)
        except PyMongoError as exc:
            raise StoreExecutionError("count", EVENTS_COLLECTION) from exc
        return count > 0

    async def find(self, query: EventFilter) -> EventListResult:
        """List a tenant's events with their sessions.

        Raises:
            InvalidCursorError: If ``query.page_token`` is malformed
            StoreExecutionError: If the row fetch fails
        """
        return await self._find_page(console_base_query(query), query)

    async def find_public(self, query: PublicEventFilter) -> EventListResult:
        """List published, public events with their sessions.

        Raises:
            InvalidCursorError: If ``query.page_token`` is malformed
            StoreExecutionError: If the row fetch fails
        """
        base_query = public_base_query(query, self._pagination_settings)
        return await self._find_page(base_query, query)

    async def _find_page(
        self,
        base_query: Mapping[str, Any],
        query: BaseEventFilter,
    ) -> EventListResult:
        plan = build_event_plan(base_query, query)
        events = await self._executor.fetch_page(plan)

        # The sentinel row answers has_next in cursor mode; no count needed.
        total_count = None
        if not is_cursor_mode(query.page_token):
            total_count = await self._executor.fetch_count(plan)

        page = process_page(
            events,
            limit=query.limit,
            offset=query.offset,
            page_token=query.page_token,
            total_count=total_count,
        )

        lazy_logger.debug(
            lambda: f"db.find(mode={page.mode}, limit={query.limit}, offset={query.offset}) "
            f"-> {len(page.items)} events, total={total_count}",
        )
        return EventListResult(events=page.items, pagination=page.to_pagination())

    async def _find_one(self, query: dict[str, Any], event_id: str) -> Event:
        events = await self._executor.fetch_page(build_single_event_plan(query))
        if not events:
            raise NotFoundError("Event", {"id": event_id})

        lazy_logger.debug(lambda: f"db.find_one({event_id}) -> found")
        return events[0]


__all__ = ["EventListResult", "EventRepository"]
