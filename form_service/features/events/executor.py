"""Execution of event query plans against the events collection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from pymongo.errors import PyMongoError

from form_service.core.database import StoreExecutionError
from form_service.features.events.models import STORED_DOCUMENT, Event
from form_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from pymongo.asynchronous.collection import AsyncCollection

    from form_service.features.events.pipeline import QueryPlan

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)


class QueryExecutor:
    """Runs query plans; at most two round-trips per list call (rows, count).

    Driver failures on the row fetch are raised as ``StoreExecutionError``.
    Failures on the count are logged and reported as ``None`` so callers can
    continue without a total. Cancellation is never intercepted.
    """

    def __init__(self, collection: AsyncCollection[dict[str, Any]]) -> None:
        self._collection = collection

    @property
    def collection_name(self) -> str:
        return self._collection.name

    async def fetch_page(self, plan: QueryPlan) -> list[Event]:
        """Execute ``plan`` and decode every row into an ``Event``.

        Raises:
            StoreExecutionError: If the store fails the aggregation or returns
                a document that cannot be decoded.
        """
        pipeline = plan.to_pipeline()
        try:
            cursor = await self._collection.aggregate(pipeline)
            try:
                documents = await cursor.to_list(None)
            finally:
                await cursor.close()
        except PyMongoError as exc:
            logger.exception(
                "Event query failed",
                extra={"collection": self.collection_name, "stages": len(pipeline)},
            )
            raise StoreExecutionError("aggregate", self.collection_name) from exc

        try:
            events = [
                Event.model_validate(document, context=STORED_DOCUMENT) for document in documents
            ]
        except ValidationError as exc:
            raise StoreExecutionError("decode", self.collection_name) from exc

        lazy_logger.debug(lambda: f"executor.fetch_page -> {len(events)} rows")
        return events

    async def fetch_count(self, plan: QueryPlan) -> int | None:
        """Count rows matched by ``plan`` ignoring its skip and limit.

        Returns:
            The total (0 when nothing matched), or None if the count failed.
        """
        pipeline = plan.count_plan().to_pipeline()
        try:
            cursor = await self._collection.aggregate(pipeline)
            try:
                results = await cursor.to_list(None)
            finally:
                await cursor.close()
        except PyMongoError as exc:
            logger.warning(
                "Event count failed, continuing without total",
                extra={"collection": self.collection_name, "error": str(exc)},
            )
            return None

        # $count emits no document at all when nothing matched.
        total = int(results[0].get("total", 0)) if results else 0
        lazy_logger.debug(lambda: f"executor.fetch_count -> {total}")
        return total


__all__ = ["QueryExecutor"]
