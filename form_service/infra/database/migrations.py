"""Index migrations for the events and sessions collections.

``create_indexes`` is idempotent, so migrations run on every startup when
``MongoSettings.run_migrations`` is enabled.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pymongo import ASCENDING, DESCENDING, GEOSPHERE, TEXT, IndexModel

from form_service.infra.database.session import EVENTS_COLLECTION, SESSIONS_COLLECTION

if TYPE_CHECKING:
    from pymongo.asynchronous.database import AsyncDatabase

logger = logging.getLogger(__name__)

EVENT_INDEXES = [
    # Console list filters
    IndexModel([("merchant_id", ASCENDING), ("status", ASCENDING), ("visibility", ASCENDING)]),
    IndexModel([("location.coordinates", GEOSPHERE)]),
    IndexModel([("title", TEXT)]),
    IndexModel([("merchant_id", ASCENDING), ("created_at", DESCENDING)]),
    IndexModel([("merchant_id", ASCENDING), ("updated_at", DESCENDING)]),
]

SESSION_INDEXES = [
    # Join key for the session lookup stage
    IndexModel([("event_id", ASCENDING)]),
    IndexModel([("event_id", ASCENDING), ("start_time", ASCENDING)]),
    IndexModel([("start_time", ASCENDING), ("end_time", ASCENDING)]),
]


async def run_migrations(database: AsyncDatabase[dict[str, Any]]) -> None:
    """Create all collection indexes."""
    for collection, indexes in (
        (EVENTS_COLLECTION, EVENT_INDEXES),
        (SESSIONS_COLLECTION, SESSION_INDEXES),
    ):
        names = await database[collection].create_indexes(indexes)
        logger.info(
            "Ensured collection indexes",
            extra={"collection": collection, "indexes": names},
        )
