"""MongoDB client management with the PyMongo async driver.

One ``AsyncMongoClient`` is created per process at startup. Its connection
pool is shared by all concurrent requests and bounded by
``MongoSettings.max_pool_size``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pymongo import AsyncMongoClient

from form_service.core.settings import get_mongo_settings

if TYPE_CHECKING:
    from pymongo.asynchronous.database import AsyncDatabase

    from form_service.core.settings.mongo import MongoSettings

logger = logging.getLogger(__name__)

EVENTS_COLLECTION = "events"
SESSIONS_COLLECTION = "sessions"

_client: AsyncMongoClient[dict[str, Any]] | None = None
_database_name: str | None = None


async def init_database(settings: MongoSettings | None = None) -> AsyncDatabase[dict[str, Any]]:
    """Connect to MongoDB and verify the server responds.

    Safe to call more than once; the existing client is reused.

    Args:
        settings: Mongo settings (defaults to the cached loader).

    Returns:
        The configured database handle.
    """
    global _client, _database_name

    settings = settings or get_mongo_settings()
    if _client is None:
        client: AsyncMongoClient[dict[str, Any]] = AsyncMongoClient(
            settings.url, tz_aware=True, **settings.client_kwargs()
        )
        try:
            await client.admin.command("ping")
        except Exception:
            await client.close()
            raise
        _client = client
        _database_name = settings.database
        logger.info(
            "MongoDB connection established",
            extra={"host": settings.host, "database": settings.database},
        )

    return _client[settings.database]


async def close_database() -> None:
    """Close the client and release pooled connections."""
    global _client, _database_name

    if _client is None:
        return
    await _client.close()
    _client = None
    _database_name = None
    logger.info("MongoDB connection closed")


def get_client() -> AsyncMongoClient[dict[str, Any]] | None:
    """Return the process-wide client, or None before startup."""
    return _client


def get_mongo_database() -> AsyncDatabase[dict[str, Any]] | None:
    """Return the configured database, or None before startup."""
    if _client is None or _database_name is None:
        return None
    return _client[_database_name]
