"""Database dependency for FastAPI route handlers.

The MongoDB client is owned by the application lifespan
(``form_service.infra.database``). Route handlers receive the shared
database handle through ``get_database``; there is no per-request session
to open or close.

Usage:
    @router.get("/items")
    async def list_items(
        database: Annotated[AsyncDatabase, Depends(get_database)],
    ):
        ...
"""

from __future__ import annotations

from typing import Any

from pymongo.asynchronous.database import AsyncDatabase

from form_service.core.exceptions import ServiceUnavailableException
from form_service.infra.database import get_mongo_database


async def get_database() -> AsyncDatabase[dict[str, Any]]:
    """FastAPI dependency for the MongoDB database handle.

    Raises:
        ServiceUnavailableException: If the store is disabled or was not
            initialised at startup.
    """
    database = get_mongo_database()
    if database is None:
        raise ServiceUnavailableException(
            detail="Document store is not available",
            type="database-unavailable",
        )
    return database
