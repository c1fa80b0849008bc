"""Application lifespan management.

Startup Order:
1. Core (logging) - always runs first
2. Database (MongoDB) and index migrations - conditional on configuration

Shutdown Order: Reverse of startup.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING

from form_service.core.settings import (
    get_app_settings,
    get_logging_settings,
    get_mongo_settings,
)
from form_service.infra.database import close_database, init_database, run_migrations
from form_service.infra.logging.config import setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


async def _startup_core() -> None:
    app = get_app_settings()
    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Application starting",
        extra={"service": app.service_name, "environment": app.environment},
    )


async def _startup_database() -> None:
    """Connect to MongoDB and create indexes when configured."""
    mongo = get_mongo_settings()
    if not mongo.is_configured:
        logger.info("MongoDB disabled, skipping connection")
        return

    try:
        database = await init_database(mongo)
        logger.info("MongoDB connection initialized", extra={"database": mongo.database})
        if mongo.run_migrations:
            await run_migrations(database)
    except Exception as e:
        if mongo.startup_require_db:
            logger.exception(
                "MongoDB required but unavailable, failing startup",
                extra={"error": str(e), "startup_require_db": True},
            )
            raise
        logger.warning(
            "MongoDB unavailable, continuing in degraded mode",
            extra={"error": str(e), "startup_require_db": False},
        )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start services in dependency order and stop them in reverse."""
    await _startup_core()
    await _startup_database()
    try:
        yield
    finally:
        await close_database()
        logger.info("Application shutdown complete")
