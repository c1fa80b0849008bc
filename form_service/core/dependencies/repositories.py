"""Dependency injection for repositories."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends
from pymongo.asynchronous.database import AsyncDatabase

from form_service.core.dependencies.database import get_database
from form_service.core.settings import get_pagination_settings
from form_service.features.events.repository import EventRepository


async def get_event_repository(
    database: Annotated[AsyncDatabase[dict[str, Any]], Depends(get_database)],
) -> EventRepository:
    """Provide an EventRepository bound to the shared database handle."""
    return EventRepository(database, get_pagination_settings())
