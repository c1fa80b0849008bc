"""Dependency injection for services."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from form_service.core.dependencies.repositories import get_event_repository
from form_service.core.settings import get_pagination_settings
from form_service.features.events.repository import EventRepository
from form_service.features.events.service import EventService


async def get_event_service(
    repo: Annotated[EventRepository, Depends(get_event_repository)],
) -> EventService:
    """Provide an EventService with the configured pagination limits."""
    return EventService(repo, get_pagination_settings())
