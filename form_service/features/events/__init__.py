"""Events feature: multi-tenant event listing and public search.

Routers live in ``form_service.features.events.router`` and are imported
by the application router only.
"""

from form_service.features.events.models import Event, EventStatus, EventVisibility, Session
from form_service.features.events.repository import EventListResult, EventRepository

__all__ = [
    "Event",
    "EventListResult",
    "EventRepository",
    "EventStatus",
    "EventVisibility",
    "Session",
]
