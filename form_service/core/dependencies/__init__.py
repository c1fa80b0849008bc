"""FastAPI dependencies shared by feature routers."""

from .database import get_database
from .repositories import get_event_repository
from .services import get_event_service
from .tenant import get_merchant_id

__all__ = [
    "get_database",
    "get_event_repository",
    "get_event_service",
    "get_merchant_id",
]
