"""MongoDB client lifecycle and index migrations."""

from form_service.infra.database.migrations import EVENT_INDEXES, SESSION_INDEXES, run_migrations
from form_service.infra.database.session import (
    EVENTS_COLLECTION,
    SESSIONS_COLLECTION,
    close_database,
    get_client,
    get_mongo_database,
    init_database,
)

__all__ = [
    "EVENTS_COLLECTION",
    "EVENT_INDEXES",
    "SESSIONS_COLLECTION",
    "SESSION_INDEXES",
    "close_database",
    "get_client",
    "get_mongo_database",
    "init_database",
    "run_migrations",
]
