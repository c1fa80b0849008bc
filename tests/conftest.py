"""Pytest configuration and shared fixtures.

Organization:
    - Application Fixtures: FastAPI app and HTTP client
    - Store Fixtures: mocked async MongoDB collection and database
    - Data Fixtures: event and session document factories
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

# Ensure tests run without external infrastructure
os.environ.setdefault("MONGO_ENABLED", "false")
os.environ.setdefault("LOG_JSON_LOGS", "false")
os.environ.setdefault("APP_ENVIRONMENT", "test")


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
async def app():
    """Create a fresh FastAPI application with no store connection."""
    from form_service.app.main import create_app

    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    """HTTPX client bound to the app.

    Unhandled exceptions are turned into responses so 500 handling can be
    asserted.

    Example:
        async def test_health_check(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ============================================================================
# Store Fixtures
# ============================================================================


def make_cursor(documents: list[dict[str, Any]]) -> MagicMock:
    """Build a mock aggregation cursor returning ``documents``."""
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=documents)
    cursor.close = AsyncMock()
    return cursor


@pytest.fixture
def mock_collection() -> MagicMock:
    """Mock ``AsyncCollection`` for the events collection.

    ``aggregate`` returns an empty cursor unless configured, e.g.:

        mock_collection.aggregate.side_effect = [
            make_cursor([doc]),   # page query
            make_cursor([{"total": 1}]),  # count query
        ]
    """
    collection = MagicMock()
    collection.name = "events"
    collection.aggregate = AsyncMock(return_value=make_cursor([]))
    collection.insert_one = AsyncMock()
    collection.replace_one = AsyncMock()
    collection.delete_one = AsyncMock()
    collection.count_documents = AsyncMock(return_value=0)
    return collection


@pytest.fixture
def mock_database(mock_collection: MagicMock) -> MagicMock:
    """Mock ``AsyncDatabase`` whose item access yields ``mock_collection``."""
    database = MagicMock()
    database.__getitem__.return_value = mock_collection
    return database


# ============================================================================
# Data Fixtures
# ============================================================================


BASE_TIME = datetime(2025, 3, 1, 9, 0, tzinfo=UTC)


@pytest.fixture
def session_document() -> Callable[..., dict[str, Any]]:
    """Factory for session documents as stored in the sessions collection."""

    def factory(event_id: ObjectId, **overrides: Any) -> dict[str, Any]:
        start = overrides.pop("start_time", BASE_TIME + timedelta(days=7))
        document = {
            "_id": ObjectId(),
            "event_id": event_id,
            "name": "Morning",
            "capacity": 20,
            "start_time": start,
            "end_time": start + timedelta(hours=2),
        }
        document.update(overrides)
        return document

    return factory


@pytest.fixture
def event_document(session_document) -> Callable[..., dict[str, Any]]:
    """Factory for event documents as returned by the list pipeline.

    Example:
        doc = event_document(title="Tea tasting", sessions=1)
    """

    def factory(*, sessions: int = 0, **overrides: Any) -> dict[str, Any]:
        event_id = overrides.pop("_id", ObjectId())
        document = {
            "_id": event_id,
            "title": "Night market food tour",
            "merchant_id": "merchant-42",
            "summary": "Street food walk",
            "status": "published",
            "visibility": "public",
            "location": {
                "name": "Raohe Street",
                "address": "Songshan, Taipei",
                "place_id": "place-1",
                "coordinates": {"type": "Point", "coordinates": [121.5654, 25.0330]},
            },
            "sessions": [session_document(event_id) for _ in range(sessions)],
            "detail": [{"type": "text", "data": {"content": "Bring cash"}}],
            "faq": [{"question": "Vegetarian?", "answer": "Yes"}],
            "created_at": BASE_TIME,
            "created_by": "user-1",
            "updated_at": BASE_TIME,
            "updated_by": "user-1",
        }
        document.update(overrides)
        return document

    return factory


@pytest.fixture
def cursor_factory() -> Callable[[list[dict[str, Any]]], MagicMock]:
    """Expose ``make_cursor`` to tests that script aggregation results."""
    return make_cursor
