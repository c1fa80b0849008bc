"""Event list queries executed against a real MongoDB container."""

from __future__ import annotations

import math
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable, Iterator
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from form_service.features.events.filters import EventFilter, PublicEventFilter
from form_service.features.events.pipeline import EARTH_RADIUS_METERS
from form_service.features.events.repository import EventRepository
from form_service.infra.database import EVENTS_COLLECTION, SESSIONS_COLLECTION, run_migrations

pytestmark = [pytest.mark.integration, pytest.mark.slow]

BASE_TIME = datetime(2025, 3, 1, 9, 0, tzinfo=UTC)
TAIPEI = (121.5654, 25.0330)


def _north_of(point: tuple[float, float], meters: float) -> list[float]:
    lng, lat = point
    return [lng, lat + math.degrees(meters / EARTH_RADIUS_METERS)]


@pytest.fixture(scope="session")
def mongo_url() -> Iterator[str]:
    """Start a MongoDB container shared by every test in the session."""
    pytest.importorskip("testcontainers.mongodb", reason="testcontainers.mongodb is required")
    from testcontainers.mongodb import MongoDbContainer

    container = MongoDbContainer("mongo:7.0")
    try:
        container.start()
    except Exception as exc:  # pragma: no cover - environment dependent
        pytest.skip(f"MongoDB container unavailable: {exc}", allow_module_level=True)
    yield container.get_connection_url()
    container.stop()


@pytest.fixture
async def database(mongo_url: str) -> AsyncGenerator[AsyncDatabase[dict[str, Any]]]:
    """A fresh, indexed database dropped after the test."""
    client: AsyncMongoClient[dict[str, Any]] = AsyncMongoClient(mongo_url, tz_aware=True)
    db = client[f"events_{uuid.uuid4().hex[:12]}"]
    await run_migrations(db)
    try:
        yield db
    finally:
        await client.drop_database(db.name)
        await client.close()


@pytest.fixture
def repository(database) -> EventRepository:
    return EventRepository(database)


@pytest.fixture
def store(database) -> Callable[[list[dict[str, Any]]], Awaitable[None]]:
    """Insert event documents, moving their sessions to the sessions collection."""

    async def insert(events: list[dict[str, Any]]) -> None:
        sessions = [session for event in events for session in event.pop("sessions")]
        await database[EVENTS_COLLECTION].insert_many(events)
        if sessions:
            await database[SESSIONS_COLLECTION].insert_many(sessions)

    return insert


class TestSessionWindow:
    async def test_events_without_sessions_in_window_are_excluded(
        self, repository, store, event_document, session_document
    ):
        window_start = BASE_TIME + timedelta(days=3)
        upcoming = event_document(title="Upcoming")
        upcoming["sessions"] = [
            session_document(upcoming["_id"], start_time=BASE_TIME + timedelta(days=1)),
            session_document(upcoming["_id"], start_time=BASE_TIME + timedelta(days=7)),
        ]
        past = event_document(title="Past")
        past["sessions"] = [
            session_document(past["_id"], start_time=BASE_TIME + timedelta(days=1)),
        ]
        await store([upcoming, past, event_document(title="No sessions")])

        result = await repository.find(
            EventFilter(merchant_id="merchant-42", session_start_from=window_start),
        )

        assert [event.title for event in result.events] == ["Upcoming"]
        assert [s.start_time for s in result.events[0].sessions] == [
            BASE_TIME + timedelta(days=7),
        ]
        assert result.pagination.total_count == 1

    async def test_without_window_every_event_is_listed(self, repository, store, event_document):
        await store([event_document(), event_document()])

        result = await repository.find(EventFilter(merchant_id="merchant-42"))

        assert len(result.events) == 2
        assert result.pagination.total_count == 2


class TestGeoSearch:
    async def test_radius_bounds_public_results(self, repository, store, event_document):
        near = event_document(title="Near")
        near["location"]["coordinates"]["coordinates"] = _north_of(TAIPEI, 200)
        far = event_document(title="Far")
        far["location"]["coordinates"]["coordinates"] = _north_of(TAIPEI, 50_000)
        await store([near, far])

        result = await repository.find_public(
            PublicEventFilter(
                location_lng=TAIPEI[0],
                location_lat=TAIPEI[1],
                location_radius=1000,
            ),
        )

        assert [event.title for event in result.events] == ["Near"]

    async def test_private_events_never_match(self, repository, store, event_document):
        await store(
            [event_document(title="Open"), event_document(title="Hidden", visibility="private")],
        )

        result = await repository.find_public(
            PublicEventFilter(location_lng=TAIPEI[0], location_lat=TAIPEI[1]),
        )

        assert [event.title for event in result.events] == ["Open"]


class TestCursorPaging:
    async def test_pages_walk_all_events_once(self, repository, store, event_document):
        """Creation order matches id order, so the id boundary resumes the scan."""
        await store(
            [
                event_document(title=f"Event {i}", created_at=BASE_TIME + timedelta(minutes=i))
                for i in range(5)
            ],
        )

        first = await repository.find(EventFilter(merchant_id="merchant-42", limit=2))
        second = await repository.find(
            EventFilter(
                merchant_id="merchant-42",
                limit=2,
                page_token=first.pagination.next_page_token,
            ),
        )
        third = await repository.find(
            EventFilter(
                merchant_id="merchant-42",
                limit=2,
                page_token=second.pagination.next_page_token,
            ),
        )

        titles = [e.title for page in (first, second, third) for e in page.events]
        assert titles == [f"Event {i}" for i in (4, 3, 2, 1, 0)]
        assert second.pagination.has_prev
        assert not third.pagination.has_next
