"""Unit tests for EventService error mapping and request handling."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId

from form_service.core.database import (
    InvalidCursorError,
    InvalidIdentifierError,
    NotFoundError,
    StoreExecutionError,
)
from form_service.core.exceptions import BadRequestException, NotFoundException
from form_service.core.pagination import Pagination
from form_service.core.settings.pagination import PaginationSettings
from form_service.features.events.repository import EventListResult, EventRepository
from form_service.features.events.requests import EventListRequest, PublicSearchRequest
from form_service.features.events.service import EventService


@pytest.fixture
def repo() -> MagicMock:
    repo = MagicMock(spec=EventRepository)
    empty = EventListResult(events=[], pagination=Pagination())
    repo.find = AsyncMock(return_value=empty)
    repo.find_public = AsyncMock(return_value=empty)
    repo.find_by_id = AsyncMock()
    repo.find_public_by_id = AsyncMock()
    return repo


@pytest.fixture
def service(repo) -> EventService:
    return EventService(repo, PaginationSettings(default_page_size=25, max_page_size=50))


class TestListEvents:
    async def test_builds_scoped_filter(self, service, repo):
        await service.list_events(EventListRequest(status="published", page=2), "merchant-42")

        event_filter = repo.find.await_args.args[0]
        assert event_filter.merchant_id == "merchant-42"
        assert event_filter.status == "published"
        assert event_filter.limit == 25
        assert event_filter.offset == 25

    async def test_invalid_token_is_bad_request(self, service, repo):
        repo.find.side_effect = InvalidCursorError("malformed token")

        with pytest.raises(BadRequestException) as exc_info:
            await service.list_events(EventListRequest(page_token="x"), "merchant-42")

        assert exc_info.value.status_code == 400
        assert exc_info.value.type == "invalid-page-token"

    async def test_store_failure_propagates(self, service, repo):
        repo.find.side_effect = StoreExecutionError("aggregate", "events")

        with pytest.raises(StoreExecutionError):
            await service.list_events(EventListRequest(), "merchant-42")


class TestSearchPublicEvents:
    async def test_page_size_above_max_uses_default(self, service, repo):
        await service.search_public_events(PublicSearchRequest(page_size=80))

        assert repo.find_public.await_args.args[0].limit == 25

    async def test_invalid_token_is_bad_request(self, service, repo):
        repo.find_public.side_effect = InvalidCursorError("invalid cursor id")

        with pytest.raises(BadRequestException):
            await service.search_public_events(PublicSearchRequest(page_token="x"))


class TestGetEvent:
    async def test_scoped_to_merchant(self, service, repo):
        event_id = str(ObjectId())

        await service.get_event(event_id, "merchant-42")

        repo.find_by_id.assert_awaited_once_with(event_id, merchant_id="merchant-42")

    async def test_not_found(self, service, repo):
        repo.find_by_id.side_effect = NotFoundError("Event", {"id": "x"})

        with pytest.raises(NotFoundException) as exc_info:
            await service.get_event(str(ObjectId()), "merchant-42")

        assert exc_info.value.status_code == 404

    async def test_malformed_id(self, service, repo):
        repo.find_public_by_id.side_effect = InvalidIdentifierError("bad", field="event_id")

        with pytest.raises(BadRequestException) as exc_info:
            await service.get_public_event("bad")

        assert exc_info.value.extra == {"event_id": "bad"}
