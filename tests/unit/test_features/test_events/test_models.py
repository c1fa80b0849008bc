"""Unit tests for event and session models."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from bson import ObjectId
from pydantic import ValidationError

from form_service.features.events.models import (
    STORED_DOCUMENT,
    Event,
    EventStatus,
    EventVisibility,
    GeoJSONPoint,
    Session,
    find_duplicate_sessions,
)

START = datetime(2025, 6, 1, 10, tzinfo=UTC)


def _session(start: datetime = START, hours: int = 2, **kwargs) -> Session:
    end = start + timedelta(hours=hours)
    return Session(event_id=ObjectId(), start_time=start, end_time=end, **kwargs)


class TestGeoJSONPoint:
    def test_sentinel_default(self):
        point = GeoJSONPoint()

        assert point.type == "Point"
        assert point.coordinates == (0.0, 0.0)

    def test_longitude_first(self):
        point = GeoJSONPoint(coordinates=[121.5654, 25.0330])

        assert point.longitude == 121.5654
        assert point.latitude == 25.0330


class TestSession:
    def test_decodes_store_document(self):
        event_id = ObjectId()
        session = Session.model_validate(
            {
                "_id": ObjectId(),
                "event_id": event_id,
                "start_time": START,
                "end_time": START + timedelta(hours=1),
            },
        )

        assert session.event_id == event_id
        assert session.capacity is None
        assert session.duration == timedelta(hours=1)

    def test_valid_session(self):
        session = _session(capacity=0)

        session.check_valid()
        assert session.capacity == 0

    def test_start_must_precede_end(self):
        with pytest.raises(ValidationError, match="start_time must be before end_time"):
            _session(hours=0)

    def test_negative_capacity(self):
        with pytest.raises(ValidationError, match="capacity must be non-negative"):
            _session(capacity=-1)

    def test_stored_document_skips_schedule_checks(self):
        """Legacy rows with inverted ranges still decode from the store."""
        document = {
            "event_id": ObjectId(),
            "start_time": START,
            "end_time": START - timedelta(hours=1),
            "capacity": -5,
        }

        session = Session.model_validate(document, context=STORED_DOCUMENT)

        with pytest.raises(ValueError, match="start_time"):
            session.check_valid()

    def test_event_context_reaches_sessions(self):
        document = {
            "_id": ObjectId(),
            "sessions": [
                {"event_id": ObjectId(), "start_time": START, "end_time": START},
            ],
        }

        with pytest.raises(ValidationError):
            Event.model_validate(document)
        event = Event.model_validate(document, context=STORED_DOCUMENT)
        assert len(event.sessions) == 1


class TestFindDuplicateSessions:
    def test_no_duplicates(self):
        sessions = [_session(), _session(START + timedelta(days=1))]

        assert find_duplicate_sessions(sessions) is None

    def test_reports_first_pair(self):
        sessions = [_session(), _session(START + timedelta(days=1)), _session()]

        assert find_duplicate_sessions(sessions) == (0, 2)

    def test_same_start_different_end_is_distinct(self):
        assert find_duplicate_sessions([_session(hours=1), _session(hours=2)]) is None


class TestEvent:
    @pytest.mark.parametrize(
        ("status", "visibility", "expected"),
        [
            (EventStatus.PUBLISHED, EventVisibility.PUBLIC, True),
            (EventStatus.PUBLISHED, EventVisibility.PRIVATE, False),
            (EventStatus.DRAFT, EventVisibility.PUBLIC, False),
            ("archived", "public", False),
        ],
    )
    def test_is_public(self, status, visibility, expected):
        event = Event(title="t", merchant_id="m", status=status, visibility=visibility)

        assert event.is_public() is expected

    def test_unknown_status_is_accepted(self):
        """Status values are opaque strings when read from the store."""
        event = Event.model_validate({"_id": ObjectId(), "status": "legacy-state"})

        assert event.status == "legacy-state"

    def test_to_document_omits_sessions_and_empty_id(self):
        event = Event(title="t", merchant_id="m", sessions=[_session()])

        document = event.to_document()

        assert "sessions" not in document
        assert "_id" not in document
        assert document["status"] == "draft"
        assert document["location"]["coordinates"]["coordinates"] == [0.0, 0.0]
