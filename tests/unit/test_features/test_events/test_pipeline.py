"""Unit tests for event aggregation plans."""

from __future__ import annotations

import math
from datetime import UTC, datetime

import pytest
from bson import ObjectId

from form_service.core.database import InvalidCursorError
from form_service.core.pagination import CursorCodec, CursorData
from form_service.core.settings.pagination import PaginationSettings
from form_service.features.events.filters import EventFilter, PublicEventFilter
from form_service.features.events.pipeline import (
    COORDINATES_GUARD,
    EARTH_RADIUS_METERS,
    EventPlanBuilder,
    LimitStage,
    SkipStage,
    SortSpec,
    build_event_plan,
    build_single_event_plan,
    console_base_query,
    public_base_query,
    resolve_location_radius,
)

FROM = datetime(2025, 5, 1, tzinfo=UTC)
TO = datetime(2025, 5, 31, tzinfo=UTC)


def _token(last_id: ObjectId | None = None) -> str:
    return CursorCodec.encode(CursorData(last_id=str(last_id) if last_id else ""))


def _central_angle(a: list[float], b: list[float]) -> float:
    """Haversine angle in radians between two ``[lng, lat]`` points."""
    lng1, lat1, lng2, lat2 = map(math.radians, (*a, *b))
    h = (
        math.sin((lat2 - lat1) / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin((lng2 - lng1) / 2) ** 2
    )
    return 2 * math.asin(math.sqrt(h))


def _stage_names(pipeline: list[dict]) -> list[str]:
    return [next(iter(stage)) for stage in pipeline]


class TestSortSpec:
    @pytest.mark.parametrize(
        ("sort_by", "sort_order", "field", "direction", "operator"),
        [
            (None, None, "created_at", -1, "$lt"),
            ("updated_at", "desc", "updated_at", -1, "$lt"),
            ("created_at", "asc", "created_at", 1, "$gt"),
        ],
    )
    def test_boundary_matches_direction(self, sort_by, sort_order, field, direction, operator):
        spec = SortSpec.from_inputs(sort_by, sort_order)

        assert spec.field == field
        assert spec.direction == direction
        assert spec.boundary_operator == operator


class TestBuildEventPlan:
    """Stage order and contents of the unified list plan."""

    def test_offset_plan_stage_order(self):
        query = EventFilter(merchant_id="m-1", limit=10, offset=20)

        pipeline = build_event_plan({"merchant_id": "m-1"}, query).to_pipeline()

        assert _stage_names(pipeline) == ["$match", "$lookup", "$skip", "$sort", "$limit"]
        assert pipeline[2] == {"$skip": 20}
        assert pipeline[3] == {"$sort": {"created_at": -1}}
        assert pipeline[4] == {"$limit": 10}

    def test_first_page_has_no_skip(self):
        query = EventFilter(merchant_id="m-1", limit=10)

        pipeline = build_event_plan({}, query).to_pipeline()

        assert "$skip" not in _stage_names(pipeline)

    def test_coordinate_guard_always_applied(self):
        query = EventFilter(merchant_id="m-1")

        match = build_event_plan({"merchant_id": "m-1"}, query).to_pipeline()[0]["$match"]

        assert match["location.coordinates.coordinates"] == {"$exists": True, "$type": "array"}
        assert match["merchant_id"] == "m-1"

    def test_unfiltered_join(self):
        pipeline = build_event_plan({}, EventFilter(merchant_id="m-1")).to_pipeline()

        assert pipeline[1] == {
            "$lookup": {
                "from": "sessions",
                "localField": "_id",
                "foreignField": "event_id",
                "as": "sessions",
            },
        }

    def test_time_filtered_join_requires_sessions(self):
        """Events without a session in the window are dropped after the join."""
        query = EventFilter(merchant_id="m-1", session_start_from=FROM, session_start_to=TO)

        pipeline = build_event_plan({}, query).to_pipeline()

        assert _stage_names(pipeline) == ["$match", "$lookup", "$match", "$sort", "$limit"]
        lookup = pipeline[1]["$lookup"]
        assert lookup["let"] == {"event_id": "$_id"}
        assert lookup["pipeline"] == [
            {"$match": {"$expr": {"$eq": ["$event_id", "$$event_id"]}}},
            {"$match": {"start_time": {"$gte": FROM, "$lte": TO}}},
        ]
        assert pipeline[2] == {"$match": {"sessions": {"$ne": []}}}

    def test_open_ended_window(self):
        query = EventFilter(merchant_id="m-1", session_start_from=FROM)

        lookup = build_event_plan({}, query).to_pipeline()[1]["$lookup"]

        assert lookup["pipeline"][1] == {"$match": {"start_time": {"$gte": FROM}}}

    def test_cursor_mode_descending(self):
        last_id = ObjectId()
        query = EventFilter(merchant_id="m-1", limit=5, offset=40, page_token=_token(last_id))

        plan = build_event_plan({"merchant_id": "m-1"}, query)
        pipeline = plan.to_pipeline()

        assert plan.cursor_mode
        assert pipeline[0]["$match"]["_id"] == {"$lt": last_id}
        # No skip in cursor mode, and one sentinel row
        assert _stage_names(pipeline) == ["$match", "$lookup", "$sort", "$limit"]
        assert pipeline[-1] == {"$limit": 6}

    def test_cursor_mode_ascending(self):
        last_id = ObjectId()
        query = EventFilter(
            merchant_id="m-1",
            sort_by="updated_at",
            sort_order="asc",
            page_token=_token(last_id),
        )

        pipeline = build_event_plan({}, query).to_pipeline()

        assert pipeline[0]["$match"]["_id"] == {"$gt": last_id}
        assert pipeline[2] == {"$sort": {"updated_at": 1}}

    def test_cursor_without_last_id_has_no_boundary(self):
        query = EventFilter(merchant_id="m-1", limit=5, page_token=_token())

        pipeline = build_event_plan({}, query).to_pipeline()

        assert "_id" not in pipeline[0]["$match"]
        assert pipeline[-1] == {"$limit": 6}

    def test_invalid_token_raises(self):
        query = EventFilter(merchant_id="m-1", page_token="%%%")

        with pytest.raises(InvalidCursorError):
            build_event_plan({}, query)

    def test_page_number_clears_token(self):
        """page=2 with a token computes offset from the page alone."""
        query = EventFilter(merchant_id="m-1", limit=10, page_token=_token(ObjectId())).with_page(2)

        plan = build_event_plan({}, query)
        pipeline = plan.to_pipeline()

        assert not plan.cursor_mode
        assert "_id" not in pipeline[0]["$match"]
        assert {"$skip": 10} in pipeline
        assert pipeline[-1] == {"$limit": 10}


class TestCountPlan:
    def test_strips_skip_and_limit(self):
        query = EventFilter(
            merchant_id="m-1", limit=10, offset=30, session_start_from=FROM,
        )
        plan = build_event_plan({"merchant_id": "m-1"}, query)

        count_pipeline = plan.count_plan().to_pipeline()

        assert _stage_names(count_pipeline) == ["$match", "$lookup", "$match", "$sort", "$count"]
        assert count_pipeline[-1] == {"$count": "total"}
        assert not any(isinstance(s, SkipStage | LimitStage) for s in plan.count_plan().stages)

    def test_original_plan_unchanged(self):
        plan = build_event_plan({}, EventFilter(merchant_id="m-1", offset=10))

        plan.count_plan()

        assert {"$skip": 10} in plan.to_pipeline()


class TestEventPlanBuilder:
    def test_zero_limit_emits_no_limit_stage(self):
        plan = EventPlanBuilder().match({}).join_sessions().sort().limit(0).build()

        assert _stage_names(plan.to_pipeline()) == ["$match", "$lookup", "$sort"]

    def test_single_event_plan(self):
        oid = ObjectId()

        pipeline = build_single_event_plan({"_id": oid}).to_pipeline()

        assert pipeline[0] == {"$match": {"_id": oid}}
        assert pipeline[1]["$lookup"]["localField"] == "_id"
        assert pipeline[2] == {"$limit": 1}


class TestConsoleBaseQuery:
    def test_only_merchant_by_default(self):
        assert console_base_query(EventFilter(merchant_id="m-1")) == {"merchant_id": "m-1"}

    def test_all_filters(self):
        query = EventFilter(
            merchant_id="m-1", status="draft", visibility="private", title_search="tea",
        )

        assert console_base_query(query) == {
            "merchant_id": "m-1",
            "status": "draft",
            "visibility": "private",
            "$text": {"$search": "tea"},
        }


class TestPublicBaseQuery:
    def test_published_and_public_only(self):
        conditions = public_base_query(PublicEventFilter())

        assert conditions == {"status": "published", "visibility": "public"}

    def test_geo_query_uses_radians(self):
        query = PublicEventFilter(location_lat=25.0330, location_lng=121.5654, location_radius=2000)

        conditions = public_base_query(query)

        sphere = conditions["location.coordinates"]["$geoWithin"]["$centerSphere"]
        assert sphere[0] == [121.5654, 25.0330]
        assert math.isclose(sphere[1], 2000 / EARTH_RADIUS_METERS)

    @pytest.mark.parametrize(
        ("east_meters", "inside"),
        [(200, True), (999, True), (1001, False), (50_000, False)],
    )
    def test_geo_cap_selects_by_great_circle_distance(self, east_meters, inside):
        """A 1000 m cap around Taipei admits points by surface distance."""
        lng, lat = 121.5654, 25.0330
        query = PublicEventFilter(location_lat=lat, location_lng=lng, location_radius=1000)
        center, cap = public_base_query(query)["location.coordinates"]["$geoWithin"][
            "$centerSphere"
        ]
        parallel_radius = EARTH_RADIUS_METERS * math.cos(math.radians(lat))
        point_lng = lng + math.degrees(east_meters / parallel_radius)

        angle = _central_angle(center, [point_lng, lat])

        assert (angle <= cap) is inside

    def test_geo_query_needs_both_coordinates(self):
        conditions = public_base_query(PublicEventFilter(location_lat=25.0))

        assert "location.coordinates" not in conditions

    def test_geo_query_does_not_replace_guard(self):
        query = PublicEventFilter(location_lat=25.0, location_lng=121.0)

        match = build_event_plan(public_base_query(query), query).to_pipeline()[0]["$match"]

        assert "location.coordinates" in match
        assert match["location.coordinates.coordinates"] == COORDINATES_GUARD[
            "location.coordinates.coordinates"
        ]

    def test_text_search(self):
        conditions = public_base_query(PublicEventFilter(title_search="market"))

        assert conditions["$text"] == {"$search": "market"}


class TestResolveLocationRadius:
    def test_request_wins(self):
        assert resolve_location_radius(250, PaginationSettings(default_location_radius=5000)) == 250

    def test_configured_default(self):
        assert resolve_location_radius(None, PaginationSettings(default_location_radius=5000)) == 5000

    def test_hardcoded_default_without_settings(self):
        assert resolve_location_radius(None, None) == 1000

    def test_hardcoded_default_when_unset(self):
        assert resolve_location_radius(None, PaginationSettings(default_location_radius=None)) == 1000
