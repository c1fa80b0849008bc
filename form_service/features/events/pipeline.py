"""Aggregation pipeline construction for event queries.

A query plan is an ordered tuple of stage objects, each rendering a single
aggregation stage. ``EventPlanBuilder`` owns the sort specification, so the
cursor boundary in the selection stage and the final ordering stage always
agree on direction.

Stage order:
    1. selection (base query, cursor boundary, coordinate guard)
    2. session join (optionally time-filtered, then non-empty check)
    3. skip (offset mode only, when offset > 0)
    4. sort
    5. limit (``limit + 1`` in cursor mode for the sentinel row)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

from form_service.core.pagination import CursorCodec, CursorData, is_cursor_mode
from form_service.core.settings.pagination import (
    DEFAULT_LOCATION_RADIUS_METERS,
    PaginationSettings,
)
from form_service.core.utils import first_available, positive_or_none
from form_service.features.events.filters import (
    BaseEventFilter,
    EventFilter,
    PublicEventFilter,
)
from form_service.features.events.models import EventStatus, EventVisibility
from form_service.infra.database.session import SESSIONS_COLLECTION
from form_service.infra.logging import get_lazy_logger

# Earth's mean radius used by $centerSphere to convert meters to radians.
EARTH_RADIUS_METERS = 6_378_100.0
DEFAULT_SORT_FIELD = "created_at"

# Legacy documents without an array-typed point are excluded from every query.
COORDINATES_GUARD: dict[str, Any] = {
    "location.coordinates.coordinates": {"$exists": True, "$type": "array"},
}

lazy_logger = get_lazy_logger(__name__)


class Stage(Protocol):
    def to_mongo(self) -> dict[str, Any]: ...


@dataclass(frozen=True)
class SortSpec:
    """Sort field and direction, shared by the boundary and ordering stages."""

    field: str = DEFAULT_SORT_FIELD
    descending: bool = True

    @classmethod
    def from_inputs(cls, sort_by: str | None, sort_order: str | None) -> SortSpec:
        return cls(field=sort_by or DEFAULT_SORT_FIELD, descending=sort_order != "asc")

    @property
    def direction(self) -> int:
        return -1 if self.descending else 1

    @property
    def boundary_operator(self) -> str:
        return "$lt" if self.descending else "$gt"


@dataclass(frozen=True)
class MatchStage:
    conditions: Mapping[str, Any]

    def to_mongo(self) -> dict[str, Any]:
        return {"$match": dict(self.conditions)}


@dataclass(frozen=True)
class SessionLookupStage:
    """Join sessions on ``event_id``; restrict by start time when bounded."""

    start_from: datetime | None = None
    start_to: datetime | None = None

    @property
    def is_filtered(self) -> bool:
        return self.start_from is not None or self.start_to is not None

    def to_mongo(self) -> dict[str, Any]:
        if not self.is_filtered:
            return {
                "$lookup": {
                    "from": SESSIONS_COLLECTION,
                    "localField": "_id",
                    "foreignField": "event_id",
                    "as": "sessions",
                },
            }

        start_time: dict[str, Any] = {}
        if self.start_from is not None:
            start_time["$gte"] = self.start_from
        if self.start_to is not None:
            start_time["$lte"] = self.start_to
        return {
            "$lookup": {
                "from": SESSIONS_COLLECTION,
                "let": {"event_id": "$_id"},
                "pipeline": [
                    {"$match": {"$expr": {"$eq": ["$event_id", "$$event_id"]}}},
                    {"$match": {"start_time": start_time}},
                ],
                "as": "sessions",
            },
        }


@dataclass(frozen=True)
class SkipStage:
    count: int

    def to_mongo(self) -> dict[str, Any]:
        return {"$skip": self.count}


@dataclass(frozen=True)
class SortStage:
    spec: SortSpec

    def to_mongo(self) -> dict[str, Any]:
        return {"$sort": {self.spec.field: self.spec.direction}}


@dataclass(frozen=True)
class LimitStage:
    count: int

    def to_mongo(self) -> dict[str, Any]:
        return {"$limit": self.count}


@dataclass(frozen=True)
class CountStage:
    field: str = "total"

    def to_mongo(self) -> dict[str, Any]:
        return {"$count": self.field}


@dataclass(frozen=True)
class QueryPlan:
    """An ordered, immutable aggregation plan."""

    stages: tuple[Stage, ...] = field(default_factory=tuple)
    cursor_mode: bool = False

    def to_pipeline(self) -> list[dict[str, Any]]:
        return [stage.to_mongo() for stage in self.stages]

    def count_plan(self) -> QueryPlan:
        """Derive the counting plan: drop skip/limit, append a count stage."""
        stages = tuple(s for s in self.stages if not isinstance(s, SkipStage | LimitStage))
        return QueryPlan(stages=(*stages, CountStage()), cursor_mode=self.cursor_mode)


class EventPlanBuilder:
    """Assemble a ``QueryPlan`` in the fixed stage order.

    Example:
        plan = (
            EventPlanBuilder(SortSpec.from_inputs("created_at", "desc"))
            .match(base_query, cursor=cursor)
            .join_sessions(start_from, start_to)
            .skip(offset)
            .sort()
            .limit(limit)
            .build()
        )
    """

    def __init__(self, sort: SortSpec | None = None) -> None:
        self._sort = sort or SortSpec()
        self._stages: list[Stage] = []
        self._cursor_mode = False

    @property
    def sort_spec(self) -> SortSpec:
        return self._sort

    def match(
        self,
        base_query: Mapping[str, Any],
        *,
        cursor: CursorData | None = None,
    ) -> EventPlanBuilder:
        conditions = dict(base_query)
        if cursor is not None:
            self._cursor_mode = True
            if cursor.has_boundary:
                conditions["_id"] = {self._sort.boundary_operator: cursor.object_id}
        conditions.update(COORDINATES_GUARD)
        self._stages.append(MatchStage(conditions))
        return self

    def join_sessions(
        self,
        start_from: datetime | None = None,
        start_to: datetime | None = None,
    ) -> EventPlanBuilder:
        lookup = SessionLookupStage(start_from=start_from, start_to=start_to)
        self._stages.append(lookup)
        if lookup.is_filtered:
            self._stages.append(MatchStage({"sessions": {"$ne": []}}))
        return self

    def skip(self, offset: int) -> EventPlanBuilder:
        if offset > 0 and not self._cursor_mode:
            self._stages.append(SkipStage(offset))
        return self

    def sort(self) -> EventPlanBuilder:
        self._stages.append(SortStage(self._sort))
        return self

    def limit(self, limit: int) -> EventPlanBuilder:
        if limit > 0:
            # One extra row in cursor mode signals that another page exists.
            self._stages.append(LimitStage(limit + 1 if self._cursor_mode else limit))
        return self

    def build(self) -> QueryPlan:
        return QueryPlan(stages=tuple(self._stages), cursor_mode=self._cursor_mode)


def build_event_plan(base_query: Mapping[str, Any], query: BaseEventFilter) -> QueryPlan:
    """Build the unified list plan for ``query`` on top of ``base_query``.

    Raises:
        InvalidCursorError: If ``query.page_token`` cannot be decoded.
    """
    cursor = CursorCodec.decode(query.page_token) if is_cursor_mode(query.page_token) else None
    plan = (
        EventPlanBuilder(SortSpec.from_inputs(query.sort_by, query.sort_order))
        .match(base_query, cursor=cursor)
        .join_sessions(query.session_start_from, query.session_start_to)
        .skip(query.offset)
        .sort()
        .limit(query.limit)
        .build()
    )
    lazy_logger.debug(lambda: f"pipeline.build_event_plan -> {plan.to_pipeline()!r}")
    return plan


def build_single_event_plan(base_query: Mapping[str, Any]) -> QueryPlan:
    """Plan for fetching one event with all of its sessions.

    Point lookups skip the coordinate guard applied to list queries.
    """
    return QueryPlan(stages=(MatchStage(base_query), SessionLookupStage(), LimitStage(1)))


def console_base_query(query: EventFilter) -> dict[str, Any]:
    """Tenant-scoped selection: merchant, status, visibility and text search."""
    conditions: dict[str, Any] = {"merchant_id": query.merchant_id}
    if query.status:
        conditions["status"] = query.status
    if query.visibility:
        conditions["visibility"] = query.visibility
    if query.title_search:
        conditions["$text"] = {"$search": query.title_search}
    return conditions


def resolve_location_radius(
    requested: int | None,
    settings: PaginationSettings | None = None,
) -> int:
    """Resolve the search radius: request, then configuration, then 1000 m."""
    return first_available(
        lambda: requested,
        lambda: positive_or_none(settings.default_location_radius) if settings else None,
        lambda: DEFAULT_LOCATION_RADIUS_METERS,
    )


def geo_within_query(lng: float, lat: float, radius_meters: float) -> dict[str, Any]:
    """Spherical-cap selection around ``(lng, lat)``."""
    return {
        "location.coordinates": {
            "$geoWithin": {
                "$centerSphere": [[lng, lat], radius_meters / EARTH_RADIUS_METERS],
            },
        },
    }


def public_base_query(
    query: PublicEventFilter,
    settings: PaginationSettings | None = None,
) -> dict[str, Any]:
    """Selection over published, public events with optional text and location."""
    conditions: dict[str, Any] = {
        "status": str(EventStatus.PUBLISHED),
        "visibility": str(EventVisibility.PUBLIC),
    }
    if query.title_search:
        conditions["$text"] = {"$search": query.title_search}
    if query.has_location:
        radius = resolve_location_radius(query.location_radius, settings)
        conditions.update(geo_within_query(query.location_lng, query.location_lat, radius))
    return conditions


__all__ = [
    "COORDINATES_GUARD",
    "EARTH_RADIUS_METERS",
    "CountStage",
    "EventPlanBuilder",
    "LimitStage",
    "MatchStage",
    "QueryPlan",
    "SessionLookupStage",
    "SkipStage",
    "SortSpec",
    "SortStage",
    "Stage",
    "build_event_plan",
    "build_single_event_plan",
    "console_base_query",
    "geo_within_query",
    "public_base_query",
    "resolve_location_radius",
]
