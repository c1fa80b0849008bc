"""Health check API endpoints.

- Liveness: ``/health`` - is the process alive?
- Readiness: ``/health/ready`` - does the document store answer a ping?
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Response, status
from pymongo.errors import PyMongoError

from form_service.core.settings import get_app_settings, get_mongo_settings
from form_service.features.health.schemas import LivenessResponse, ReadinessResponse
from form_service.infra.database import get_client

router = APIRouter(prefix="/health", tags=["health"])
logger = logging.getLogger(__name__)


@router.get(
    "",
    response_model=LivenessResponse,
    summary="Liveness probe",
    description="Returns 200 while the service process is responsive",
)
async def liveness_check() -> LivenessResponse:
    settings = get_app_settings()
    return LivenessResponse(
        service=settings.service_name,
        version=settings.version,
        timestamp=datetime.now(UTC),
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Service not ready to accept traffic"}},
    summary="Readiness probe",
    description="Returns 200 if the document store is reachable, 503 otherwise",
)
async def readiness_check(response: Response) -> ReadinessResponse:
    """Ping MongoDB when it is enabled.

    A disabled store is reported as ready so the service can run without it
    in tests and local development.
    """
    checks: dict[str, bool] = {}
    if get_mongo_settings().is_configured:
        checks["mongodb"] = await _ping_mongo()

    ready = all(checks.values())
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(ready=ready, checks=checks, timestamp=datetime.now(UTC))


async def _ping_mongo() -> bool:
    client = get_client()
    if client is None:
        return False
    try:
        await client.admin.command("ping")
    except PyMongoError as exc:
        logger.warning("MongoDB readiness ping failed", extra={"error": str(exc)})
        return False
    return True
