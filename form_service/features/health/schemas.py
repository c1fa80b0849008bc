"""Health check response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class LivenessResponse(BaseModel):
    """Liveness probe response.

    Example:
        ```json
        {"alive": true, "service": "form-service", "version": "1.0.0",
         "timestamp": "2025-01-01T00:00:00Z"}
        ```
    """

    alive: bool = True
    service: str
    version: str
    timestamp: datetime


class ReadinessResponse(BaseModel):
    """Readiness probe response; 503 when a critical dependency is down."""

    ready: bool
    checks: dict[str, bool] = Field(default_factory=dict)
    timestamp: datetime
