"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from form_service.core.settings import get_app_settings
from form_service.features.events.router import console_router, public_router
from form_service.features.health.router import router as health_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from form_service.core.settings.app import AppSettings

logger = logging.getLogger(__name__)


def setup_routers(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Register all feature routers with the application.

    Console routes are mounted under ``api_prefix``, public routes under
    ``public_prefix`` and health probes at the root.
    """
    app_settings = app_settings or get_app_settings()

    app.include_router(health_router)
    app.include_router(console_router, prefix=app_settings.api_prefix)
    app.include_router(public_router, prefix=app_settings.public_prefix)

    logger.debug(
        "Routers configured",
        extra={"api_prefix": app_settings.api_prefix, "public_prefix": app_settings.public_prefix},
    )
