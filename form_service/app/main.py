"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from form_service.app.exception_handlers import configure_exception_handlers
from form_service.app.lifespan import lifespan
from form_service.app.middleware import RequestIDMiddleware
from form_service.app.router import setup_routers
from form_service.core.settings import get_settings


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()
    app_settings = settings.app

    app = FastAPI(
        title=app_settings.title,
        version=app_settings.version,
        debug=app_settings.debug,
        docs_url=app_settings.docs_url,
        lifespan=lifespan,
    )

    # Exception handlers first, then middleware and routes
    configure_exception_handlers(app)
    app.add_middleware(RequestIDMiddleware)
    setup_routers(app, app_settings)

    return app


# Application instance for uvicorn
app = create_app()
