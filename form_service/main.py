"""Entry point: ``python -m form_service.main`` or the ``form-service`` script."""

from __future__ import annotations

from typing import NoReturn
import sys


def main() -> NoReturn:
    """Run the FastAPI application with uvicorn using configured settings."""
    import uvicorn

    from form_service.core.settings import get_app_settings, get_logging_settings

    settings = get_app_settings()
    log_settings = get_logging_settings()

    uvicorn.run(
        "form_service.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        access_log=settings.debug,
        log_level=log_settings.level.lower(),
    )
    sys.exit(0)


if __name__ == "__main__":
    main()
