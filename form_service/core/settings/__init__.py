"""Modular Pydantic Settings v2 configuration.

Each domain (app, mongo, pagination, logging) owns a frozen ``BaseSettings``
class with its own environment prefix. Import through the cached loaders:

    from form_service.core.settings import get_pagination_settings

    settings = get_pagination_settings()
    print(settings.default_page_size)

Or use the composed settings object:

    from form_service.core.settings import get_settings

    settings = get_settings()
    print(settings.mongo.database)

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .loader import (
    get_app_settings,
    get_logging_settings,
    get_mongo_settings,
    get_pagination_settings,
)
from .unified import Settings, get_settings

__all__ = [
    "Settings",
    "get_app_settings",
    "get_logging_settings",
    "get_mongo_settings",
    "get_pagination_settings",
    "get_settings",
]
