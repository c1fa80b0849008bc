"""Unified settings composition for convenient access.

Usage:
    from form_service.core.settings import get_settings

    settings = get_settings()
    print(settings.app.api_prefix)
    print(settings.pagination.max_page_size)

Each nested settings class still loads from its own environment prefix
(APP_, MONGO_, PAGINATION_, LOG_).
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .app import AppSettings
from .logs import LoggingSettings
from .mongo import MongoSettings
from .pagination import PaginationSettings


class Settings(BaseSettings):
    """Unified settings composing all domain settings."""

    model_config = SettingsConfigDict(
        frozen=True,
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=AppSettings)
    mongo: MongoSettings = Field(default_factory=MongoSettings)
    pagination: PaginationSettings = Field(default_factory=PaginationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get unified settings instance (cached)."""
    return Settings()
