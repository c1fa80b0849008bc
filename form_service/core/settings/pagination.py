"""Pagination settings for event listing.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_PAGE_SIZE=50, PAGINATION_MAX_PAGE_SIZE=200

Every field may be left unset. Consumers resolve unset values through the
fallback chain in ``form_service.core.utils.fallback`` so the hardcoded
defaults below are applied last.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
DEFAULT_LOCATION_RADIUS_METERS = 1000


class PaginationSettings(BaseSettings):
    """Pagination configuration settings.

    Attributes:
        default_page_size: Page size used when a request does not supply one.
        max_page_size: Largest page size a request may ask for.
        default_location_radius: Geospatial search radius in meters used
            when a public search omits one.
    """

    default_page_size: int | None = Field(
        default=DEFAULT_PAGE_SIZE,
        ge=1,
        le=1000,
        description="Default page size when page_size is not specified",
    )
    max_page_size: int | None = Field(
        default=MAX_PAGE_SIZE,
        ge=1,
        le=10000,
        description="Maximum allowed page size",
    )
    default_location_radius: int | None = Field(
        default=DEFAULT_LOCATION_RADIUS_METERS,
        ge=1,
        description="Default geospatial radius in meters",
    )

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
