"""Application settings for FastAPI configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "staging", "production", "test"]


class AppSettings(BaseSettings):
    """FastAPI application settings.

    Environment variables use APP_ prefix.
    Example: APP_DEBUG=true, APP_API_PREFIX=/api/v2
    """

    service_name: str = Field(
        default="form-service",
        min_length=1,
        max_length=100,
        pattern=r"^[a-z0-9]+(-[a-z0-9]+)*$",
        description="Service name for logging (lowercase, hyphens allowed)",
    )
    title: str = Field(
        default="Form Service API",
        min_length=1,
        max_length=200,
        description="API title displayed in documentation",
    )
    version: str = Field(
        default="1.0.0",
        pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9]+)?$",
        description="API version (semver format)",
    )
    environment: Environment = Field(
        default="development", description="Environment: development|staging|production|test",
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Console routes are tenant-scoped; public routes serve published events.
    api_prefix: str = Field(
        default="/api/v1",
        pattern=r"^/.*$",
        description="URL prefix for tenant-scoped console routes",
    )
    public_prefix: str = Field(
        default="/public",
        pattern=r"^/.*$",
        description="URL prefix for public, unauthenticated routes",
    )
    docs_url: str | None = Field(default="/docs", description="Swagger UI path")

    host: str = Field(default="0.0.0.0", description="Bind address for the ASGI server")  # noqa: S104
    port: int = Field(default=8000, ge=1, le=65535, description="Bind port for the ASGI server")

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Check whether the service runs in production."""
        return self.environment == "production"
