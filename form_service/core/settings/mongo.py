"""MongoDB connection and pool settings.

Supports both a full DSN (``MONGO_DSN``) and individual component fields.
When no DSN is given, ``url`` is assembled from host, port and credentials.
"""

from __future__ import annotations

from urllib.parse import quote_plus

from pydantic import Field, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MongoSettings(BaseSettings):
    """MongoDB connection settings.

    Environment variables use MONGO_ prefix.
    Example: MONGO_HOST=mongo, MONGO_DATABASE=forms, MONGO_MAX_POOL_SIZE=50
    """

    enabled: bool = Field(
        default=True,
        description="Enable the document store. Set to False for tests.",
    )
    dsn: str | None = Field(
        default=None,
        description="Optional complete MongoDB connection string.",
    )

    host: str = Field(default="localhost", min_length=1, max_length=255)
    port: int = Field(default=27017, ge=1, le=65535)
    user: str | None = Field(default=None, max_length=100)
    password: SecretStr | None = Field(default=None)
    database: str = Field(
        default="form_service",
        min_length=1,
        max_length=64,
        description="Database holding the events and sessions collections.",
    )

    # Pool bounds are shared by all concurrent requests.
    max_pool_size: int = Field(default=100, ge=1, le=1000)
    min_pool_size: int = Field(default=10, ge=0, le=1000)
    max_idle_time_ms: int = Field(default=30_000, ge=0)
    connect_timeout_ms: int = Field(default=10_000, ge=100)
    socket_timeout_ms: int = Field(default=30_000, ge=100)
    server_selection_timeout_ms: int = Field(default=30_000, ge=100)

    run_migrations: bool = Field(
        default=True,
        description="Create collection indexes at startup.",
    )
    startup_require_db: bool = Field(
        default=True,
        description="Fail startup when MongoDB is unreachable instead of running degraded.",
    )

    model_config = SettingsConfigDict(
        env_prefix="MONGO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def url(self) -> str:
        """Connection string used by the driver."""
        if self.dsn:
            return self.dsn
        if self.user:
            password = self.password.get_secret_value() if self.password else ""
            return (
                f"mongodb://{quote_plus(self.user)}:{quote_plus(password)}"
                f"@{self.host}:{self.port}"
            )
        return f"mongodb://{self.host}:{self.port}"

    @property
    def is_configured(self) -> bool:
        """Check whether the store should be connected at startup."""
        return self.enabled and bool(self.host or self.dsn)

    def client_kwargs(self) -> dict[str, int]:
        """Return pool and timeout options for ``AsyncMongoClient``."""
        return {
            "maxPoolSize": self.max_pool_size,
            "minPoolSize": self.min_pool_size,
            "maxIdleTimeMS": self.max_idle_time_ms,
            "connectTimeoutMS": self.connect_timeout_ms,
            "socketTimeoutMS": self.socket_timeout_ms,
            "serverSelectionTimeoutMS": self.server_selection_timeout_ms,
        }
