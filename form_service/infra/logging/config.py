"""Logging configuration via ``logging.config.dictConfig``.

All handlers attach to the root logger; application loggers propagate.
``setup_logging`` is idempotent and called from the application lifespan.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from form_service.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)

_LOGGING_INITIALIZED = False

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    settings_obj = log_settings
    if settings_obj is None:
        from form_service.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    log_config = {**settings_obj.to_logging_kwargs(), **configure_kwargs}
    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    *,
    service_name: str = "form-service",
    json_logs: bool = True,
    console_enabled: bool = True,
    include_context: bool = True,
    file_path: str | Path | None = None,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
) -> None:
    """Configure root logging handlers and formatters.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Static ``service`` field added to JSON records.
        json_logs: Emit JSON Lines instead of plain text.
        console_enabled: Log to stderr.
        include_context: Attach ContextInjectingFilter to every handler.
        file_path: Rotating log file path. None disables file logging.
        file_max_bytes: Maximum log file size before rotation.
        file_backup_count: Number of rotated log files to keep.
    """
    formatter_name = "json" if json_logs else "text"
    filters = ["context"] if include_context else []

    handlers: dict[str, dict[str, Any]] = {}
    if console_enabled:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "formatter": formatter_name,
            "filters": filters,
            "stream": "ext://sys.stderr",
        }
    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "json",
            "filters": filters,
            "filename": str(path),
            "maxBytes": file_max_bytes,
            "backupCount": file_backup_count,
            "encoding": "utf-8",
        }

    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "context": {"()": "form_service.infra.logging.context.ContextInjectingFilter"},
        },
        "formatters": {
            "json": {
                "()": "form_service.infra.logging.formatters.JSONFormatter",
                "static": {"service": service_name},
            },
            "text": {"format": TEXT_FORMAT},
        },
        "handlers": handlers,
        "root": {"level": log_level.upper(), "handlers": list(handlers)},
        "loggers": {
            "pymongo": {"level": "WARNING"},
        },
    }
    logging.config.dictConfig(config)
    logger.debug("Logging configured", extra={"handlers": list(handlers)})
