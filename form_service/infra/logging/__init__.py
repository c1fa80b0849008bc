"""Logging infrastructure.

Provides structured logging with:
- JSONL format for log aggregation
- Automatic context injection (request_id, merchant_id)
- Lazy evaluation for expensive debug messages

Basic usage:
    import logging

    from form_service.infra.logging import get_lazy_logger, set_log_context

    logger = logging.getLogger(__name__)
    lazy_logger = get_lazy_logger(__name__)

    set_log_context(request_id="abc-123", merchant_id="m-1")
    logger.info("Listing events")  # Includes request_id and merchant_id
    lazy_logger.debug(lambda: f"pipeline={pipeline}")  # Only built if DEBUG
"""

from form_service.infra.logging.config import configure_logging, setup_logging
from form_service.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from form_service.infra.logging.formatters import JSONFormatter
from form_service.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "set_log_context",
    "setup_logging",
]
