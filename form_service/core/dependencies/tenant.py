"""Tenant dependencies for console routes.

The merchant id is supplied by the upstream gateway in the
``X-Merchant-ID`` header after authentication. Queries trust it as already
authorized and scope every read to it.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Header

from form_service.core.exceptions import UnauthorizedException
from form_service.infra.logging import set_log_context

logger = logging.getLogger(__name__)

MERCHANT_HEADER = "X-Merchant-ID"


async def get_merchant_id(
    x_merchant_id: Annotated[str | None, Header(alias=MERCHANT_HEADER)] = None,
) -> str:
    """Return the caller's merchant id and attach it to the log context.

    Raises:
        UnauthorizedException: If the header is missing or blank.

    Example:
        curl -H "X-Merchant-ID: merchant-42" https://api.example.com/api/v1/events
    """
    merchant_id = (x_merchant_id or "").strip()
    if not merchant_id:
        logger.info("Console request without merchant id")
        raise UnauthorizedException(
            detail=f"Missing {MERCHANT_HEADER} header",
            type="missing-merchant-id",
        )

    set_log_context(merchant_id=merchant_id)
    return merchant_id
