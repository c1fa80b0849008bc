"""Pagination processing for fetched rows.

``process_page`` is a pure function of the fetched rows and the request's
pagination inputs. It decides between cursor and offset semantics,
computes ``has_next``/``has_prev``, derives page numbers from a total count
when one is available, and mints the next-page token.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from form_service.core.pagination.cursor import CursorCodec, CursorData
from form_service.core.pagination.schemas import CursorPage, OffsetPage
from form_service.infra.logging import get_lazy_logger

T = TypeVar("T")

INT32_MAX = 2**31 - 1
INT32_MIN = -(2**31)

lazy_logger = get_lazy_logger(__name__)


def saturate_int32(value: int) -> int:
    """Clamp ``value`` into the signed 32-bit range instead of wrapping."""
    return max(INT32_MIN, min(INT32_MAX, value))


def is_cursor_mode(page_token: str | None) -> bool:
    """Cursor pagination is active iff a non-empty token was supplied."""
    return bool(page_token)


def cursor_for_row(row: Any) -> CursorData:
    """Build a cursor from a row exposing ``id`` and ``created_at``."""
    return CursorData(last_id=str(row.id), timestamp=row.created_at)


def process_page(
    rows: Sequence[T],
    *,
    limit: int,
    offset: int = 0,
    page_token: str | None = None,
    total_count: int | None = None,
    cursor_for: Callable[[T], CursorData] = cursor_for_row,
) -> CursorPage[T] | OffsetPage[T]:
    """Turn fetched rows into a page with pagination metadata.

    Args:
        rows: Rows returned by the page query. In cursor mode this may hold
            one sentinel row beyond ``limit``.
        limit: Requested page size (>= 1).
        offset: Rows skipped by the page query (offset mode only).
        page_token: The token the request was made with, if any.
        total_count: Total matching rows, or None when no count was computed.
        cursor_for: Builds the next-page cursor from the last row.

    Returns:
        A ``CursorPage`` when ``page_token`` is non-empty, else an ``OffsetPage``.
    """
    if is_cursor_mode(page_token):
        page: CursorPage[T] | OffsetPage[T] = _cursor_page(rows, limit)
    else:
        page = _offset_page(rows, limit, offset, total_count)

    if page.has_next and page.items:
        token = CursorCodec.encode(cursor_for(page.items[-1]))
        page.next_page_token = token or None

    lazy_logger.debug(
        lambda: f"pagination.process_page(mode={page.mode}, rows={len(rows)}, "
        f"limit={limit}, offset={offset}) -> items={len(page.items)}, "
        f"has_next={page.has_next}, has_prev={page.has_prev}",
    )
    return page


def _cursor_page(rows: Sequence[T], limit: int) -> CursorPage[T]:
    # The sentinel row only signals that more rows exist; it is never returned.
    has_next = len(rows) > limit
    items = list(rows[:limit]) if has_next else list(rows)
    return CursorPage(items=items, has_next=has_next, has_prev=True)


def _offset_page(
    rows: Sequence[T],
    limit: int,
    offset: int,
    total_count: int | None,
) -> OffsetPage[T]:
    if total_count is None:
        # Heuristic: a full page suggests more rows. An exact-boundary result
        # set reports has_next=True with an empty following page.
        return OffsetPage(
            items=list(rows),
            has_next=len(rows) == limit,
            has_prev=offset > 0,
        )

    current_page = offset // limit + 1
    total_pages = -(-total_count // limit)
    return OffsetPage(
        items=list(rows),
        has_next=current_page < total_pages,
        has_prev=current_page > 1,
        total_count=total_count,
        current_page=saturate_int32(current_page),
        total_pages=saturate_int32(total_pages),
    )


__all__ = [
    "INT32_MAX",
    "INT32_MIN",
    "cursor_for_row",
    "is_cursor_mode",
    "process_page",
    "saturate_int32",
]
