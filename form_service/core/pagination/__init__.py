"""Cursor and offset pagination for event listings.

Two pagination styles share one row-fetch path:

- Cursor (keyset) pagination: the client passes back an opaque token
  holding the last-seen event id. The query fetches one sentinel row past
  the page to learn whether more rows exist, so no count is needed.
- Offset pagination: page numbers translate to skip/limit. When a total
  count is available, exact ``current_page``/``total_pages`` are reported.

The processor returns a tagged union (``CursorPage | OffsetPage``) so that
``total_count`` can only ever appear on offset pages.
"""

from form_service.core.pagination.cursor import CursorCodec, CursorData
from form_service.core.pagination.processor import (
    INT32_MAX,
    INT32_MIN,
    is_cursor_mode,
    process_page,
    saturate_int32,
)
from form_service.core.pagination.schemas import (
    CursorPage,
    OffsetPage,
    Page,
    Pagination,
)

__all__ = [
    "INT32_MAX",
    "INT32_MIN",
    "CursorCodec",
    "CursorData",
    "CursorPage",
    "OffsetPage",
    "Page",
    "Pagination",
    "is_cursor_mode",
    "process_page",
    "saturate_int32",
]
