"""Pagination result schemas.

``CursorPage`` and ``OffsetPage`` form a tagged union discriminated by
``mode``. Both flatten to ``Pagination``, the wire-level metadata shape.
"""

from __future__ import annotations

from typing import Annotated, Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Pagination(BaseModel):
    """Pagination metadata returned alongside a page of events.

    ``total_count``, ``current_page`` and ``total_pages`` are only set for
    offset pagination when a count was computed.
    """

    next_page_token: str | None = Field(default=None, description="Token for the next page")
    prev_page_token: str | None = Field(default=None, description="Token for the previous page")
    has_next: bool = Field(default=False, description="Whether more items exist")
    has_prev: bool = Field(default=False, description="Whether earlier items exist")
    total_count: int | None = Field(default=None, description="Total matching items")
    current_page: int | None = Field(default=None, description="1-based page number")
    total_pages: int | None = Field(default=None, description="Number of pages")


class CursorPage(BaseModel, Generic[T]):
    """A page fetched with a pagination token.

    A cursor page always has a previous page and never carries a count.
    """

    mode: Literal["cursor"] = "cursor"
    items: list[T] = Field(default_factory=list)
    has_next: bool = False
    has_prev: bool = True
    next_page_token: str | None = None

    def to_pagination(self) -> Pagination:
        """Flatten into wire-level pagination metadata."""
        return Pagination(
            next_page_token=self.next_page_token,
            has_next=self.has_next,
            has_prev=self.has_prev,
        )


class OffsetPage(BaseModel, Generic[T]):
    """A page fetched by offset (page number or first page)."""

    mode: Literal["offset"] = "offset"
    items: list[T] = Field(default_factory=list)
    has_next: bool = False
    has_prev: bool = False
    next_page_token: str | None = None
    total_count: int | None = None
    current_page: int | None = None
    total_pages: int | None = None

    def to_pagination(self) -> Pagination:
        """Flatten into wire-level pagination metadata."""
        return Pagination(
            next_page_token=self.next_page_token,
            has_next=self.has_next,
            has_prev=self.has_prev,
            total_count=self.total_count,
            current_page=self.current_page,
            total_pages=self.total_pages,
        )


Page = Annotated[CursorPage[T] | OffsetPage[T], Field(discriminator="mode")]


__all__ = ["CursorPage", "OffsetPage", "Page", "Pagination"]
