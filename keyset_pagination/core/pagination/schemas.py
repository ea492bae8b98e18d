"""Pagination result schemas.

``PaginatedResult`` is the plain shape (items plus navigation tokens).
``PaginatedResultWithEdges`` pairs every item with its own cursor, following
the Relay connection pattern, and can render a ``PageInfo`` block.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class PageTokens(BaseModel):
    """Outgoing cursors. Each is absent when there is nothing to point at."""

    model_config = ConfigDict(frozen=True)

    start_cursor: str | None = Field(default=None, description="Cursor of the first item")
    end_cursor: str | None = Field(default=None, description="Cursor of the last item")
    next_page: str | None = Field(default=None, description="Token for the next page")
    prev_page: str | None = Field(default=None, description="Token for the previous page")


class PageInfo(BaseModel):
    """Relay-style navigation metadata."""

    has_previous_page: bool = Field(description="Whether previous items exist")
    has_next_page: bool = Field(description="Whether more items exist")
    start_cursor: str | None = Field(default=None, description="Cursor of the first item")
    end_cursor: str | None = Field(default=None, description="Cursor of the last item")


class _PageBase(PageTokens):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    has_next_page: bool = Field(default=False, description="Whether a next page exists")
    has_prev_page: bool = Field(default=False, description="Whether a previous page exists")

    def to_page_info(self) -> PageInfo:
        return PageInfo(
            has_previous_page=self.has_prev_page,
            has_next_page=self.has_next_page,
            start_cursor=self.start_cursor,
            end_cursor=self.end_cursor,
        )


class PaginatedResult(_PageBase, Generic[T]):
    """A page of items in requested sort order."""

    items: list[T] = Field(default_factory=list, description="Items on this page")


class Edge(BaseModel, Generic[T]):
    """An item paired with the cursor of its own position."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    node: T = Field(description="The data item")
    cursor: str = Field(description="Cursor for this item")


class PaginatedResultWithEdges(_PageBase, Generic[T]):
    """A page of edges in requested sort order."""

    edges: list[Edge[T]] = Field(default_factory=list, description="Items with cursors")

    @property
    def nodes(self) -> list[T]:
        """Items without their edge wrappers."""
        return [edge.node for edge in self.edges]


__all__ = [
    "Edge",
    "PageInfo",
    "PageTokens",
    "PaginatedResult",
    "PaginatedResultWithEdges",
]
