"""Cursor-based (keyset) pagination for SQLAlchemy selects.

Keyset pagination is:
- Stable: rows inserted or deleted elsewhere do not shift later pages
- Performant: uses indexed seeks instead of OFFSET scans
- Verifiable: tokens carry a sort signature and are rejected when the
  sort order changes

Usage:
    from keyset_pagination.core.pagination import (
        NextPageCursor,
        Paginator,
        SortDirection,
        SortItem,
        get_dialect,
    )

    paginator = Paginator(get_dialect("postgresql"))
    sorts = [
        SortItem(User.created_at, direction=SortDirection.DESC, nullable=True),
        SortItem(User.id),
    ]
    page = await paginator.paginate(session, select(User), sorts=sorts, limit=50)
    if page.has_next_page:
        page = await paginator.paginate(
            session, select(User), sorts=sorts, limit=50,
            cursor=NextPageCursor(next_page=page.next_page),
        )
"""

from keyset_pagination.core.pagination.cursor import (
    CursorIncoming,
    CursorPayload,
    DecodedCursor,
    NextPageCursor,
    OffsetCursor,
    PrevPageCursor,
    decode_cursor,
    parse_cursor,
)
from keyset_pagination.core.pagination.dialects import (
    MSSQLDialect,
    MySQLDialect,
    PaginationDialect,
    PostgresDialect,
    SQLiteDialect,
    get_dialect,
)
from keyset_pagination.core.pagination.factory import (
    build_cursor_codec,
    build_paginator,
    clamp_limit,
)
from keyset_pagination.core.pagination.paginator import (
    Paginator,
    default_cursor_codec,
    paginate,
    paginate_with_edges,
)
from keyset_pagination.core.pagination.predicate import build_cursor_predicate
from keyset_pagination.core.pagination.schemas import (
    Edge,
    PageInfo,
    PaginatedResult,
    PaginatedResultWithEdges,
)
from keyset_pagination.core.pagination.sorting import (
    SortDirection,
    SortItem,
    invert_sorts,
    sort_signature,
    validate_sorts,
)

__all__ = [
    "CursorIncoming",
    "CursorPayload",
    "DecodedCursor",
    "Edge",
    "MSSQLDialect",
    "MySQLDialect",
    "NextPageCursor",
    "OffsetCursor",
    "PageInfo",
    "PaginatedResult",
    "PaginatedResultWithEdges",
    "PaginationDialect",
    "Paginator",
    "PostgresDialect",
    "PrevPageCursor",
    "SQLiteDialect",
    "SortDirection",
    "SortItem",
    "build_cursor_codec",
    "build_cursor_predicate",
    "build_paginator",
    "clamp_limit",
    "decode_cursor",
    "default_cursor_codec",
    "get_dialect",
    "invert_sorts",
    "paginate",
    "paginate_with_edges",
    "parse_cursor",
    "sort_signature",
    "validate_sorts",
]
