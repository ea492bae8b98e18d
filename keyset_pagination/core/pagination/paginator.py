"""Keyset pagination orchestrator.

Usage:
    paginator = Paginator(SQLiteDialect())

    page = await paginator.paginate(
        session,
        select(User).where(User.is_active.is_(True)),
        sorts=[SortItem(User.created_at, direction="desc"), SortItem(User.id)],
        limit=20,
    )

    # Next page
    page = await paginator.paginate(
        session, stmt, sorts=sorts, limit=20,
        cursor=NextPageCursor(next_page=page.next_page),
    )

One extra row is requested to learn whether another page exists; it is
never returned. Backward pages are fetched with every sort direction
inverted and then reversed, so items always come back in requested order.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from sqlalchemy import Select

from keyset_pagination.core.codec.base import Codec, pipe
from keyset_pagination.core.codec.base64url import Base64UrlCodec
from keyset_pagination.core.codec.rich_json import RichJsonCodec
from keyset_pagination.core.exceptions import PaginationError, PaginationErrorCode
from keyset_pagination.core.pagination.cursor import (
    CursorIncoming,
    DecodedCursor,
    decode_cursor,
    encode_cursor,
)
from keyset_pagination.core.pagination.dialects import PaginationDialect, get_dialect
from keyset_pagination.core.pagination.schemas import (
    Edge,
    PageTokens,
    PaginatedResult,
    PaginatedResultWithEdges,
)
from keyset_pagination.core.pagination.sorting import (
    SortItem,
    invert_sorts,
    sort_signature,
    validate_sorts,
)
from keyset_pagination.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from sqlalchemy.engine import Result

logger = get_lazy_logger(__name__)


class QueryExecutor(Protocol):
    """Anything that can run a statement: ``AsyncSession``, ``AsyncConnection``."""

    async def execute(self, statement: Any, /) -> Result[Any]: ...


def default_cursor_codec() -> Codec[Any, str]:
    """Rich JSON serialization followed by URL-safe base64."""
    return pipe(RichJsonCodec(), Base64UrlCodec())


@dataclass(slots=True)
class _Page:
    items: list[Any]
    decoded: DecodedCursor | None
    over_fetched: bool


class Paginator:
    """Keyset paginator bound to a dialect and a cursor codec.

    Both collaborators are stateless, so one paginator can serve any number
    of concurrent requests.

    Args:
        dialect: Adapter applying ORDER BY / LIMIT / OFFSET / seek clauses.
            Resolved from the session's bind when omitted.
        cursor_codec: Codec turning cursor payloads into tokens. Defaults to
            ``default_cursor_codec()``.
    """

    __slots__ = ("cursor_codec", "dialect")

    def __init__(
        self,
        dialect: PaginationDialect | None = None,
        cursor_codec: Codec[Any, Any] | None = None,
    ) -> None:
        self.dialect = dialect
        self.cursor_codec = cursor_codec if cursor_codec is not None else default_cursor_codec()

    async def paginate(
        self,
        session: QueryExecutor,
        statement: Select[Any],
        *,
        sorts: Sequence[SortItem],
        limit: int,
        cursor: CursorIncoming | Mapping[str, Any] | None = None,
    ) -> PaginatedResult[Any]:
        """Fetch one page of ``statement``.

        Args:
            session: Executor for the final statement.
            statement: SELECT without ORDER BY / LIMIT / OFFSET.
            sorts: Sort set; the last item must be unique and non-null.
            limit: Page size.
            cursor: ``NextPageCursor``, ``PrevPageCursor``, ``OffsetCursor``
                (or an equivalent mapping); None for the first page.

        Raises:
            PaginationError: ``INVALID_LIMIT``, ``INVALID_SORT``,
                ``INVALID_TOKEN`` or ``UNEXPECTED_ERROR``.
        """
        sort_items = _validate(limit, sorts)
        try:
            page = await self._fetch(session, statement, sort_items, limit, cursor)
            tokens = await self._page_tokens(page, sort_items)
        except PaginationError:
            raise
        except Exception as e:
            logger.exception("Failed to paginate")
            raise PaginationError(
                "Failed to paginate",
                code=PaginationErrorCode.UNEXPECTED_ERROR,
                cause=e,
            ) from e

        result: PaginatedResult[Any] = PaginatedResult(
            items=page.items,
            has_next_page=tokens.next_page is not None,
            has_prev_page=tokens.prev_page is not None,
            **tokens.model_dump(),
        )
        logger.debug(
            lambda: (
                f"paginate: kind={page.decoded.kind if page.decoded else 'first'} "
                f"limit={limit} -> {len(page.items)} items, "
                f"has_next={result.has_next_page}, has_prev={result.has_prev_page}"
            )
        )
        return result

    async def paginate_with_edges(
        self,
        session: QueryExecutor,
        statement: Select[Any],
        *,
        sorts: Sequence[SortItem],
        limit: int,
        cursor: CursorIncoming | Mapping[str, Any] | None = None,
    ) -> PaginatedResultWithEdges[Any]:
        """Like ``paginate`` but pair every item with its own cursor."""
        page = await self.paginate(session, statement, sorts=sorts, limit=limit, cursor=cursor)
        sort_items = tuple(sorts)
        try:
            edges = [
                Edge(node=item, cursor=await encode_cursor(item, sort_items, self.cursor_codec))
                for item in page.items
            ]
        except PaginationError:
            raise
        except Exception as e:
            logger.exception("Failed to generate edges")
            raise PaginationError(
                "Failed to generate edges",
                code=PaginationErrorCode.UNEXPECTED_ERROR,
                cause=e,
            ) from e

        return PaginatedResultWithEdges(
            edges=edges,
            **page.model_dump(exclude={"items"}),
        )

    async def _fetch(
        self,
        session: QueryExecutor,
        statement: Select[Any],
        sorts: tuple[SortItem, ...],
        limit: int,
        cursor: CursorIncoming | Mapping[str, Any] | None,
    ) -> _Page:
        decoded = await decode_cursor(cursor, self.cursor_codec) if cursor is not None else None
        dialect = self.dialect or _dialect_for(session)
        kind = decoded.kind if decoded else None

        effective = invert_sorts(sorts) if kind == "prev" else sorts
        statement = dialect.apply_sort(statement, effective)
        statement = dialect.apply_limit(statement, limit + 1, kind)

        if decoded is not None:
            if decoded.kind == "offset":
                statement = dialect.apply_offset(statement, decoded.offset or 0)
            else:
                if decoded.payload is None:
                    raise PaginationError(
                        "Keyset cursor has no payload",
                        code=PaginationErrorCode.INVALID_TOKEN,
                    )
                if decoded.payload.sig != sort_signature(sorts):
                    raise PaginationError(
                        "Page token does not match sort order",
                        code=PaginationErrorCode.INVALID_TOKEN,
                        extra={"expected_sig": sort_signature(sorts)},
                    )
                statement = dialect.apply_cursor(statement, effective, decoded)

        rows = await _execute(session, statement)
        items = rows[:limit]
        if kind == "prev":
            items.reverse()
        return _Page(items=items, decoded=decoded, over_fetched=len(rows) > limit)

    async def _page_tokens(self, page: _Page, sorts: tuple[SortItem, ...]) -> PageTokens:
        if not page.items:
            return PageTokens()

        decoded = page.decoded
        inverted = decoded is not None and decoded.kind == "prev"
        is_first = decoded is None or (decoded.kind == "offset" and decoded.offset == 0)

        start_cursor = await encode_cursor(page.items[0], sorts, self.cursor_codec)
        end_cursor = await encode_cursor(page.items[-1], sorts, self.cursor_codec)
        return PageTokens(
            start_cursor=start_cursor,
            end_cursor=end_cursor,
            next_page=end_cursor if inverted or page.over_fetched else None,
            prev_page=start_cursor if (not inverted or page.over_fetched) and not is_first else None,
        )


async def paginate(
    session: QueryExecutor,
    statement: Select[Any],
    *,
    sorts: Sequence[SortItem],
    limit: int,
    cursor: CursorIncoming | Mapping[str, Any] | None = None,
    dialect: PaginationDialect | None = None,
    cursor_codec: Codec[Any, Any] | None = None,
) -> PaginatedResult[Any]:
    """One-off form of ``Paginator.paginate``."""
    return await Paginator(dialect, cursor_codec).paginate(
        session, statement, sorts=sorts, limit=limit, cursor=cursor
    )


async def paginate_with_edges(
    session: QueryExecutor,
    statement: Select[Any],
    *,
    sorts: Sequence[SortItem],
    limit: int,
    cursor: CursorIncoming | Mapping[str, Any] | None = None,
    dialect: PaginationDialect | None = None,
    cursor_codec: Codec[Any, Any] | None = None,
) -> PaginatedResultWithEdges[Any]:
    """One-off form of ``Paginator.paginate_with_edges``."""
    return await Paginator(dialect, cursor_codec).paginate_with_edges(
        session, statement, sorts=sorts, limit=limit, cursor=cursor
    )


def _validate(limit: Any, sorts: Any) -> tuple[SortItem, ...]:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise PaginationError(
            "Invalid page size limit",
            code=PaginationErrorCode.INVALID_LIMIT,
            extra={"limit": repr(limit)},
        )
    return validate_sorts(sorts)


def _dialect_for(session: Any) -> PaginationDialect:
    bind = session.get_bind() if hasattr(session, "get_bind") else session
    return get_dialect(bind.dialect.name)


def _is_entity_select(statement: Select[Any]) -> bool:
    descriptions = statement.column_descriptions
    if len(descriptions) != 1:
        return False
    entity = descriptions[0].get("entity")
    return entity is not None and descriptions[0].get("expr") is entity


async def _execute(session: QueryExecutor, statement: Select[Any]) -> list[Any]:
    result = await session.execute(statement)
    if _is_entity_select(statement):
        return list(result.scalars().all())
    return [dict(row) for row in result.mappings().all()]


__all__ = [
    "Paginator",
    "QueryExecutor",
    "default_cursor_codec",
    "paginate",
    "paginate_with_edges",
]
