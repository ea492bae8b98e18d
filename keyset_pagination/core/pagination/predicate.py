"""Keyset seek predicate.

Builds the WHERE condition selecting rows that sort strictly after a cursor
position. For ``ORDER BY a DESC, b ASC`` with a cursor at ``(a1, b1)``:

    (a < a1) OR (a = a1 AND b > b1) OR (a IS NULL)

Null ordering is a fixed policy: NULLs sort first under ASC and last under
DESC. Dialects must order NULLs the same way (see ``dialects.py``):

* cursor value NULL, ASC:  ``(a IS NULL AND <rest>) OR a IS NOT NULL``
* cursor value NULL, DESC: ``a IS NULL AND <rest>``
* cursor value set, DESC:  the ``a IS NULL`` disjunct admits trailing NULLs

The expression is folded from the last (unique, non-null) column back to
the first, so long sort sets do not recurse.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import ColumnElement, and_, or_

from keyset_pagination.core.exceptions import PaginationError, PaginationErrorCode
from keyset_pagination.core.pagination.cursor import CursorPayload
from keyset_pagination.core.pagination.sorting import SortDirection, SortSet

_MISSING = object()


def build_cursor_predicate(
    sorts: SortSet,
    payload: CursorPayload,
    start: int = 0,
) -> ColumnElement[bool]:
    """Return a condition true for rows after ``payload`` in ``sorts`` order.

    Args:
        sorts: Effective sort set (already inverted for backward paging).
        payload: Decoded cursor payload.
        start: Index of the first sort item to compare from.

    Raises:
        PaginationError: ``INVALID_TOKEN`` if the payload lacks a value for
            a sort key; ``UNEXPECTED_ERROR`` if ``start`` is out of range.
    """
    last = len(sorts) - 1
    if not 0 <= start <= last:
        raise PaginationError(
            f"Sort index {start} out of bounds",
            code=PaginationErrorCode.UNEXPECTED_ERROR,
        )

    predicate: ColumnElement[bool] | None = None
    for idx in range(last, start - 1, -1):
        item = sorts[idx]
        value = payload.k.get(item.output_key, _MISSING)
        if value is _MISSING:
            raise PaginationError(
                f'Missing pagination cursor value for "{item.output_key}"',
                code=PaginationErrorCode.INVALID_TOKEN,
            )

        predicate = _fold(item.column, item.direction, value, predicate)

    if predicate is None:
        raise PaginationError(
            "Empty sort set",
            code=PaginationErrorCode.UNEXPECTED_ERROR,
        )
    return predicate


def _fold(
    column: ColumnElement[Any],
    direction: SortDirection,
    value: Any,
    rest: ColumnElement[bool] | None,
) -> ColumnElement[bool]:
    ascending = direction is SortDirection.ASC

    if value is None:
        if rest is None:
            raise PaginationError(
                "Cursor holds NULL for the non-nullable tie-breaker column",
                code=PaginationErrorCode.INVALID_TOKEN,
            )
        tie = and_(column.is_(None), rest)
        return or_(tie, column.is_not(None)) if ascending else tie

    moves_past = column > value if ascending else column < value
    # last sort column: unique and non-null
    if rest is None:
        return moves_past

    clauses = [moves_past, and_(column == value, rest)]
    if not ascending:
        clauses.append(column.is_(None))
    return or_(*clauses)


__all__ = ["build_cursor_predicate"]
