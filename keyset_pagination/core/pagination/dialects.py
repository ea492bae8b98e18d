"""Per-database adapters that apply pagination clauses to a SELECT.

Every method returns a new ``Select`` (SQLAlchemy statements are immutable
builders) and keeps previously applied clauses.

Usage:
    dialect = get_dialect(session.get_bind().dialect.name)
    stmt = dialect.apply_sort(stmt, sorts)
    stmt = dialect.apply_limit(stmt, limit + 1, "next")
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select

from keyset_pagination.core.exceptions import PaginationError, PaginationErrorCode
from keyset_pagination.core.pagination.cursor import CursorKind, DecodedCursor
from keyset_pagination.core.pagination.predicate import build_cursor_predicate
from keyset_pagination.core.pagination.sorting import SortDirection, SortSet


class PaginationDialect:
    """Base adapter with ANSI behaviour.

    The default ORDER BY relies on the database putting NULLs first for ASC
    and last for DESC, which is what SQLite and MySQL do natively.
    """

    name: str = "default"

    def apply_sort(self, statement: Select[Any], sorts: SortSet) -> Select[Any]:
        for item in sorts:
            column = item.column
            statement = statement.order_by(
                column.asc() if item.direction is SortDirection.ASC else column.desc()
            )
        return statement

    def apply_limit(
        self,
        statement: Select[Any],
        limit: int,
        kind: CursorKind | None = None,
    ) -> Select[Any]:
        return statement.limit(limit)

    def apply_offset(self, statement: Select[Any], offset: int) -> Select[Any]:
        return statement.offset(offset)

    def apply_cursor(
        self,
        statement: Select[Any],
        sorts: SortSet,
        cursor: DecodedCursor,
    ) -> Select[Any]:
        """Restrict ``statement`` to rows after the cursor position."""
        if cursor.payload is None:
            raise PaginationError(
                "Keyset cursor has no payload",
                code=PaginationErrorCode.INVALID_TOKEN,
            )
        return statement.where(build_cursor_predicate(sorts, cursor.payload))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PostgresDialect(PaginationDialect):
    """PostgreSQL sorts NULLs last for ASC, so null placement is explicit."""

    name = "postgresql"

    def apply_sort(self, statement: Select[Any], sorts: SortSet) -> Select[Any]:
        for item in sorts:
            column = item.column
            if item.direction is SortDirection.ASC:
                statement = statement.order_by(column.asc().nulls_first())
            else:
                statement = statement.order_by(column.desc().nulls_last())
        return statement


class MySQLDialect(PaginationDialect):
    name = "mysql"


class SQLiteDialect(PaginationDialect):
    name = "sqlite"


class MSSQLDialect(PaginationDialect):
    """SQL Server: ``TOP n`` for keyset pages, ``OFFSET .. FETCH`` for offsets."""

    name = "mssql"

    def apply_limit(
        self,
        statement: Select[Any],
        limit: int,
        kind: CursorKind | None = None,
    ) -> Select[Any]:
        if kind == "offset":
            return statement.fetch(limit)
        return statement.limit(limit)


_DIALECTS: dict[str, type[PaginationDialect]] = {
    "postgresql": PostgresDialect,
    "mysql": MySQLDialect,
    "mariadb": MySQLDialect,
    "sqlite": SQLiteDialect,
    "mssql": MSSQLDialect,
}


def get_dialect(name: str) -> PaginationDialect:
    """Return the adapter for a SQLAlchemy dialect name.

    Raises:
        ValueError: If no adapter is registered for ``name``.
    """
    try:
        return _DIALECTS[name.lower()]()
    except KeyError:
        msg = f"No pagination dialect for database {name!r}; expected one of {sorted(_DIALECTS)}"
        raise ValueError(msg) from None


__all__ = [
    "MSSQLDialect",
    "MySQLDialect",
    "PaginationDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "get_dialect",
]
