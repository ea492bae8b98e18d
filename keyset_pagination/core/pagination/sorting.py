"""Sort descriptors and sort-set validation.

A sort set is an ordered, non-empty sequence of ``SortItem``. Only the last
item is assumed non-null and unique; it is the tie-breaker (usually the
primary key) that makes the ordering total.

Example:
    sorts = [
        SortItem(User.created_at, direction=SortDirection.DESC, nullable=True),
        SortItem(User.id),
    ]
"""

from __future__ import annotations

import hashlib
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any

from sqlalchemy import ColumnElement

from keyset_pagination.core.exceptions import PaginationError, PaginationErrorCode

SIGNATURE_LENGTH = 8


class SortDirection(StrEnum):
    """Sort direction. Nulls sort first in ASC and last in DESC."""

    ASC = "asc"
    DESC = "desc"

    def inverted(self) -> SortDirection:
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


@dataclass(frozen=True, slots=True)
class SortItem:
    """One ORDER BY term.

    Attributes:
        column: Column or labelled expression to sort by.
        output_key: Key under which the value appears in result rows and in
            cursors. Defaults to the column's key (last dotted segment).
        direction: ASC (default) or DESC.
        nullable: Whether the column may hold NULL. Must be False for the
            last item of a sort set.
    """

    column: ColumnElement[Any]
    output_key: str = ""
    direction: SortDirection = SortDirection.ASC
    nullable: bool = False

    def __post_init__(self) -> None:
        if not self.output_key:
            key = getattr(self.column, "key", None) or getattr(self.column, "name", None)
            if not key:
                raise PaginationError(
                    f"Cannot derive an output key for sort column {self.column!r}",
                    code=PaginationErrorCode.INVALID_SORT,
                )
            object.__setattr__(self, "output_key", str(key).split(".")[-1])
        try:
            direction = SortDirection(self.direction)
        except ValueError as e:
            raise PaginationError(
                f"Unknown sort direction {self.direction!r}",
                code=PaginationErrorCode.INVALID_SORT,
            ) from e
        object.__setattr__(self, "direction", direction)

    def inverted(self) -> SortItem:
        """Return a copy sorting the opposite way."""
        return replace(self, direction=self.direction.inverted())


SortSet = Sequence[SortItem]


def validate_sorts(sorts: SortSet) -> tuple[SortItem, ...]:
    """Check that ``sorts`` is a usable sort set and freeze it.

    Raises:
        PaginationError: ``INVALID_SORT`` when the set is empty, contains a
            non-``SortItem``, repeats an output key, or ends with a nullable
            column.
    """
    if isinstance(sorts, (str, bytes)) or not isinstance(sorts, Sequence) or not sorts:
        raise PaginationError(
            "Cannot paginate without sorting",
            code=PaginationErrorCode.INVALID_SORT,
        )

    items = tuple(sorts)
    for item in items:
        if not isinstance(item, SortItem):
            raise PaginationError(
                f"Sort entries must be SortItem instances, got {type(item).__name__}",
                code=PaginationErrorCode.INVALID_SORT,
            )

    keys = [item.output_key for item in items]
    if len(set(keys)) != len(keys):
        raise PaginationError(
            f"Sort output keys must be unique: {keys}",
            code=PaginationErrorCode.INVALID_SORT,
        )

    if items[-1].nullable:
        raise PaginationError(
            f"Last sort column {items[-1].output_key!r} must be non-nullable and unique",
            code=PaginationErrorCode.INVALID_SORT,
        )
    return items


def invert_sorts(sorts: SortSet) -> tuple[SortItem, ...]:
    """Flip the direction of every item."""
    return tuple(item.inverted() for item in sorts)


def sort_signature(sorts: SortSet) -> str:
    """Fingerprint the (output key, direction) sequence of a sort set.

    Cursors embed this value; a cursor is only accepted by a query sorted
    the same way it was issued under.
    """
    order_key = "|".join(f"{item.output_key}:{item.direction.value}" for item in sorts)
    return hashlib.sha256(order_key.encode("utf-8")).hexdigest()[:SIGNATURE_LENGTH]


__all__ = [
    "SIGNATURE_LENGTH",
    "SortDirection",
    "SortItem",
    "SortSet",
    "invert_sorts",
    "sort_signature",
    "validate_sorts",
]
