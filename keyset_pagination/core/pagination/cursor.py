"""Cursor payloads and incoming cursor variants.

A cursor payload records the sort signature and the sort-column values of
one row:

    {"sig": "1a2b3c4d", "k": {"created_at": datetime(...), "id": 42}}

The payload is turned into an opaque token by the configured cursor codec.
Callers send back exactly one of ``next_page``, ``prev_page`` (tokens) or
``offset`` (a plain row offset).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from keyset_pagination.core.codec.base import Codec
from keyset_pagination.core.exceptions import (
    CodecError,
    PaginationError,
    PaginationErrorCode,
)
from keyset_pagination.core.pagination.sorting import SortSet, sort_signature

CursorKind = Literal["next", "prev", "offset"]


class CursorPayload(BaseModel):
    """Decoded contents of a page token.

    Attributes:
        sig: Sort signature the token was issued under.
        k: Sort-column values of the boundary row, keyed by output key.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    sig: str = Field(pattern=r"^[0-9a-f]{8}$", description="Sort signature")
    k: dict[str, Any] = Field(description="Sort key values by output key")


class _IncomingCursor(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class NextPageCursor(_IncomingCursor):
    """Fetch the page after the row encoded in ``next_page``."""

    next_page: str = Field(alias="nextPage", min_length=1)


class PrevPageCursor(_IncomingCursor):
    """Fetch the page before the row encoded in ``prev_page``."""

    prev_page: str = Field(alias="prevPage", min_length=1)


class OffsetCursor(_IncomingCursor):
    """Skip ``offset`` rows."""

    offset: Annotated[int, Field(ge=0, strict=True)]


CursorIncoming = NextPageCursor | PrevPageCursor | OffsetCursor

_incoming_adapter: TypeAdapter[CursorIncoming] = TypeAdapter(CursorIncoming)


@dataclass(frozen=True, slots=True)
class DecodedCursor:
    """Incoming cursor after token decoding.

    ``payload`` is set for ``next``/``prev`` cursors, ``offset`` for offset
    cursors.
    """

    kind: CursorKind
    payload: CursorPayload | None = None
    offset: int | None = None


def parse_cursor(raw: CursorIncoming | Mapping[str, Any]) -> CursorIncoming:
    """Validate a raw cursor mapping (e.g. request parameters).

    Accepts ``nextPage``/``next_page``, ``prevPage``/``prev_page`` or
    ``offset``; exactly one must be present.

    Raises:
        PaginationError: ``INVALID_TOKEN`` when the mapping matches no variant.
    """
    if isinstance(raw, (NextPageCursor, PrevPageCursor, OffsetCursor)):
        return raw
    try:
        return _incoming_adapter.validate_python(raw)
    except ValidationError as e:
        raise PaginationError(
            "Invalid cursor",
            code=PaginationErrorCode.INVALID_TOKEN,
            cause=e,
        ) from e


async def decode_cursor(
    cursor: CursorIncoming | Mapping[str, Any],
    codec: Codec[Any, Any],
) -> DecodedCursor:
    """Decode the token of an incoming cursor.

    Raises:
        PaginationError: ``INVALID_TOKEN`` when the cursor is malformed, the
            token cannot be decoded, or the decoded value is not a cursor
            payload. Failures of the codec's collaborators (for example a
            store outage) propagate unchanged.
    """
    cursor = parse_cursor(cursor)
    if isinstance(cursor, NextPageCursor):
        return DecodedCursor("next", payload=await decode_cursor_payload(cursor.next_page, codec))
    if isinstance(cursor, PrevPageCursor):
        return DecodedCursor("prev", payload=await decode_cursor_payload(cursor.prev_page, codec))
    return DecodedCursor("offset", offset=cursor.offset)


async def decode_cursor_payload(token: str, codec: Codec[Any, Any]) -> CursorPayload:
    """Decode a page token into a validated ``CursorPayload``."""
    try:
        decoded = await codec.decode(token)
        return CursorPayload.model_validate(decoded)
    except (CodecError, ValidationError) as e:
        raise PaginationError(
            "Invalid page token",
            code=PaginationErrorCode.INVALID_TOKEN,
            cause=e,
        ) from e


def row_value(row: Any, key: str) -> Any:
    """Read ``key`` from a result row (mapping) or entity (attribute)."""
    if isinstance(row, Mapping):
        return row[key]
    return getattr(row, key)


def resolve_cursor_payload(row: Any, sorts: SortSet) -> CursorPayload:
    """Build the cursor payload identifying ``row`` under ``sorts``."""
    return CursorPayload(
        sig=sort_signature(sorts),
        k={item.output_key: row_value(row, item.output_key) for item in sorts},
    )


async def encode_cursor(row: Any, sorts: SortSet, codec: Codec[Any, Any]) -> str:
    """Encode the cursor for ``row`` through ``codec``."""
    payload = resolve_cursor_payload(row, sorts)
    return await codec.encode(payload.model_dump())


__all__ = [
    "CursorIncoming",
    "CursorKind",
    "CursorPayload",
    "DecodedCursor",
    "NextPageCursor",
    "OffsetCursor",
    "PrevPageCursor",
    "decode_cursor",
    "decode_cursor_payload",
    "encode_cursor",
    "parse_cursor",
    "resolve_cursor_payload",
    "row_value",
]
