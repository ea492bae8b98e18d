"""Indirection codec backed by an external key-value store."""

from __future__ import annotations

from typing import Protocol, runtime_checkable
from uuid import uuid4

from keyset_pagination.core.codec.base import Codec
from keyset_pagination.core.exceptions import StashKeyError


@runtime_checkable
class Stash(Protocol):
    """Async key-value store used by ``StashCodec``.

    ``get`` must raise ``StashKeyError`` (or return ``None``) for an unknown
    key; ``set`` stores a value under a key.
    """

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...


class StashCodec(Codec[str, str]):
    """Replace a value with a short random reference into a ``Stash``.

    ``encode`` stores the value under a fresh UUID4 and returns the UUID;
    ``decode`` loads it back. A reference that resolves to nothing raises
    ``StashKeyError`` rather than returning an empty value.
    """

    input_type = str
    output_type = str

    def __init__(self, stash: Stash) -> None:
        self.stash = stash

    async def encode(self, value: str) -> str:
        key = str(uuid4())
        await self.stash.set(key, value)
        return key

    async def decode(self, value: str) -> str:
        stored = await self.stash.get(value)
        if stored is None:
            raise StashKeyError(value)
        return stored

    def __repr__(self) -> str:
        return f"StashCodec({type(self.stash).__name__})"


__all__ = ["Stash", "StashCodec"]
