"""Build cursor codecs and paginators from settings.

The codec is constructed once at startup and passed to the paginator
explicitly; nothing here keeps process-wide state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from keyset_pagination.core.codec.aes import AesGcmCodec
from keyset_pagination.core.codec.base import Codec, CodecPipeline
from keyset_pagination.core.codec.base64url import Base64UrlCodec
from keyset_pagination.core.codec.rich_json import RichJsonCodec
from keyset_pagination.core.codec.stash import Stash, StashCodec
from keyset_pagination.core.pagination.paginator import Paginator
from keyset_pagination.core.settings import PaginationSettings, get_pagination_settings

if TYPE_CHECKING:
    from keyset_pagination.core.pagination.dialects import PaginationDialect


def build_cursor_codec(
    settings: PaginationSettings | None = None,
    stash: Stash | None = None,
) -> CodecPipeline:
    """Assemble the cursor codec described by ``settings``.

    Layers, in encode order: rich JSON, AES-GCM (when ``cursor_secret`` is
    set), URL-safe base64, stash reference (when ``use_stash`` is set). A stash
    passed while ``use_stash`` is off is not used.

    Raises:
        ValueError: If ``settings.use_stash`` is set but no stash is given.
    """
    settings = settings or get_pagination_settings()
    if settings.use_stash and stash is None:
        raise ValueError("use_stash is enabled but no stash was provided")

    codecs: list[Codec[Any, Any]] = [RichJsonCodec()]
    if settings.cursor_secret is not None:
        codecs.append(AesGcmCodec(settings.cursor_secret.get_secret_value()))
    codecs.append(Base64UrlCodec())
    if settings.use_stash and stash is not None:
        codecs.append(StashCodec(stash))
    return CodecPipeline(*codecs)


def build_paginator(
    dialect: PaginationDialect | None = None,
    settings: PaginationSettings | None = None,
    stash: Stash | None = None,
) -> Paginator:
    """Create a ``Paginator`` with the codec configured by ``settings``."""
    return Paginator(dialect, build_cursor_codec(settings, stash))


def clamp_limit(requested: int | None, settings: PaginationSettings | None = None) -> int:
    """Apply the configured default and maximum page size."""
    settings = settings or get_pagination_settings()
    if requested is None:
        return settings.default_limit
    return min(requested, settings.max_limit)


__all__ = ["build_cursor_codec", "build_paginator", "clamp_limit"]
