"""Composable, reversible codecs used to build pagination cursors.

    from keyset_pagination.core.codec import (
        AesGcmCodec,
        Base64UrlCodec,
        RichJsonCodec,
        pipe,
    )

    codec = pipe(RichJsonCodec(), AesGcmCodec(secret), Base64UrlCodec())
"""

from keyset_pagination.core.codec.aes import AesGcmCodec
from keyset_pagination.core.codec.base import Codec, CodecPipeline, pipe
from keyset_pagination.core.codec.base64url import Base64UrlCodec
from keyset_pagination.core.codec.rich_json import RichJsonCodec
from keyset_pagination.core.codec.stash import Stash, StashCodec

__all__ = [
    "AesGcmCodec",
    "Base64UrlCodec",
    "Codec",
    "CodecPipeline",
    "RichJsonCodec",
    "Stash",
    "StashCodec",
    "pipe",
]
