"""URL-safe base64 text codec."""

from __future__ import annotations

import base64
import binascii
import re

from keyset_pagination.core.codec.base import Codec
from keyset_pagination.core.exceptions import CodecError

_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


class Base64UrlCodec(Codec[str, str]):
    """Encode text as unpadded URL-safe base64 (RFC 4648 section 5).

    Any Unicode string round-trips, including lone surrogates, which are
    carried through with ``surrogatepass``.
    """

    input_type = str
    output_type = str

    async def encode(self, value: str) -> str:
        if not isinstance(value, str):
            raise CodecError(f"Base64UrlCodec expects str, got {type(value).__name__}")
        raw = value.encode("utf-8", errors="surrogatepass")
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    async def decode(self, value: str) -> str:
        if not isinstance(value, str) or not _ALPHABET.fullmatch(value):
            raise CodecError("Invalid base64url token")
        if len(value) % 4 == 1:
            raise CodecError("Invalid base64url token length")

        padded = value + "=" * (-len(value) % 4)
        try:
            raw = base64.urlsafe_b64decode(padded)
            return raw.decode("utf-8", errors="surrogatepass")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise CodecError(f"Invalid base64url token: {e}") from e


__all__ = ["Base64UrlCodec"]
