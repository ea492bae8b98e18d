"""Authenticated encryption for cursor payloads.

Envelope layout (before base64)::

    version (1) | salt (16) | nonce (12) | tag (16) | ciphertext (n)

A fresh salt and nonce are drawn for every ``encode`` call. The AES-256 key is
derived from the secret and salt with scrypt; version and salt are bound to
the ciphertext as associated data, so changing either one fails
authentication.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from keyset_pagination.core.codec.base import Codec
from keyset_pagination.core.exceptions import CodecError

logger = logging.getLogger(__name__)

VERSION = 1
SALT_LENGTH = 16
NONCE_LENGTH = 12
TAG_LENGTH = 16
KEY_LENGTH = 32
HEADER_LENGTH = 1 + SALT_LENGTH + NONCE_LENGTH + TAG_LENGTH

SCRYPT_N = 2**15
SCRYPT_R = 8
SCRYPT_P = 1


def _wipe(buffer: bytearray) -> None:
    for i in range(len(buffer)):
        buffer[i] = 0


class AesGcmCodec(Codec[str, str]):
    """Encrypt text with AES-256-GCM under a scrypt-derived key.

    Args:
        secret: Shared secret. ``str`` secrets are UTF-8 encoded.

    Example:
        codec = AesGcmCodec(settings.cursor_secret.get_secret_value())
        token = await codec.encode('{"json": 1}')
        assert await codec.decode(token) == '{"json": 1}'

    Decoding fails with ``CodecError`` on unknown versions, truncated
    payloads, a wrong secret or any modification of the envelope; it never
    returns partially decrypted data.
    """

    input_type = str
    output_type = str

    def __init__(self, secret: str | bytes) -> None:
        if not secret:
            raise ValueError("AesGcmCodec requires a non-empty secret")
        self._secret = secret.encode("utf-8") if isinstance(secret, str) else bytes(secret)

    def __repr__(self) -> str:
        return "AesGcmCodec(secret=***)"

    def _derive_key(self, salt: bytes) -> bytearray:
        """Derive the AES key for ``salt`` into a wipeable buffer.

        ``Scrypt.derive`` returns immutable ``bytes``; only the copy returned
        here is zeroed after use. The intermediate ``bytes`` object is left
        to the garbage collector, so wiping is best effort.
        """
        kdf = Scrypt(salt=salt, length=KEY_LENGTH, n=SCRYPT_N, r=SCRYPT_R, p=SCRYPT_P)
        return bytearray(kdf.derive(self._secret))

    async def encode(self, value: str) -> str:
        if not isinstance(value, str):
            raise CodecError(f"AesGcmCodec expects str, got {type(value).__name__}")

        header = bytes([VERSION])
        salt = os.urandom(SALT_LENGTH)
        key = await asyncio.to_thread(self._derive_key, salt)
        try:
            nonce = os.urandom(NONCE_LENGTH)
            sealed = AESGCM(key).encrypt(nonce, value.encode("utf-8"), header + salt)
        finally:
            _wipe(key)

        # AESGCM appends the tag; the envelope stores it ahead of the ciphertext.
        ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
        return base64.b64encode(header + salt + nonce + tag + ciphertext).decode("ascii")

    async def decode(self, value: str) -> str:
        try:
            envelope = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError, TypeError) as e:
            raise CodecError("Invalid payload: not base64") from e

        if len(envelope) < HEADER_LENGTH:
            raise CodecError("Invalid payload: too short")
        version = envelope[0]
        if version != VERSION:
            raise CodecError(f"Unsupported version: {version}")

        salt = envelope[1 : 1 + SALT_LENGTH]
        nonce = envelope[1 + SALT_LENGTH : 1 + SALT_LENGTH + NONCE_LENGTH]
        tag = envelope[1 + SALT_LENGTH + NONCE_LENGTH : HEADER_LENGTH]
        ciphertext = envelope[HEADER_LENGTH:]

        key = await asyncio.to_thread(self._derive_key, salt)
        try:
            plaintext = AESGCM(key).decrypt(nonce, ciphertext + tag, envelope[:1] + salt)
        except InvalidTag as e:
            logger.debug("Rejected cursor envelope: authentication failed")
            raise CodecError("Invalid payload: authentication failed") from e
        finally:
            _wipe(key)

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CodecError("Invalid payload: plaintext is not UTF-8") from e


__all__ = ["AesGcmCodec", "HEADER_LENGTH", "VERSION"]
