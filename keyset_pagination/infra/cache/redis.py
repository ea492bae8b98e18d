"""Redis-backed stash for cursor payloads.

Used with ``StashCodec`` so page tokens become short references while the
payload itself lives in Redis for ``cursor_ttl`` seconds.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from redis.asyncio import ConnectionPool, Redis

from keyset_pagination.core.exceptions import StashKeyError
from keyset_pagination.core.settings import get_redis_settings

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from keyset_pagination.core.settings import RedisSettings

logger = logging.getLogger(__name__)


class RedisStash:
    """Key-value stash on top of ``redis.asyncio``.

    Example:
        stash = RedisStash.from_settings()
        codec = build_cursor_codec(stash=stash)
        ...
        await stash.close()

    Connection failures are not caught here; they surface to the paginator,
    which reports them as unexpected errors.
    """

    def __init__(
        self,
        client: Redis,
        *,
        key_prefix: str = "cursor:",
        ttl: int | None = None,
        pool: ConnectionPool | None = None,
    ) -> None:
        self._client = client
        self._pool = pool
        self.key_prefix = key_prefix
        self.ttl = ttl

    @classmethod
    def from_settings(cls, settings: RedisSettings | None = None) -> RedisStash:
        """Create a stash with its own connection pool."""
        settings = settings or get_redis_settings()
        pool = ConnectionPool.from_url(settings.redis_url, **settings.connection_pool_kwargs())
        logger.info(
            "Creating Redis cursor stash",
            extra={"key_prefix": settings.key_prefix, "ttl": settings.cursor_ttl},
        )
        return cls(
            Redis(connection_pool=pool),
            key_prefix=settings.key_prefix,
            ttl=settings.cursor_ttl,
            pool=pool,
        )

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def get(self, key: str) -> str:
        value = await cast("Awaitable[Any]", self._client.get(self._key(key)))
        if value is None:
            logger.debug("Stash miss", extra={"stash_key": key})
            raise StashKeyError(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        await cast("Awaitable[Any]", self._client.set(self._key(key), value, ex=self.ttl))

    async def close(self) -> None:
        """Close the client, then the pool it was built with."""
        await self._client.aclose()
        if self._pool is not None:
            await self._pool.aclose()


__all__ = ["RedisStash"]
