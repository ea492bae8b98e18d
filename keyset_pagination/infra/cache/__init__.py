"""Cache infrastructure using Redis."""
from __future__ import annotations

from keyset_pagination.infra.cache.redis import RedisStash

__all__ = ["RedisStash"]
