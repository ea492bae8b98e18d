"""Pydantic Settings v2 configuration.

Import settings via cached loaders:
    from keyset_pagination.core.settings import get_pagination_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .loader import (
    clear_all_caches,
    get_logging_settings,
    get_pagination_settings,
    get_redis_settings,
)
from .logs import LoggingSettings
from .pagination import PaginationSettings
from .redis import RedisSettings

__all__ = [
    "LoggingSettings",
    "PaginationSettings",
    "RedisSettings",
    "clear_all_caches",
    "get_logging_settings",
    "get_pagination_settings",
    "get_redis_settings",
]
