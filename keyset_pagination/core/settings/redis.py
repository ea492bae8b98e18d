"""Redis settings for the cursor stash."""

from __future__ import annotations

from typing import Any

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisSettings(BaseSettings):
    """Connection and key settings for ``RedisStash``.

    Environment variables use REDIS_ prefix.
    Example: REDIS_URL="redis://localhost:6379/0", REDIS_CURSOR_TTL=3600
    """

    redis_url: str = Field(
        default="redis://localhost:6379/0",
        alias="REDIS_URL",
        description="Redis connection URL (redis://[username:password@]host:port/db)",
    )
    password: SecretStr | None = Field(
        default=None,
        description="Redis password, if not embedded in the URL",
    )
    key_prefix: str = Field(
        default="cursor:",
        description="Prefix for stashed cursor keys",
    )
    cursor_ttl: int | None = Field(
        default=3600,
        ge=1,
        description="Seconds a stashed cursor stays valid; None keeps it forever",
    )
    max_connections: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Maximum Redis connection pool size",
    )
    socket_timeout: float = Field(
        default=5.0,
        ge=0.1,
        le=30.0,
        description="Redis socket timeout in seconds (for operations)",
    )
    socket_connect_timeout: float = Field(
        default=5.0,
        ge=0.1,
        le=30.0,
        description="Redis socket connection timeout in seconds (initial connection)",
    )

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    def connection_pool_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``redis.asyncio.ConnectionPool.from_url``."""
        kwargs: dict[str, Any] = {
            "max_connections": self.max_connections,
            "socket_timeout": self.socket_timeout,
            "socket_connect_timeout": self.socket_connect_timeout,
            "decode_responses": True,
        }
        if self.password is not None:
            kwargs["password"] = self.password.get_secret_value()
        return kwargs
