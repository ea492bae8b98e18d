"""Pagination settings.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_LIMIT=50, PAGINATION_CURSOR_SECRET=change-me
"""

from __future__ import annotations

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Pagination configuration settings.

    Attributes:
        default_limit: Page size used when a caller does not ask for one.
        max_limit: Largest page size ``clamp_limit`` lets through.
        cursor_secret: When set, cursor payloads are encrypted with
            AES-256-GCM under a key derived from this secret.
        use_stash: Store cursor payloads in Redis and hand out references.

    Example:
        settings = PaginationSettings()
        limit = clamp_limit(requested, settings)
    """

    default_limit: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Default page size when limit not specified",
    )
    max_limit: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Maximum allowed page size (hard limit)",
    )
    cursor_secret: SecretStr | None = Field(
        default=None,
        description="Secret for encrypting cursors; plain cursors when unset",
    )
    use_stash: bool = Field(
        default=False,
        description="Replace cursors with references into the Redis stash",
    )

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_limits(self) -> PaginationSettings:
        if self.default_limit > self.max_limit:
            raise ValueError("default_limit must not exceed max_limit")
        if self.cursor_secret is not None and not self.cursor_secret.get_secret_value():
            raise ValueError("cursor_secret must not be empty")
        return self
