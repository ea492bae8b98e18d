"""Unit tests for Pydantic Settings v2 and settings-driven factories."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from keyset_pagination.core.codec import (
    AesGcmCodec,
    Base64UrlCodec,
    RichJsonCodec,
    StashCodec,
)
from keyset_pagination.core.pagination import (
    Paginator,
    SQLiteDialect,
    build_cursor_codec,
    build_paginator,
    clamp_limit,
)
from keyset_pagination.core.settings import (
    LoggingSettings,
    PaginationSettings,
    RedisSettings,
    clear_all_caches,
    get_logging_settings,
    get_pagination_settings,
    get_redis_settings,
)


@pytest.mark.unit
class TestPaginationSettings:
    def test_defaults(self):
        settings = PaginationSettings(_env_file=None)

        assert settings.default_limit == 50
        assert settings.max_limit == 100
        assert settings.cursor_secret is None
        assert settings.use_stash is False

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("PAGINATION_DEFAULT_LIMIT", "10")
        monkeypatch.setenv("PAGINATION_CURSOR_SECRET", "s3cret")
        settings = PaginationSettings(_env_file=None)

        assert settings.default_limit == 10
        assert settings.cursor_secret.get_secret_value() == "s3cret"
        assert "s3cret" not in repr(settings)

    def test_frozen(self):
        settings = PaginationSettings(_env_file=None)
        with pytest.raises(ValidationError):
            settings.max_limit = 5

    def test_default_above_max_is_rejected(self):
        with pytest.raises(ValidationError, match="default_limit"):
            PaginationSettings(_env_file=None, default_limit=200, max_limit=100)

    def test_empty_secret_is_rejected(self):
        with pytest.raises(ValidationError, match="cursor_secret"):
            PaginationSettings(_env_file=None, cursor_secret="")


@pytest.mark.unit
class TestRedisSettings:
    def test_defaults(self):
        settings = RedisSettings(_env_file=None)

        assert settings.redis_url == "redis://localhost:6379/0"
        assert settings.key_prefix == "cursor:"
        assert settings.cursor_ttl == 3600

    def test_url_from_env(self, monkeypatch):
        monkeypatch.setenv("REDIS_URL", "redis://cache:6380/2")
        assert RedisSettings(_env_file=None).redis_url == "redis://cache:6380/2"

    def test_connection_pool_kwargs(self):
        kwargs = RedisSettings(_env_file=None, password="pw", max_connections=5).connection_pool_kwargs()

        assert kwargs["max_connections"] == 5
        assert kwargs["password"] == "pw"
        assert kwargs["decode_responses"] is True

    def test_password_omitted_when_unset(self):
        assert "password" not in RedisSettings(_env_file=None).connection_pool_kwargs()


@pytest.mark.unit
class TestLoggingSettings:
    def test_defaults(self):
        settings = LoggingSettings(_env_file=None)

        assert settings.service_name == "keyset-pagination"
        assert settings.level == "INFO"
        assert settings.json_logs is True

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_JSON", "false")
        settings = LoggingSettings(_env_file=None)

        assert settings.level == "DEBUG"
        assert settings.json_logs is False

    def test_invalid_level(self):
        with pytest.raises(ValidationError):
            LoggingSettings(_env_file=None, level="LOUD")

    def test_to_logging_kwargs(self):
        kwargs = LoggingSettings(_env_file=None, json_logs=False).to_logging_kwargs()
        assert kwargs == {
            "log_level": "INFO",
            "json_logs": False,
            "service_name": "keyset-pagination",
            "include_function_name": False,
        }


@pytest.mark.unit
class TestLoaders:
    def test_loaders_return_settings(self):
        assert isinstance(get_pagination_settings(), PaginationSettings)
        assert isinstance(get_redis_settings(), RedisSettings)
        assert isinstance(get_logging_settings(), LoggingSettings)

    def test_loaders_are_cached(self):
        assert get_pagination_settings() is get_pagination_settings()

    def test_clear_all_caches_reloads_env(self, monkeypatch):
        first = get_pagination_settings()
        monkeypatch.setenv("PAGINATION_MAX_LIMIT", "500")
        assert get_pagination_settings() is first

        clear_all_caches()

        assert get_pagination_settings().max_limit == 500


@pytest.mark.unit
class TestFactories:
    def test_plain_codec(self):
        codec = build_cursor_codec(PaginationSettings(_env_file=None))
        assert [type(c) for c in codec.codecs] == [RichJsonCodec, Base64UrlCodec]

    def test_encrypted_codec(self):
        codec = build_cursor_codec(PaginationSettings(_env_file=None, cursor_secret="k"))
        assert [type(c) for c in codec.codecs] == [RichJsonCodec, AesGcmCodec, Base64UrlCodec]

    def test_stash_codec_is_outermost(self, stash):
        codec = build_cursor_codec(PaginationSettings(_env_file=None, use_stash=True), stash)
        assert [type(c) for c in codec.codecs] == [RichJsonCodec, Base64UrlCodec, StashCodec]

    def test_stash_ignored_when_use_stash_is_off(self, stash):
        codec = build_cursor_codec(PaginationSettings(_env_file=None), stash)
        assert [type(c) for c in codec.codecs] == [RichJsonCodec, Base64UrlCodec]

    def test_use_stash_requires_stash(self):
        with pytest.raises(ValueError, match="stash"):
            build_cursor_codec(PaginationSettings(_env_file=None, use_stash=True))

    def test_build_paginator(self):
        paginator = build_paginator(SQLiteDialect(), PaginationSettings(_env_file=None))
        assert isinstance(paginator, Paginator)
        assert isinstance(paginator.dialect, SQLiteDialect)

    @pytest.mark.parametrize(("requested", "expected"), [(None, 20), (5, 5), (40, 40), (41, 40)])
    def test_clamp_limit(self, requested, expected):
        settings = PaginationSettings(_env_file=None, default_limit=20, max_limit=40)
        assert clamp_limit(requested, settings) == expected
