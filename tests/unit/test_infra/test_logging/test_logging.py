"""Tests for logging helpers: lazy adapter, JSON formatter, dictConfig setup."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from keyset_pagination.core.settings import LoggingSettings
from keyset_pagination.infra.logging import (
    JSONFormatter,
    LazyLoggerAdapter,
    configure_logging,
    get_lazy_logger,
    setup_logging,
)
from keyset_pagination.infra.logging import config as logging_config


def _record(msg="hello %s", args=("world",), **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="keyset_pagination.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=None,
    )
    record.__dict__.update(extra)
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.captureWarnings(False)


@pytest.mark.unit
class TestLazyLogger:
    def test_returns_adapter(self):
        assert isinstance(get_lazy_logger("x"), LazyLoggerAdapter)

    def test_callable_not_evaluated_when_disabled(self, caplog):
        calls = []
        logger = get_lazy_logger("keyset_pagination.lazy")

        with caplog.at_level(logging.INFO, logger="keyset_pagination.lazy"):
            logger.debug(lambda: calls.append("msg") or "msg")

        assert calls == []
        assert caplog.records == []

    def test_callable_message_and_args_evaluated(self, caplog):
        logger = get_lazy_logger("keyset_pagination.lazy")

        with caplog.at_level(logging.DEBUG, logger="keyset_pagination.lazy"):
            logger.debug(lambda: "page of %s")
            logger.info("kind=%s", lambda: "next")

        assert [r.getMessage() for r in caplog.records] == ["page of %s", "kind=next"]

    def test_records_point_at_the_caller(self, caplog):
        logger = get_lazy_logger("keyset_pagination.lazy")

        with caplog.at_level(logging.DEBUG, logger="keyset_pagination.lazy"):
            logger.debug(lambda: "deferred")
            logger.log(logging.INFO, "direct")

        assert [r.filename for r in caplog.records] == ["test_logging.py"] * 2
        assert {r.funcName for r in caplog.records} == {"test_records_point_at_the_caller"}

    def test_exception_attaches_exc_info(self, caplog):
        logger = get_lazy_logger("keyset_pagination.lazy")

        with caplog.at_level(logging.ERROR, logger="keyset_pagination.lazy"):
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                logger.exception("Failed to paginate")

        assert caplog.records[0].exc_info[0] is RuntimeError


@pytest.mark.unit
class TestJSONFormatter:
    def test_default_keys(self):
        data = json.loads(JSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "keyset_pagination.test"
        assert data["message"] == "hello world"
        assert data["timestamp"].endswith("Z")
        assert "trace_id" not in data

    def test_static_and_extra_fields(self):
        formatter = JSONFormatter(static={"service": "keyset-pagination"})
        data = json.loads(formatter.format(_record(stash_key="abc")))

        assert data["service"] == "keyset-pagination"
        assert data["stash_key"] == "abc"
        assert "pathname" not in data

    def test_exception_stays_on_one_line(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()

        line = JSONFormatter().format(record)

        assert "\n" not in line
        assert "ValueError: bad" in json.loads(line)["exception"]


@pytest.mark.unit
class TestConfigureLogging:
    def test_json_handler_installed(self, restore_root_logger):
        configure_logging(log_level="debug", json_logs=True, service_name="svc")

        root = restore_root_logger
        assert root.level == logging.DEBUG
        formatter = root.handlers[0].formatter
        assert isinstance(formatter, JSONFormatter)
        assert formatter.static == {"service": "svc"}

    def test_text_formatter(self, restore_root_logger):
        configure_logging(json_logs=False, include_function_name=True)

        formatter = restore_root_logger.handlers[0].formatter
        assert not isinstance(formatter, JSONFormatter)
        assert "%(funcName)s" in formatter._fmt

    def test_setup_logging_runs_once(self, restore_root_logger, monkeypatch):
        monkeypatch.setattr(logging_config, "_LOGGING_INITIALIZED", False)
        calls = []
        monkeypatch.setattr(logging_config, "configure_logging", lambda **kw: calls.append(kw))

        settings = LoggingSettings(_env_file=None, level="WARNING")
        setup_logging(settings)
        setup_logging(settings)
        setup_logging(settings, force=True, json_logs=False)

        assert len(calls) == 2
        assert calls[0]["log_level"] == "WARNING"
        assert calls[1]["json_logs"] is False
