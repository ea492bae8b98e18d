"""Logging configuration setup.

Configures the root logger through ``logging.config.dictConfig`` with a
single console handler; package loggers propagate to it. Libraries
embedding the paginator usually configure logging themselves and never
call this module.
"""

from __future__ import annotations

import logging
import logging.config
from typing import TYPE_CHECKING, Any

logger = logging.getLogger(__name__)
_LOGGING_INITIALIZED = False

if TYPE_CHECKING:
    from keyset_pagination.core.settings.logs import LoggingSettings


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    settings_obj = log_settings
    if settings_obj is None:
        from keyset_pagination.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    log_config = {**settings_obj.to_logging_kwargs(), **configure_kwargs}
    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    service_name: str = "keyset-pagination",
    include_function_name: bool = False,
    capture_warnings: bool = True,
) -> None:
    """Configure the root logger.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_logs: Emit JSON Lines instead of human-readable text.
        service_name: Static ``service`` field added to JSON records.
        include_function_name: Include function name in records.
        capture_warnings: Forward Python warnings to logging system.
    """
    if capture_warnings:
        logging.captureWarnings(True)

    formatter = _build_formatter_config(
        json_logs=json_logs,
        service_name=service_name,
        include_function_name=include_function_name,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": formatter},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": "ext://sys.stderr",
                },
            },
            "root": {
                "level": log_level.upper(),
                "handlers": ["console"],
            },
        }
    )
    logger.debug("Logging configured", extra={"json_logs": json_logs, "level": log_level})


def _build_formatter_config(
    json_logs: bool,
    service_name: str,
    include_function_name: bool,
) -> dict[str, Any]:
    if json_logs:
        fmt_keys = {
            "level": "levelname",
            "logger": "name",
            "message": "message",
        }
        if include_function_name:
            fmt_keys["function"] = "funcName"

        return {
            "()": "keyset_pagination.infra.logging.formatters.JSONFormatter",
            "fmt_keys": fmt_keys,
            "static": {"service": service_name},
        }

    format_parts = ["%(asctime)s", "%(levelname)s", "%(name)s"]
    if include_function_name:
        format_parts.append("%(funcName)s")
    format_parts.append("%(message)s")
    return {
        "format": " - ".join(format_parts),
        "datefmt": "%Y-%m-%d %H:%M:%S",
    }


__all__ = ["configure_logging", "setup_logging"]
