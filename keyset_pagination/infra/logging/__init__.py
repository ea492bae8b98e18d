"""Logging helpers.

    from keyset_pagination.infra.logging import get_lazy_logger

    logger = get_lazy_logger(__name__)
    logger.debug(lambda: f"expensive: {describe()}")
"""

from keyset_pagination.infra.logging.config import configure_logging, setup_logging
from keyset_pagination.infra.logging.formatters import JSONFormatter
from keyset_pagination.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "JSONFormatter",
    "LazyLoggerAdapter",
    "configure_logging",
    "get_lazy_logger",
    "setup_logging",
]
