"""Deferred log messages.

Debug lines that describe a page (cursor kind, item counts) are only built
when DEBUG is enabled for the logger, so the hot path pays nothing for them.
"""

from __future__ import annotations

import logging
from typing import Any


class LazyLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that calls callables passed as message or args.

    ``LoggerAdapter.debug``/``info``/``exception`` all route through ``log``,
    so overriding it covers every level.

    Example:
        ```python
        logger = get_lazy_logger(__name__)
        logger.debug(lambda: f"paginate: {len(items)} items")
        logger.debug("cursor kind: %s", lambda: decoded.kind)
        ```
    """

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return
        if callable(msg):
            msg = msg()
        if args:
            args = tuple(_resolve(arg) for arg in args)
        # skip this frame so records point at the calling module
        kwargs.setdefault("stacklevel", 2)
        super().log(level, msg, *args, **kwargs)


def _resolve(value: Any) -> Any:
    return value() if callable(value) else value


def get_lazy_logger(name: str, **context: Any) -> LazyLoggerAdapter:
    """Return a ``LazyLoggerAdapter`` for ``name``.

    Args:
        name: Logger name (usually __name__).
        **context: Fields bound to every record as ``extra``.
    """
    return LazyLoggerAdapter(logging.getLogger(name), context or {})


__all__ = ["LazyLoggerAdapter", "get_lazy_logger"]
