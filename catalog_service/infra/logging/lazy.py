"""Deferred log messages for the cache and pagination hot paths.

Debug records there describe cache keys, filter sets and page boundaries.
Formatting those strings on every request is wasted work when DEBUG is off,
so callers hand over a lambda instead:

    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"cache.key {raw} -> {key}")

The lambda (and any callable positional argument) only runs when the
level is enabled.
"""

from __future__ import annotations

import logging
from functools import partialmethod
from typing import Any


class LazyLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that resolves callable messages and arguments on demand."""

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return
        if callable(msg):
            msg = msg()
        args = tuple(arg() if callable(arg) else arg for arg in args)
        super().log(level, msg, *args, **kwargs)

    debug = partialmethod(log, logging.DEBUG)
    info = partialmethod(log, logging.INFO)
    warning = partialmethod(log, logging.WARNING)
    error = partialmethod(log, logging.ERROR)


def get_lazy_logger(name: str, **context: Any) -> LazyLoggerAdapter:
    """Return a lazy adapter over ``logging.getLogger(name)``.

    ``context`` is bound as the adapter's ``extra``.
    """
    return LazyLoggerAdapter(logging.getLogger(name), context)
