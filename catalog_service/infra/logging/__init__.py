"""Logging infrastructure.

Structured JSONL logging with non-blocking I/O and OpenTelemetry trace
correlation, plus a lazy logger for zero-cost debug messages.

Basic usage:
    import logging

    from catalog_service.infra.logging import get_lazy_logger

    # Standard logger for INFO/WARNING/ERROR
    logger = logging.getLogger(__name__)
    logger.info("Cache cleared", extra={"base_key": "icons", "deleted": 2})

    # Lazy logger for DEBUG (only evaluated when DEBUG is enabled)
    lazy_logger = get_lazy_logger(__name__)
    lazy_logger.debug(lambda: f"cache.key {base_key} -> {key}")
"""

from catalog_service.infra.logging.config import configure_logging, setup_logging, shutdown
from catalog_service.infra.logging.formatters import JSONFormatter
from catalog_service.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "JSONFormatter",
    "LazyLoggerAdapter",
    "configure_logging",
    "get_lazy_logger",
    "setup_logging",
    "shutdown",
]
