"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Usage:
    from catalog_service.core.settings.loader import get_cache_settings

    settings = get_cache_settings()  # First call: loads and validates
    settings = get_cache_settings()  # Subsequent calls: returns cached instance

Testing:
    In tests, clear the cache to force reload:
    get_cache_settings.cache_clear()
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .cache import CacheSettings
from .logs import LoggingSettings
from .pagination import PaginationSettings
from .postgres import PostgresSettings
from .redis import RedisSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """Get cached application settings.

    Returns:
        Validated and frozen AppSettings instance.
    """
    return AppSettings()


@lru_cache(maxsize=1)
def get_cache_settings() -> CacheSettings:
    """Get cached cache-service settings.

    Returns:
        Validated and frozen CacheSettings instance.
    """
    return CacheSettings()


@lru_cache(maxsize=1)
def get_db_settings() -> PostgresSettings:
    """Get cached database settings.

    Returns:
        Validated and frozen PostgresSettings instance.
    """
    return PostgresSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


@lru_cache(maxsize=1)
def get_pagination_settings() -> PaginationSettings:
    """Get cached pagination settings.

    Returns:
        Validated and frozen PaginationSettings instance.
    """
    return PaginationSettings()


@lru_cache(maxsize=1)
def get_redis_settings() -> RedisSettings:
    """Get cached Redis settings.

    Returns:
        Validated and frozen RedisSettings instance.
    """
    return RedisSettings()


def clear_settings_cache() -> None:
    """Reset every cached loader (used by tests after env changes)."""
    for loader in (
        get_app_settings,
        get_cache_settings,
        get_db_settings,
        get_logging_settings,
        get_pagination_settings,
        get_redis_settings,
    ):
        loader.cache_clear()
