"""Modular Pydantic Settings v2 configuration.

Settings are split by domain (app/db/cache/redis/logging/pagination), loaded
from environment variables (or a local .env file), validated once and frozen.

Import settings via cached loaders:
    from catalog_service.core.settings import get_cache_settings

    settings = get_cache_settings()
    print(settings.driver)
"""

from __future__ import annotations

from .app import AppSettings
from .cache import CacheSettings
from .loader import (
    clear_settings_cache,
    get_app_settings,
    get_cache_settings,
    get_db_settings,
    get_logging_settings,
    get_pagination_settings,
    get_redis_settings,
)
from .logs import LoggingSettings
from .pagination import PaginationSettings
from .postgres import PostgresSettings
from .redis import RedisSettings

__all__ = [
    "AppSettings",
    "CacheSettings",
    "LoggingSettings",
    "PaginationSettings",
    "PostgresSettings",
    "RedisSettings",
    "clear_settings_cache",
    "get_app_settings",
    "get_cache_settings",
    "get_db_settings",
    "get_logging_settings",
    "get_pagination_settings",
    "get_redis_settings",
]
