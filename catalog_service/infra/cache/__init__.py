"""Cache infrastructure: adapters, the read-through service and its factory."""

from __future__ import annotations

import logging

from catalog_service.core.settings import (
    CacheSettings,
    RedisSettings,
    get_cache_settings,
    get_redis_settings,
)
from catalog_service.infra.cache.adapters import (
    CacheAdapter,
    MemoryCacheAdapter,
    RedisCacheAdapter,
    RehydrationContext,
)
from catalog_service.infra.cache.exceptions import CacheConfigurationError, CacheError
from catalog_service.infra.cache.service import CacheMode, CacheService

logger = logging.getLogger(__name__)


def build_cache_adapter(
    cache_settings: CacheSettings | None = None,
    redis_settings: RedisSettings | None = None,
) -> CacheAdapter:
    """Create the adapter selected by ``CACHE_DRIVER``.

    Example:
        adapter = build_cache_adapter()  # MemoryCacheAdapter by default
        service = CacheService(adapter, default_ttl=get_cache_settings().default_ttl)
    """
    cache_settings = cache_settings or get_cache_settings()

    if cache_settings.driver == "redis":
        redis_settings = redis_settings or get_redis_settings()
        adapter: CacheAdapter = RedisCacheAdapter(
            settings=redis_settings,
            default_ttl=cache_settings.adapter_ttl,
        )
    elif cache_settings.driver == "memory":
        adapter = MemoryCacheAdapter(
            default_ttl=cache_settings.adapter_ttl,
            check_period=cache_settings.memory_check_period,
            max_entries=cache_settings.memory_max_entries,
        )
    else:
        raise CacheConfigurationError(
            f"Unknown cache driver '{cache_settings.driver}'",
            details={"driver": cache_settings.driver},
        )

    logger.info(
        "Cache adapter created",
        extra={"driver": cache_settings.driver, "adapter_ttl": cache_settings.adapter_ttl},
    )
    return adapter


__all__ = [
    "CacheAdapter",
    "CacheConfigurationError",
    "CacheError",
    "CacheMode",
    "CacheService",
    "MemoryCacheAdapter",
    "RedisCacheAdapter",
    "RehydrationContext",
    "build_cache_adapter",
]
