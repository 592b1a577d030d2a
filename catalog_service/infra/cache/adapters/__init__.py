"""Cache adapter backends."""

from catalog_service.infra.cache.adapters.base import CacheAdapter, RehydrationContext
from catalog_service.infra.cache.adapters.memory import MemoryCacheAdapter
from catalog_service.infra.cache.adapters.redis import RedisCacheAdapter

__all__ = [
    "CacheAdapter",
    "MemoryCacheAdapter",
    "RedisCacheAdapter",
    "RehydrationContext",
]
