"""Redis cache adapter with automatic retry and SCAN-based enumeration.

Values are stored as JSON text. Pydantic models (entities, pages) are dumped
by alias, so a cached entity reads back as a camelCase dict that
``RehydrationContext`` turns into an entity again.
"""

from __future__ import annotations

import json
import logging
import math
import time
from typing import Any

from pydantic_core import to_jsonable_python
from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from catalog_service.core.settings import RedisSettings, get_redis_settings
from catalog_service.infra.cache.adapters.base import (
    CacheAdapter,
    RehydrationContext,
    normalize_keys,
)
from catalog_service.infra.metrics.tracking import (
    track_cache_invalidation,
    track_cache_lookup,
    track_cache_operation,
)
from catalog_service.utils.retry import retry

logger = logging.getLogger(__name__)
redis_settings = get_redis_settings()

DEFAULT_TTL = 60

_GLOB_SPECIAL = frozenset("*?[]\\")


def escape_glob(value: str) -> str:
    """Escape Redis glob metacharacters so ``value`` matches literally."""
    return "".join(f"\\{ch}" if ch in _GLOB_SPECIAL else ch for ch in value)


def _redis_retry() -> Any:
    return retry(
        max_attempts=redis_settings.max_retries,
        initial_delay=redis_settings.retry_delay,
        max_delay=5.0,
        exceptions=(RedisConnectionError, RedisTimeoutError),
    )


class RedisCacheAdapter(CacheAdapter):
    """Cache adapter backed by ``redis.asyncio``.

    get/set/delete retry transient connection and timeout errors with
    exponential backoff, then re-raise the original error.

    Example:
        adapter = RedisCacheAdapter(settings=get_redis_settings())
        await adapter.set("icons:search:...", page.model_dump(by_alias=True), ttl=300)
        await adapter.close()
    """

    name = "redis"

    def __init__(
        self,
        client: Redis | None = None,
        *,
        settings: RedisSettings | None = None,
        default_ttl: float = DEFAULT_TTL,
        scan_count: int | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            client: Existing Redis client. When omitted one is created from
                ``settings`` and closed by ``close()``.
            settings: Connection settings (defaults to REDIS_* environment).
            default_ttl: TTL used when set() receives None.
            scan_count: SCAN COUNT hint and delete batch size (defaults to
                REDIS_SCAN_COUNT).
        """
        cfg = settings or redis_settings
        self._owns_client = client is None
        if client is None:
            logger.info(
                "Creating Redis cache client",
                extra={
                    "host": cfg.host,
                    "port": cfg.port,
                    "db": cfg.db,
                    "max_connections": cfg.max_connections,
                },
            )
            client = Redis.from_url(cfg.url, **cfg.connection_pool_kwargs())
        self._client = client
        self.default_ttl = default_ttl
        self.scan_count = scan_count or cfg.scan_count

    @property
    def client(self) -> Redis:
        return self._client

    @_redis_retry()
    async def get(self, key: str, ctx: RehydrationContext | None = None) -> Any | None:
        start = time.perf_counter()
        try:
            raw = await self._client.get(key)
        except (RedisConnectionError, RedisTimeoutError) as e:
            logger.warning("Failed to get value from cache", extra={"key": key, "error": str(e)})
            raise
        track_cache_lookup(self.name, hit=raw is not None)
        track_cache_operation(self.name, "get", time.perf_counter() - start)

        if raw is None:
            return None
        value = self._loads(raw)
        if ctx is not None:
            return ctx.rehydrate(value)
        return value

    @_redis_retry()
    async def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        start = time.perf_counter()
        payload = self._dumps(value)
        effective_ttl = self.default_ttl if ttl is None else ttl
        try:
            if effective_ttl > 0:
                await self._client.set(key, payload, ex=math.ceil(effective_ttl))
            else:
                await self._client.set(key, payload)
        except (RedisConnectionError, RedisTimeoutError) as e:
            logger.warning("Failed to set value in cache", extra={"key": key, "error": str(e)})
            raise
        track_cache_operation(self.name, "set", time.perf_counter() - start)

    @_redis_retry()
    async def delete(self, keys: str | list[str]) -> None:
        key_list = normalize_keys(keys)
        if not key_list:
            return
        start = time.perf_counter()
        await self._client.delete(*key_list)
        track_cache_operation(self.name, "delete", time.perf_counter() - start)

    async def keys(self) -> list[str]:
        start = time.perf_counter()
        found = [
            self._decode_key(key)
            async for key in self._client.scan_iter(match="*", count=self.scan_count)
        ]
        track_cache_operation(self.name, "keys", time.perf_counter() - start)
        return found

    async def invalidate_prefix(self, prefix: str) -> int:
        start = time.perf_counter()
        pattern = f"{escape_glob(prefix)}*"
        matching = [
            self._decode_key(key)
            async for key in self._client.scan_iter(match=pattern, count=self.scan_count)
        ]
        for offset in range(0, len(matching), self.scan_count):
            await self.delete(matching[offset : offset + self.scan_count])

        track_cache_operation(self.name, "invalidate_prefix", time.perf_counter() - start)
        track_cache_invalidation(self.name, len(matching))
        logger.info(
            "Invalidated cache prefix",
            extra={"prefix": prefix, "deleted": len(matching)},
        )
        return len(matching)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
            logger.info("Redis cache client closed")

    @staticmethod
    def _dumps(value: Any) -> str:
        return json.dumps(to_jsonable_python(value, by_alias=True))

    @staticmethod
    def _loads(raw: Any) -> Any:
        # Values written by other clients may not be JSON
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            return raw

    @staticmethod
    def _decode_key(key: Any) -> str:
        return key.decode() if isinstance(key, bytes) else key


__all__ = ["DEFAULT_TTL", "RedisCacheAdapter", "escape_glob"]
