"""In-process cache adapter on top of ``cachetools.TLRUCache``.

Each entry carries its own TTL, so ``set(key, value, ttl=5)`` and
``set(key, value)`` (adapter default) can live side by side in one cache.
Values are stored by reference: an entity put in comes back as the same
object, and callers must not mutate values after caching them.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from typing import Any, NamedTuple

from cachetools import TLRUCache

from catalog_service.infra.cache.adapters.base import (
    CacheAdapter,
    RehydrationContext,
    normalize_keys,
)
from catalog_service.infra.logging import get_lazy_logger
from catalog_service.infra.metrics.tracking import track_cache_lookup, track_cache_operation

lazy_logger = get_lazy_logger(__name__)

DEFAULT_TTL = 60
DEFAULT_CHECK_PERIOD = 120.0


class _Entry(NamedTuple):
    value: Any
    ttl: float


def _time_to_use(_key: str, entry: _Entry, now: float) -> float:
    # Non-positive TTLs never expire
    return now + entry.ttl if entry.ttl > 0 else math.inf


class MemoryCacheAdapter(CacheAdapter):
    """Expiring in-process cache for tests and single-process deployments.

    ``TLRUCache`` hides expired entries from reads and purges them on every
    write. Reads additionally purge at most once every ``check_period``
    seconds, so a read-only workload does not hold on to dead entries.

    Example:
        adapter = MemoryCacheAdapter(default_ttl=30)
        await adapter.set("icons:1", icon)
        assert await adapter.get("icons:1") is icon
    """

    name = "memory"

    def __init__(
        self,
        *,
        default_ttl: float = DEFAULT_TTL,
        check_period: float = DEFAULT_CHECK_PERIOD,
        max_entries: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the adapter.

        Args:
            default_ttl: TTL used when set() receives None.
            check_period: Minimum seconds between purges triggered by reads.
            max_entries: Size bound; least recently used entries are evicted
                once it is reached. Unbounded when None.
            clock: Time source in seconds, injectable for tests.
        """
        self.default_ttl = default_ttl
        self.check_period = check_period
        self._clock = clock
        self._cache: TLRUCache = TLRUCache(
            maxsize=math.inf if max_entries is None else max_entries,
            ttu=_time_to_use,
            timer=clock,
        )
        self._next_purge = clock() + check_period

    def __len__(self) -> int:
        self._purge()
        return len(self._cache)

    async def get(self, key: str, ctx: RehydrationContext | None = None) -> Any | None:
        start = time.perf_counter()
        if self._clock() >= self._next_purge:
            self._purge()

        entry = self._cache.get(key)
        value = None if entry is None else entry.value

        track_cache_lookup(self.name, hit=value is not None)
        track_cache_operation(self.name, "get", time.perf_counter() - start)
        lazy_logger.debug(lambda: f"cache.get {key} -> {'hit' if value is not None else 'miss'}")

        if value is not None and ctx is not None:
            return ctx.rehydrate(value)
        return value

    async def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        start = time.perf_counter()
        self._cache[key] = _Entry(value, self.default_ttl if ttl is None else ttl)
        track_cache_operation(self.name, "set", time.perf_counter() - start)

    async def delete(self, keys: str | list[str]) -> None:
        for key in normalize_keys(keys):
            self._cache.pop(key, None)

    async def keys(self) -> list[str]:
        self._purge()
        return list(self._cache.keys())

    async def close(self) -> None:
        self._cache.clear()

    def _purge(self) -> None:
        expired = self._cache.expire()
        self._next_purge = self._clock() + self.check_period
        if expired:
            lazy_logger.debug(lambda: f"cache.purge removed {len(expired)} expired entries")


__all__ = ["DEFAULT_CHECK_PERIOD", "DEFAULT_TTL", "MemoryCacheAdapter"]
