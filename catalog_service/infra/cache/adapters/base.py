"""Cache adapter contract and read-through rehydration.

An adapter is a flat async key/value store with TTLs. ``CacheService`` only
talks to this interface, so backends are interchangeable:

    adapter = MemoryCacheAdapter()              # tests, single process
    adapter = RedisCacheAdapter(redis_client)   # shared across workers
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from catalog_service.infra.metrics.tracking import track_cache_invalidation


@dataclass(slots=True, frozen=True)
class RehydrationContext:
    """How to turn cached plain data back into entities.

    Attributes:
        repository: Object exposing ``wrap_entity(record, entity_class, options)``
        entity_class: Target entity class (None uses the repository default)
        options: Extra construction options for the entity class
    """

    repository: Any
    entity_class: type[Any] | None = None
    options: dict[str, Any] | None = None

    def rehydrate(self, value: Any) -> Any:
        """Wrap a dict, or the dicts of a list; anything else passes through."""
        if isinstance(value, dict):
            return self.repository.wrap_entity(value, self.entity_class, self.options)
        if isinstance(value, list):
            return [
                self.repository.wrap_entity(item, self.entity_class, self.options)
                if isinstance(item, dict)
                else item
                for item in value
            ]
        return value


class CacheAdapter:
    """Base cache adapter.

    Subclasses implement get/set/delete/keys. ``invalidate_prefix`` has a
    generic implementation on top of ``keys`` and ``delete``; backends with
    server-side pattern matching should override it.

    TTL semantics shared by all backends:
        - ``None``: the adapter's default TTL
        - ``<= 0``: no expiry
    """

    name = "base"

    async def get(self, key: str, ctx: RehydrationContext | None = None) -> Any | None:
        """Return the live value for ``key`` or None."""
        raise NotImplementedError(f"{type(self).__name__} does not implement get()")

    async def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store ``value`` under ``key``."""
        raise NotImplementedError(f"{type(self).__name__} does not implement set()")

    async def delete(self, keys: str | list[str]) -> None:
        """Remove one or more keys; missing keys are ignored."""
        raise NotImplementedError(f"{type(self).__name__} does not implement delete()")

    async def keys(self) -> list[str]:
        """Enumerate all live keys (O(n))."""
        raise NotImplementedError(f"{type(self).__name__} does not implement keys()")

    async def invalidate_prefix(self, prefix: str) -> int:
        """Delete every key starting with ``prefix`` and return how many."""
        matching = [key for key in await self.keys() if key.startswith(prefix)]
        if matching:
            await self.delete(matching)
        track_cache_invalidation(self.name, len(matching))
        return len(matching)

    async def close(self) -> None:
        """Release backend resources."""
        return None


def normalize_keys(keys: str | list[str] | tuple[str, ...]) -> list[str]:
    """Accept a single key or a collection of keys."""
    if isinstance(keys, str):
        return [keys]
    return list(keys)


__all__ = ["CacheAdapter", "RehydrationContext", "normalize_keys"]
