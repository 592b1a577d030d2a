"""Read-through cache service on top of a cache adapter.

Responsibilities:
    - canonical cache keys from a base key, request params and principal
    - the four access modes (skip, bust, refresh, default)
    - a FastAPI handler factory that wires modes to query strings
    - bulk invalidation by base key or predicate

Example:
    service = CacheService(MemoryCacheAdapter(), default_ttl=300)

    @router.get("/search")
    async def search(request: Request, cache: CacheServiceDep) -> JSONResponse:
        handler = cache.cache_handler("icons:search", fetch_page, ttl=300)
        return await handler(request)

Clients control the mode with ``?cacheMode=skip|bust|refresh|default``;
responses carry ``fromCache`` so callers can tell hits from fresh reads.
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from enum import Enum
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from catalog_service.infra.cache.adapters.base import CacheAdapter, RehydrationContext
from catalog_service.infra.cache.exceptions import CacheConfigurationError
from catalog_service.infra.logging import get_lazy_logger

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)

DEFAULT_TTL = 3600
CACHE_MODE_PARAM = "cacheMode"
# Keys per adapter.delete() call when clearing by predicate or clearing all
DELETE_BATCH_SIZE = 500

FetchFn = Callable[[], Awaitable[Any]]
RequestFetchFn = Callable[[Request], Awaitable[Any]]


class CacheMode(str, Enum):
    """How a request interacts with the cache."""

    SKIP = "skip"  # fetch only, cache untouched
    BUST = "bust"  # fetch, then drop the cached entry
    REFRESH = "refresh"  # fetch, then replace the cached entry
    DEFAULT = "default"  # read-through

    @classmethod
    def parse(cls, value: Any) -> CacheMode:
        """Parse a mode name case-insensitively; unknown values mean DEFAULT."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.DEFAULT


class CacheService:
    """Cache keys, access modes and invalidation over one adapter."""

    def __init__(
        self,
        adapter: CacheAdapter,
        *,
        default_ttl: float = DEFAULT_TTL,
        delete_batch_size: int = DELETE_BATCH_SIZE,
    ) -> None:
        """Initialize the service.

        Raises:
            CacheConfigurationError: ``adapter`` is missing or has no
                callable ``get``.
        """
        if adapter is None or not callable(getattr(adapter, "get", None)):
            raise CacheConfigurationError(
                "Cache adapter must provide an async get() method",
                details={"adapter": type(adapter).__name__},
            )
        self.adapter = adapter
        self.default_ttl = default_ttl
        self.delete_batch_size = max(1, delete_batch_size)

    # ──────────────────────────────────────────────────────────────
    # Keys
    # ──────────────────────────────────────────────────────────────

    @staticmethod
    def get_cache_key(
        base_key: str,
        params: Mapping[str, Any] | None = None,
        principal_id: Any = None,
    ) -> str:
        """Build a deterministic key for ``base_key`` and ``params``.

        Params are sorted by name, so their order never matters; non-string
        values are JSON-encoded with sorted keys for the same reason. The
        hashed payload is a JSON array of base key, param pairs and principal,
        so no param name or value can stand in for another user's principal.

        Returns:
            ``"{base_key}:{sha256 hex}"``
        """
        pairs = [[name, _canonical_value(value)] for name, value in sorted((params or {}).items())]
        principal = None if principal_id is None or principal_id == "" else str(principal_id)
        raw = json.dumps([base_key, pairs, principal], separators=(",", ":"), ensure_ascii=False)
        digest = hashlib.sha256(raw.encode("utf-8")).hexdigest()
        key = f"{base_key}:{digest}"
        lazy_logger.debug(lambda: f"cache.key {raw} -> {key}")
        return key

    # ──────────────────────────────────────────────────────────────
    # Access modes
    # ──────────────────────────────────────────────────────────────

    async def resolve(
        self,
        base_key: str,
        fetch_fn: FetchFn,
        *,
        params: Mapping[str, Any] | None = None,
        principal_id: Any = None,
        mode: CacheMode | str = CacheMode.DEFAULT,
        ttl: float | None = None,
        context: RehydrationContext | None = None,
    ) -> dict[str, Any]:
        """Run ``fetch_fn`` through the cache according to ``mode``.

        The fetch runs before any write to the adapter, so a failing fetch
        propagates unchanged and leaves the cache as it was.

        Returns:
            The result with ``fromCache`` merged in (dicts) or wrapped as
            ``{"data": ..., "fromCache": ...}`` (anything else).
        """
        mode = CacheMode.parse(mode)
        key = self.get_cache_key(base_key, params, principal_id)

        if mode is CacheMode.SKIP:
            return self.format_result(await fetch_fn(), from_cache=False)

        if mode is CacheMode.BUST:
            result = await fetch_fn()
            await self.adapter.delete(key)
            logger.info("Cache entry busted", extra={"base_key": base_key, "key": key})
            return self.format_result(result, from_cache=False)

        if mode is CacheMode.REFRESH:
            result = await fetch_fn()
            await self.adapter.delete(key)
            await self.adapter.set(key, result, self._ttl(ttl))
            logger.info("Cache entry refreshed", extra={"base_key": base_key, "key": key})
            return self.format_result(result, from_cache=False)

        cached = await self.adapter.get(key, context)
        if cached is not None:
            return self.format_result(cached, from_cache=True)

        result = await fetch_fn()
        await self.adapter.set(key, result, self._ttl(ttl))
        return self.format_result(result, from_cache=False)

    async def get_or_fetch(
        self,
        key: str,
        fetch_fn: FetchFn,
        *,
        ttl: float | None = None,
        context: RehydrationContext | None = None,
    ) -> Any:
        """Read-through on an explicit key, returning the bare value.

        Example:
            key = CacheService.get_cache_key("icons:by-id", {"id": icon_id})
            icon = await cache.get_or_fetch(
                key, load_icon, context=RehydrationContext(repo, IconEntity)
            )
        """
        cached = await self.adapter.get(key, context)
        if cached is not None:
            return cached
        value = await fetch_fn()
        if value is not None:
            await self.adapter.set(key, value, self._ttl(ttl))
        return value

    @staticmethod
    def format_result(result: Any, *, from_cache: bool) -> dict[str, Any]:
        if isinstance(result, dict):
            return {**result, "fromCache": from_cache}
        return {"data": result, "fromCache": from_cache}

    # ──────────────────────────────────────────────────────────────
    # HTTP integration
    # ──────────────────────────────────────────────────────────────

    def cache_handler(
        self,
        base_key: str,
        fetch_fn: RequestFetchFn,
        ttl: float | None = None,
    ) -> Callable[[Request], Awaitable[JSONResponse]]:
        """Build a request handler that serves ``fetch_fn`` through the cache.

        The handler reads the mode from ``?cacheMode=``, the principal from
        ``request.state.user.id`` and keys on path plus query params. Errors
        raised by ``fetch_fn`` reach the application's exception handlers.
        """

        async def handler(request: Request) -> JSONResponse:
            result = await self.resolve(
                base_key,
                lambda: fetch_fn(request),
                params=request_params(request),
                principal_id=request_principal_id(request),
                mode=CacheMode.parse(request.query_params.get(CACHE_MODE_PARAM)),
                ttl=ttl,
            )
            return JSONResponse(content=result, status_code=200)

        return handler

    # ──────────────────────────────────────────────────────────────
    # Invalidation
    # ──────────────────────────────────────────────────────────────

    async def clear_cache(
        self,
        *,
        base_key: str | None = None,
        matcher: Callable[[str], bool] | None = None,
    ) -> int:
        """Delete cached entries and return how many were removed.

        Args:
            base_key: Remove every key derived from this base key.
            matcher: Predicate over keys; takes precedence over base_key.

        With neither argument, every key is removed.
        """
        if matcher is not None:
            matching = [key for key in await self.adapter.keys() if matcher(key)]
            count = await self._delete_in_batches(matching)
        elif base_key is not None:
            count = await self.adapter.invalidate_prefix(f"{base_key}:")
        else:
            count = await self._delete_in_batches(await self.adapter.keys())

        logger.info(
            "Cache cleared",
            extra={
                "base_key": base_key,
                "matcher": matcher is not None,
                "deleted": count,
            },
        )
        return count

    async def close(self) -> None:
        await self.adapter.close()

    async def _delete_in_batches(self, keys: list[str]) -> int:
        size = self.delete_batch_size
        for start in range(0, len(keys), size):
            await self.adapter.delete(keys[start : start + size])
        return len(keys)

    def _ttl(self, ttl: float | None) -> float:
        return self.default_ttl if ttl is None else ttl


def _canonical_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True, default=str)


def request_params(request: Request) -> dict[str, Any]:
    """Path params plus query params (minus cacheMode); repeats become lists."""
    params: dict[str, Any] = dict(request.path_params)
    for name in request.query_params:
        if name == CACHE_MODE_PARAM or name in params:
            continue
        values = request.query_params.getlist(name)
        params[name] = values if len(values) > 1 else values[0]
    return params


def request_principal_id(request: Request) -> Any:
    user = getattr(request.state, "user", None)
    return getattr(user, "id", None)


__all__ = [
    "CACHE_MODE_PARAM",
    "DEFAULT_TTL",
    "DELETE_BATCH_SIZE",
    "CacheMode",
    "CacheService",
    "request_params",
    "request_principal_id",
]
