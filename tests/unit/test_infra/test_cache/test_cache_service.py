"""Tests for the read-through CacheService.

Tests cover:
- deterministic cache keys (param order, value encoding, principal scoping)
- the skip/bust/refresh/default mode matrix
- get_or_fetch with rehydration
- bulk invalidation by base key and predicate
- the FastAPI handler factory
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from catalog_service.infra.cache import (
    CacheConfigurationError,
    CacheMode,
    CacheService,
    MemoryCacheAdapter,
    RehydrationContext,
)


class Counter:
    """Fetch function returning successive ``{"v": n}`` payloads."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    async def __call__(self, *_args):
        value = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        return value


@pytest.fixture
def adapter() -> MemoryCacheAdapter:
    return MemoryCacheAdapter()


@pytest.fixture
def service(adapter) -> CacheService:
    return CacheService(adapter, default_ttl=60)


# ──────────────────────────────────────────────────────────────
# Keys
# ──────────────────────────────────────────────────────────────


class TestCacheKeys:
    """get_cache_key() is a pure function of its inputs."""

    def test_param_order_does_not_matter(self):
        a = CacheService.get_cache_key("icons", {"price": "free", "limit": 20})
        b = CacheService.get_cache_key("icons", {"limit": 20, "price": "free"})
        assert a == b

    def test_key_is_prefixed_hash(self):
        key = CacheService.get_cache_key("icons:search", {"price": "free"})
        prefix, digest = key.rsplit(":", 1)
        assert prefix == "icons:search"
        assert len(digest) == 64

    def test_different_params_differ(self):
        assert CacheService.get_cache_key("icons", {"price": "free"}) != CacheService.get_cache_key(
            "icons", {"price": "premium"}
        )

    def test_nested_values_are_canonical(self):
        a = CacheService.get_cache_key("icons", {"f": {"b": 1, "a": [1, 2]}})
        b = CacheService.get_cache_key("icons", {"f": {"a": [1, 2], "b": 1}})
        assert a == b

    def test_string_and_number_share_a_key(self):
        """Strings are used verbatim, so "20" and 20 share a key."""
        assert CacheService.get_cache_key("icons", {"limit": "20"}) == CacheService.get_cache_key(
            "icons", {"limit": 20}
        )

    def test_principal_scopes_key(self):
        anonymous = CacheService.get_cache_key("icons", {"price": "free"})
        user = CacheService.get_cache_key("icons", {"price": "free"}, principal_id=7)
        other = CacheService.get_cache_key("icons", {"price": "free"}, principal_id=8)
        assert len({anonymous, user, other}) == 3
        assert CacheService.get_cache_key("icons", {}, principal_id="") == CacheService.get_cache_key(
            "icons"
        )

    def test_user_id_param_is_not_a_principal(self):
        """A query param named userId cannot reach another principal's key."""
        from_param = CacheService.get_cache_key("icons:search", {"price": "free", "userId": "7"})
        scoped = CacheService.get_cache_key("icons:search", {"price": "free"}, principal_id=7)
        assert from_param != scoped

    def test_separators_inside_values_do_not_collide(self):
        packed = CacheService.get_cache_key("icons", {"searchTerm": "x|price:free"})
        split = CacheService.get_cache_key("icons", {"searchTerm": "x", "price": "free"})
        assert packed != split
        joined = CacheService.get_cache_key("icons", {"a": "1|b:2"})
        assert CacheService.get_cache_key("icons", {"a": "1", "b": "2"}) != joined


# ──────────────────────────────────────────────────────────────
# Modes
# ──────────────────────────────────────────────────────────────


class TestCacheModes:
    """resolve() mode matrix."""

    def test_mode_parsing(self):
        assert CacheMode.parse("BUST") is CacheMode.BUST
        assert CacheMode.parse(" refresh ") is CacheMode.REFRESH
        assert CacheMode.parse("bogus") is CacheMode.DEFAULT
        assert CacheMode.parse(None) is CacheMode.DEFAULT
        assert CacheMode.parse(CacheMode.SKIP) is CacheMode.SKIP

    @pytest.mark.asyncio
    async def test_default_reads_through(self, service):
        fetch = Counter([{"v": 1}, {"v": 2}])

        first = await service.resolve("icons", fetch, params={"q": "a"})
        second = await service.resolve("icons", fetch, params={"q": "a"})

        assert first == {"v": 1, "fromCache": False}
        assert second == {"v": 1, "fromCache": True}
        assert fetch.calls == 1

    @pytest.mark.asyncio
    async def test_skip_never_touches_cache(self, service, adapter):
        fetch = Counter([{"v": 1}])

        result = await service.resolve("icons", fetch, mode="skip")

        assert result == {"v": 1, "fromCache": False}
        assert len(adapter) == 0

    @pytest.mark.asyncio
    async def test_bust_fetches_and_drops_entry(self, service, adapter):
        fetch = Counter([{"v": 1}, {"v": 2}, {"v": 3}])
        await service.resolve("icons", fetch)

        busted = await service.resolve("icons", fetch, mode=CacheMode.BUST)
        after = await service.resolve("icons", fetch)

        assert busted == {"v": 2, "fromCache": False}
        assert after == {"v": 3, "fromCache": False}

    @pytest.mark.asyncio
    async def test_refresh_replaces_entry(self, service):
        fetch = Counter([{"v": 1}, {"v": 2}])
        await service.resolve("icons", fetch)

        refreshed = await service.resolve("icons", fetch, mode="refresh")
        cached = await service.resolve("icons", fetch)

        assert refreshed == {"v": 2, "fromCache": False}
        assert cached == {"v": 2, "fromCache": True}
        assert fetch.calls == 2

    @pytest.mark.asyncio
    async def test_falsy_values_are_cache_hits(self, service):
        """Only a missing entry is a miss; ``{"v": 0}`` and ``[]`` are hits."""
        fetch = Counter([{"v": 0}])
        await service.resolve("icons", fetch)
        assert await service.resolve("icons", fetch) == {"v": 0, "fromCache": True}

        empty = Counter([[]])
        await service.resolve("tags", empty)
        assert await service.resolve("tags", empty) == {"data": [], "fromCache": True}
        assert empty.calls == 1

    @pytest.mark.asyncio
    async def test_non_dict_results_are_wrapped(self, service):
        result = await service.resolve("icons", Counter([[1, 2]]))
        assert result == {"data": [1, 2], "fromCache": False}

    @pytest.mark.asyncio
    async def test_failed_fetch_leaves_cache_untouched(self, service, adapter):
        await service.resolve("icons", Counter([{"v": 1}]))

        async def boom():
            raise RuntimeError("db down")

        for mode in ("bust", "refresh"):
            with pytest.raises(RuntimeError):
                await service.resolve("icons", boom, mode=mode)

        assert await service.resolve("icons", boom) == {"v": 1, "fromCache": True}

    @pytest.mark.asyncio
    async def test_explicit_ttl_is_passed_to_adapter(self):
        adapter = AsyncMock()
        adapter.get = AsyncMock(return_value=None)
        service = CacheService(adapter, default_ttl=60)

        await service.resolve("icons", Counter([{"v": 1}]), ttl=5)
        await service.resolve("icons", Counter([{"v": 1}]), mode="refresh")

        assert adapter.set.await_args_list[0].args[2] == 5
        assert adapter.set.await_args_list[1].args[2] == 60

    @pytest.mark.asyncio
    async def test_user_id_param_does_not_read_principal_entry(self, service):
        private = Counter([{"owner": 7}])
        await service.resolve("icons:search", private, params={"price": "free"}, principal_id=7)

        public = Counter([{"owner": None}])
        result = await service.resolve(
            "icons:search", public, params={"price": "free", "userId": 7}
        )

        assert result == {"owner": None, "fromCache": False}
        assert public.calls == 1


# ──────────────────────────────────────────────────────────────
# get_or_fetch
# ──────────────────────────────────────────────────────────────


class TestGetOrFetch:
    """Bare-value read-through."""

    @pytest.mark.asyncio
    async def test_returns_bare_values(self, service):
        fetch = Counter([{"id": 1}])
        assert await service.get_or_fetch("k", fetch) == {"id": 1}
        assert await service.get_or_fetch("k", fetch) == {"id": 1}
        assert fetch.calls == 1

    @pytest.mark.asyncio
    async def test_none_is_not_cached(self, service, adapter):
        fetch = Counter([None])
        assert await service.get_or_fetch("k", fetch) is None
        assert await service.get_or_fetch("k", fetch) is None
        assert fetch.calls == 2
        assert len(adapter) == 0

    @pytest.mark.asyncio
    async def test_rehydrates_cached_dicts(self, service, adapter):
        class Repo:
            def wrap_entity(self, record, entity_class=None, options=None):
                return ("entity", record["id"])

        await adapter.set("k", {"id": 3})

        value = await service.get_or_fetch(
            "k", Counter([None]), context=RehydrationContext(Repo())
        )

        assert value == ("entity", 3)


# ──────────────────────────────────────────────────────────────
# Invalidation
# ──────────────────────────────────────────────────────────────


class TestClearCache:
    """Bulk invalidation."""

    @pytest.mark.asyncio
    async def test_clear_by_base_key(self, service, adapter):
        await adapter.set("icons:aaa", 1)
        await adapter.set("icons:bbb", 2)
        await adapter.set("posts:ccc", 3)

        assert await service.clear_cache(base_key="icons") == 2
        assert await adapter.keys() == ["posts:ccc"]

    @pytest.mark.asyncio
    async def test_base_key_does_not_match_longer_names(self, service, adapter):
        await adapter.set("icons:aaa", 1)
        await adapter.set("iconsets:bbb", 2)

        assert await service.clear_cache(base_key="icons") == 1
        assert await adapter.keys() == ["iconsets:bbb"]

    @pytest.mark.asyncio
    async def test_clear_by_matcher(self, service, adapter):
        await adapter.set("icons:search:1", 1)
        await adapter.set("icons:by-id:1", 2)

        cleared = await service.clear_cache(matcher=lambda key: "search" in key)

        assert cleared == 1
        assert await adapter.keys() == ["icons:by-id:1"]

    @pytest.mark.asyncio
    async def test_clear_everything(self, service, adapter):
        await adapter.set("a:1", 1)
        await adapter.set("b:1", 2)
        assert await service.clear_cache() == 2
        assert len(adapter) == 0

    @pytest.mark.asyncio
    async def test_clear_with_nothing_cached(self, service):
        assert await service.clear_cache(base_key="icons") == 0

    @pytest.mark.asyncio
    async def test_clear_everything_deletes_in_batches(self):
        adapter = AsyncMock()
        adapter.keys = AsyncMock(return_value=[f"icons:{n}" for n in range(5)])
        service = CacheService(adapter, delete_batch_size=2)

        assert await service.clear_cache() == 5

        batches = [call.args[0] for call in adapter.delete.await_args_list]
        assert batches == [["icons:0", "icons:1"], ["icons:2", "icons:3"], ["icons:4"]]

    @pytest.mark.asyncio
    async def test_clear_by_matcher_deletes_in_batches(self):
        adapter = AsyncMock()
        keys = [f"icons:search:{n}" for n in range(3)] + ["icons:by-id:1"]
        adapter.keys = AsyncMock(return_value=keys)
        service = CacheService(adapter, delete_batch_size=2)

        assert await service.clear_cache(matcher=lambda key: "search" in key) == 3

        assert adapter.delete.await_count == 2
        assert adapter.delete.await_args_list[1].args[0] == ["icons:search:2"]

    @pytest.mark.asyncio
    async def test_clear_with_no_keys_skips_delete(self):
        adapter = AsyncMock()
        adapter.keys = AsyncMock(return_value=[])

        assert await CacheService(adapter).clear_cache() == 0
        adapter.delete.assert_not_awaited()


class TestConstruction:
    """Adapter validation and shutdown."""

    def test_adapter_without_get_is_rejected(self):
        with pytest.raises(CacheConfigurationError):
            CacheService(object())  # type: ignore[arg-type]
        with pytest.raises(CacheConfigurationError):
            CacheService(None)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_close_closes_adapter(self):
        adapter = AsyncMock()
        await CacheService(adapter).close()
        adapter.close.assert_awaited_once()


# ──────────────────────────────────────────────────────────────
# HTTP handler
# ──────────────────────────────────────────────────────────────


class TestCacheHandler:
    """cache_handler() wires query-string modes to resolve()."""

    @pytest.fixture
    def handler_app(self, service):
        app = FastAPI()
        fetch = Counter([{"v": 1}, {"v": 2}, {"v": 3}])

        async def fetch_fn(request: Request):
            return await fetch(request)

        handler = service.cache_handler("icons:search", fetch_fn, ttl=30)

        @app.get("/search")
        async def search(request: Request):
            return await handler(request)

        app.state.fetch = fetch
        return app

    @pytest.mark.asyncio
    async def test_modes_from_query_string(self, handler_app):
        async with AsyncClient(
            transport=ASGITransport(app=handler_app), base_url="http://test"
        ) as client:
            first = (await client.get("/search", params={"q": "x"})).json()
            hit = (await client.get("/search", params={"q": "x"})).json()
            refreshed = (await client.get("/search", params={"q": "x", "cacheMode": "refresh"})).json()
            after = (await client.get("/search", params={"q": "x"})).json()

        assert first == {"v": 1, "fromCache": False}
        assert hit == {"v": 1, "fromCache": True}
        assert refreshed == {"v": 2, "fromCache": False}
        assert after == {"v": 2, "fromCache": True}

    @pytest.mark.asyncio
    async def test_query_params_partition_the_cache(self, handler_app):
        async with AsyncClient(
            transport=ASGITransport(app=handler_app), base_url="http://test"
        ) as client:
            a = (await client.get("/search", params={"q": "a"})).json()
            b = (await client.get("/search", params={"q": "b"})).json()

        assert a["fromCache"] is False
        assert b["fromCache"] is False
        assert handler_app.state.fetch.calls == 2
