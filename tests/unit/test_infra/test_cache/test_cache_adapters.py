"""Tests for the in-process cache adapter and rehydration."""

from __future__ import annotations

import pytest

from catalog_service.features.icons.entities import IconEntity
from catalog_service.features.icons.repository import IconRepository
from catalog_service.infra.cache import CacheAdapter, MemoryCacheAdapter, RehydrationContext


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def adapter(clock) -> MemoryCacheAdapter:
    return MemoryCacheAdapter(default_ttl=60, check_period=120.0, clock=clock)


ICON_RECORD = {
    "id": 1,
    "name": "home",
    "uniqueId": "home",
    "price": 0,
    "createdAt": "2025-01-01T00:00:00+00:00",
}


class TestMemoryAdapter:
    """Expiring in-process store."""

    @pytest.mark.asyncio
    async def test_set_get_returns_same_object(self, adapter):
        value = {"a": 1}
        await adapter.set("k", value)
        assert await adapter.get("k") is value

    @pytest.mark.asyncio
    async def test_missing_key(self, adapter):
        assert await adapter.get("nope") is None

    @pytest.mark.asyncio
    async def test_default_ttl_expiry(self, adapter, clock):
        await adapter.set("k", "v")
        clock.advance(59)
        assert await adapter.get("k") == "v"
        clock.advance(1)
        assert await adapter.get("k") is None
        assert len(adapter) == 0

    @pytest.mark.asyncio
    async def test_explicit_ttl(self, adapter, clock):
        await adapter.set("k", "v", ttl=5)
        clock.advance(5)
        assert await adapter.get("k") is None

    @pytest.mark.asyncio
    async def test_non_positive_ttl_never_expires(self, adapter, clock):
        await adapter.set("zero", "v", ttl=0)
        await adapter.set("negative", "v", ttl=-1)
        clock.advance(10**6)
        assert await adapter.get("zero") == "v"
        assert await adapter.get("negative") == "v"

    @pytest.mark.asyncio
    async def test_overwrite_resets_ttl(self, adapter, clock):
        await adapter.set("k", 1, ttl=10)
        clock.advance(8)
        await adapter.set("k", 2, ttl=10)
        clock.advance(8)
        assert await adapter.get("k") == 2

    @pytest.mark.asyncio
    async def test_periodic_sweep_drops_expired_entries(self, adapter, clock):
        await adapter.set("short", 1, ttl=1)
        await adapter.set("long", 2, ttl=1000)
        clock.advance(121)

        await adapter.set("new", 3)

        assert len(adapter) == 2
        assert sorted(await adapter.keys()) == ["long", "new"]

    @pytest.mark.asyncio
    async def test_keys_excludes_expired(self, adapter, clock):
        await adapter.set("a", 1, ttl=1)
        await adapter.set("b", 2)
        clock.advance(2)
        assert await adapter.keys() == ["b"]

    @pytest.mark.asyncio
    async def test_delete_single_and_many(self, adapter):
        for key in ("a", "b", "c"):
            await adapter.set(key, key)
        await adapter.delete("a")
        await adapter.delete(["b", "missing"])
        assert await adapter.keys() == ["c"]

    @pytest.mark.asyncio
    async def test_invalidate_prefix(self, adapter):
        await adapter.set("icons:1", 1)
        await adapter.set("icons:2", 2)
        await adapter.set("tags:1", 3)
        assert await adapter.invalidate_prefix("icons:") == 2
        assert await adapter.keys() == ["tags:1"]

    @pytest.mark.asyncio
    async def test_max_entries_bounds_size(self, clock):
        adapter = MemoryCacheAdapter(max_entries=2, clock=clock)
        for key in ("a", "b", "c"):
            await adapter.set(key, key)

        assert len(adapter) == 2
        assert await adapter.get("c") == "c"

    @pytest.mark.asyncio
    async def test_mixed_ttls_share_one_store(self, adapter, clock):
        """Per-entry TTLs: a short entry expires while a default one survives."""
        await adapter.set("short", 1, ttl=5)
        await adapter.set("default", 2)
        clock.advance(10)
        assert await adapter.get("short") is None
        assert await adapter.get("default") == 2

    @pytest.mark.asyncio
    async def test_close_clears_store(self, adapter):
        await adapter.set("k", 1)
        await adapter.close()
        assert len(adapter) == 0


class TestRehydration:
    """Cached plain data comes back as entities."""

    @pytest.mark.asyncio
    async def test_dict_becomes_entity(self, adapter):
        await adapter.set("icon:1", dict(ICON_RECORD))
        ctx = RehydrationContext(IconRepository(), IconEntity)

        entity = await adapter.get("icon:1", ctx)

        assert isinstance(entity, IconEntity)
        assert entity.unique_id == "home"

    @pytest.mark.asyncio
    async def test_list_of_dicts(self, adapter):
        await adapter.set("icons", [dict(ICON_RECORD), {**ICON_RECORD, "id": 2, "uniqueId": "b"}])

        entities = await adapter.get("icons", RehydrationContext(IconRepository()))

        assert [entity.id for entity in entities] == [1, 2]
        assert all(isinstance(entity, IconEntity) for entity in entities)

    @pytest.mark.asyncio
    async def test_rehydration_is_idempotent(self, adapter):
        """Entities already stored are returned unchanged."""
        entity = IconEntity.from_record(ICON_RECORD)
        await adapter.set("icon:1", entity)

        assert await adapter.get("icon:1", RehydrationContext(IconRepository())) is entity

    def test_scalars_pass_through(self):
        ctx = RehydrationContext(IconRepository())
        assert ctx.rehydrate(5) == 5
        assert ctx.rehydrate("x") == "x"
        assert ctx.rehydrate([1, "a"]) == [1, "a"]


class TestBaseAdapter:
    """The base class only defines the contract."""

    @pytest.mark.asyncio
    async def test_abstract_operations_raise(self):
        adapter = CacheAdapter()
        with pytest.raises(NotImplementedError):
            await adapter.get("k")
        with pytest.raises(NotImplementedError):
            await adapter.set("k", 1)
        with pytest.raises(NotImplementedError):
            await adapter.keys()
        assert await adapter.close() is None
