"""Tests for BaseRepository and the icon repository lookups."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from catalog_service.core.database import BaseRepository, NotFoundError
from catalog_service.features.icons.entities import IconEntity
from catalog_service.features.icons.models import Icon, IconSet
from catalog_service.features.icons.repository import IconRepository, get_icon_repository


class TestCrud:
    """Basic lookups with explicit sessions."""

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, db_session):
        repo = IconRepository()
        icon = await repo.create(db_session, Icon(name="home", unique_id="home"))
        assert icon.id is not None
        assert icon.created_at is not None
        assert icon.popularity == 0
        assert icon.is_active is True

    @pytest.mark.asyncio
    async def test_get_and_get_or_raise(self, db_session, make_icons):
        repo = IconRepository()
        [icon] = await make_icons(1)

        assert (await repo.get(db_session, icon.id)).unique_id == icon.unique_id
        assert await repo.get(db_session, 9999) is None

        with pytest.raises(NotFoundError) as exc_info:
            await repo.get_or_raise(db_session, 9999)
        assert exc_info.value.details == {"model": "Icon", "id": 9999}
        assert "Icon not found with id=9999" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_get_by(self, db_session, make_icons):
        repo = IconRepository()
        await make_icons(2)
        icon = await repo.get_by(db_session, Icon.unique_id, "icon-2")
        assert icon is not None and icon.name == "icon 2"

    @pytest.mark.asyncio
    async def test_list_and_count(self, db_session, make_icons):
        repo = IconRepository()
        icons = await make_icons(5)

        listed = await repo.list(db_session, limit=2, offset=1)

        assert [icon.id for icon in listed] == [icons[1].id, icons[2].id]
        assert await repo.count(db_session) == 5
        assert await repo.count(db_session, repo.query().where(Icon.id > icons[2].id)) == 2

    @pytest.mark.asyncio
    async def test_create_many(self, db_session):
        repo = IconRepository()
        created = await repo.create_many(
            db_session,
            [Icon(name="a", unique_id="a"), Icon(name="b", unique_id="b")],
        )
        assert all(icon.id is not None for icon in created)


class TestIconLookups:
    """Icon-specific finders."""

    @pytest.mark.asyncio
    async def test_find_by_unique_id(self, db_session, make_icons):
        await make_icons(1, unique_id="arrow-left", name="Arrow")
        icon = await IconRepository().find_by_unique_id(db_session, "arrow-left")
        assert icon.name == "Arrow"

    @pytest.mark.asyncio
    async def test_find_by_set_id_skips_deleted(self, db_session, make_icons):
        icon_set = IconSet(name="Feather")
        db_session.add(icon_set)
        await db_session.flush()
        kept = await make_icons(2, set_id=icon_set.id)
        await make_icons(1, set_id=icon_set.id, is_deleted=True)
        await make_icons(1)

        icons = await IconRepository().find_by_set_id(db_session, icon_set.id)

        assert [icon.id for icon in icons] == [icon.id for icon in kept]

    @pytest.mark.asyncio
    async def test_find_all_active(self, db_session, make_icons):
        active = await make_icons(2)
        await make_icons(1, is_active=False)
        await make_icons(1, is_deleted=True)

        icons = await get_icon_repository().find_all_active(db_session)

        assert [icon.id for icon in icons] == [icon.id for icon in active]


class TestWrapEntity:
    """wrap_entity() converts records and is idempotent."""

    @pytest.mark.asyncio
    async def test_wraps_orm_rows(self, db_session, make_icons):
        repo = IconRepository()
        [icon] = await make_icons(1)

        entity = repo.wrap_entity(icon)

        assert isinstance(entity, IconEntity)
        assert entity.unique_id == icon.unique_id
        assert entity.is_free is True

    def test_wraps_camel_case_mappings(self):
        repo = IconRepository()
        entity = repo.wrap_entity(
            {"id": 1, "name": "x", "uniqueId": "x", "createdAt": "2025-01-01T00:00:00Z"}
        )
        assert entity.unique_id == "x"

    def test_entities_pass_through(self):
        repo = IconRepository()
        entity = repo.wrap_entity({"id": 1, "name": "x", "uniqueId": "x", "createdAt": "2025-01-01T00:00:00Z"})
        assert repo.wrap_entity(entity) is entity
        assert repo.wrap_entity([entity, None]) == [entity, None]

    def test_none_and_missing_entity_class(self):
        plain = BaseRepository(Icon)
        record = {"id": 1}
        assert plain.wrap_entity(record) is record
        assert IconRepository().wrap_entity(None) is None

    def test_plain_classes_receive_options(self):
        class Wrapper:
            def __init__(self, record, *, tag=None):
                self.record = record
                self.tag = tag

        repo = BaseRepository(Icon, entity_class=Wrapper)
        wrapped = repo.wrap_entity(SimpleNamespace(id=1), options={"tag": "t"})

        assert isinstance(wrapped, Wrapper)
        assert wrapped.tag == "t"
