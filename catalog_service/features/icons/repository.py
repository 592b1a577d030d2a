"""Repository for the icon catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, select

from catalog_service.core.database.repository import BaseRepository
from catalog_service.core.pagination import CursorPaginationMixin
from catalog_service.features.icons.entities import IconEntity
from catalog_service.features.icons.models import Icon, IconSet, icon_tags

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

PRICE_FREE = "free"
PRICE_PREMIUM = "premium"
PRICE_ALL = "all"


class IconRepository(CursorPaginationMixin, BaseRepository[Icon]):
    """Repository for Icon model.

    Inherits from BaseRepository:
        - get(session, id) -> Icon | None
        - get_by(session, attr, value) -> Icon | None
        - list(session, limit, offset) -> Sequence[Icon]
        - create(session, instance) -> Icon

    Inherits from CursorPaginationMixin:
        - cursor_paginate(session, filters=..., cursor=..., ...) -> Page

    Search facets understood by ``_apply_filters``:
        - price: "free" | "premium" | "all"
        - tagIds: icons carrying any of the tags
        - familyId: icons whose set belongs to the family
        - searchTerm: case-insensitive substring of the name
        - iconIds: restrict to these ids (unordered)
        - iconIdsOrder: ranked ids for relevance sort
        - any other camelCase column name (setId, styleId, userId, isActive ...)
    """

    ranking_filter_key = "iconIdsOrder"

    def __init__(self) -> None:
        super().__init__(Icon, entity_class=IconEntity)

    async def find_by_unique_id(self, session: AsyncSession, unique_id: str) -> Icon | None:
        return await self.get_by(session, Icon.unique_id, unique_id)

    async def find_by_set_id(self, session: AsyncSession, set_id: int) -> Sequence[Icon]:
        """Non-deleted icons of a set, oldest first."""
        stmt = (
            self.query()
            .where(Icon.set_id == set_id, Icon.is_deleted.is_(False))
            .order_by(Icon.id)
        )
        result = await session.execute(stmt)
        icons = result.scalars().all()

        self._lazy.debug(lambda: f"db.find_by_set_id({set_id}) -> {len(icons)} icons")
        return icons

    async def find_all_active(self, session: AsyncSession) -> Sequence[Icon]:
        """Published icons: active and not deleted."""
        stmt = (
            self.query()
            .where(Icon.is_active.is_(True), Icon.is_deleted.is_(False))
            .order_by(Icon.id)
        )
        result = await session.execute(stmt)
        icons = result.scalars().all()

        self._lazy.debug(lambda: f"db.find_all_active() -> {len(icons)} icons")
        return icons

    def _apply_filters(self, statement: Select[Any], filters: Mapping[str, Any]) -> Select[Any]:
        remaining: dict[str, Any] = {}
        for key, value in filters.items():
            if value is None:
                continue
            if key == "price":
                statement = _apply_price(statement, value)
            elif key == "tagIds":
                if value:
                    tagged = select(icon_tags.c.icon_id).where(icon_tags.c.tag_id.in_(list(value)))
                    statement = statement.where(Icon.id.in_(tagged))
            elif key == "familyId":
                family_sets = select(IconSet.id).where(IconSet.family_id == value)
                statement = statement.where(Icon.set_id.in_(family_sets))
            elif key == "searchTerm":
                if value:
                    statement = statement.where(Icon.name.ilike(f"%{value}%"))
            elif key == "iconIds":
                if value:
                    statement = statement.where(Icon.id.in_(list(value)))
            else:
                remaining[key] = value
        return super()._apply_filters(statement, remaining)


def _apply_price(statement: Select[Any], price: str) -> Select[Any]:
    normalized = str(price).lower()
    if normalized == PRICE_FREE:
        return statement.where(Icon.price == 0)
    if normalized == PRICE_PREMIUM:
        return statement.where(Icon.price > 0)
    # "all" and unrecognised values leave price unconstrained
    return statement


def get_icon_repository() -> IconRepository:
    """Get IconRepository instance.

    Usage in FastAPI routes:
        @router.get("/{icon_id}")
        async def get_icon(
            icon_id: int,
            repo: IconRepository = Depends(get_icon_repository),
        ):
            ...
    """
    return IconRepository()


__all__ = [
    "PRICE_ALL",
    "PRICE_FREE",
    "PRICE_PREMIUM",
    "IconRepository",
    "get_icon_repository",
]
