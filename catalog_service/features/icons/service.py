"""Service layer for the icon catalog."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from catalog_service.core.pagination import RELEVANCE_SORT
from catalog_service.features.icons.entities import IconEntity
from catalog_service.features.icons.repository import IconRepository, get_icon_repository
from catalog_service.infra.cache import CacheService, RehydrationContext
from catalog_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from catalog_service.core.pagination import Page
    from catalog_service.features.icons.schemas import IconSearchParams


# Standard logger for INFO/WARNING/ERROR
logger = logging.getLogger(__name__)
# Lazy logger for DEBUG (zero overhead when DEBUG disabled)
lazy_logger = get_lazy_logger(__name__)

ICONS_CACHE_KEY = "icons"
ICON_SEARCH_CACHE_KEY = f"{ICONS_CACHE_KEY}:search"
ICON_BY_ID_CACHE_KEY = f"{ICONS_CACHE_KEY}:by-id"


class IconService:
    """Service for icon catalog reads.

    Handles:
    - Faceted search with keyset pagination (newest, bestseller, relevance)
    - Read-through cached lookups by id
    - Icon cache invalidation
    """

    def __init__(
        self,
        session: AsyncSession,
        cache: CacheService | None = None,
        repo: IconRepository | None = None,
    ) -> None:
        """Initialize the icon service.

        Args:
            session: Database session for operations
            cache: Cache service; lookups bypass caching when omitted
            repo: Icon repository (optional, uses default if not provided)
        """
        self._session = session
        self._cache = cache
        self._repo = repo or get_icon_repository()

    async def search_icons(self, params: IconSearchParams) -> Page:
        """Search icons by facets, one keyset page at a time.

        Sort mapping:
            - relevance (with icon_ids): position in icon_ids, ascending
            - bestseller: popularity, descending
            - newest (default): created_at, descending
        """
        filters: dict[str, Any] = {
            "price": params.price,
            "tagIds": params.tag_ids or None,
            "styleId": params.style_id,
            "userId": params.user_id,
            "setId": params.set_id,
            "familyId": params.family_id,
            "searchTerm": params.search_term,
        }

        if params.sort == "relevance" and params.icon_ids:
            sort_by, sort_order = RELEVANCE_SORT, "asc"
            filters[self._repo.ranking_filter_key] = params.icon_ids
        else:
            if params.sort == "bestseller":
                sort_by, sort_order = "popularity", "desc"
            else:
                sort_by, sort_order = "createdAt", "desc"
            filters["iconIds"] = params.icon_ids or None

        page = await self._repo.cursor_paginate(
            self._session,
            filters=filters,
            cursor=params.cursor,
            limit=params.limit,
            sort_by=sort_by,
            sort_order=sort_order,
            include_total_count=params.include_total_count,
            entity_class=IconEntity,
        )

        lazy_logger.debug(
            lambda: f"service.search_icons(sort={params.sort}, limit={params.limit}) "
            f"-> {len(page.results)} icons, has_next={page.page_info.has_next_page}"
        )
        return page

    async def get_icon(self, icon_id: int) -> IconEntity:
        """Get an icon by id, read-through cached when a cache is configured.

        Raises:
            NotFoundError: If the icon does not exist
        """

        async def load() -> IconEntity:
            icon = await self._repo.get_or_raise(self._session, icon_id)
            return self._repo.wrap_entity(icon, IconEntity)

        if self._cache is None:
            return await load()

        key = CacheService.get_cache_key(ICON_BY_ID_CACHE_KEY, {"id": icon_id})
        entity = await self._cache.get_or_fetch(
            key,
            load,
            context=RehydrationContext(self._repo, IconEntity),
        )
        lazy_logger.debug(lambda: f"service.get_icon({icon_id}) -> {entity.unique_id}")
        return entity

    async def get_icon_by_unique_id(self, unique_id: str) -> IconEntity | None:
        icon = await self._repo.find_by_unique_id(self._session, unique_id)
        return self._repo.wrap_entity(icon, IconEntity)

    async def get_icons_by_set_id(self, set_id: int) -> list[IconEntity]:
        icons = await self._repo.find_by_set_id(self._session, set_id)
        return self._repo.wrap_entity(list(icons), IconEntity)

    async def get_all_active_icons(self) -> list[IconEntity]:
        icons = await self._repo.find_all_active(self._session)
        return self._repo.wrap_entity(list(icons), IconEntity)

    async def clear_icon_cache(self, base_key: str | None = None) -> int:
        """Drop cached icon data under ``base_key`` (all icon keys by default)."""
        if self._cache is None:
            return 0
        cleared = await self._cache.clear_cache(base_key=base_key or ICONS_CACHE_KEY)
        logger.info(
            "Icon cache cleared",
            extra={"base_key": base_key or ICONS_CACHE_KEY, "cleared": cleared},
        )
        return cleared


__all__ = [
    "ICONS_CACHE_KEY",
    "ICON_BY_ID_CACHE_KEY",
    "ICON_SEARCH_CACHE_KEY",
    "IconService",
]
