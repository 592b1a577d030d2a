"""API router for the icon catalog.

Endpoints:
    GET    /icons/search        - Faceted keyset search (cached, ?cacheMode=)
    GET    /icons/{icon_id}     - Single icon (read-through cached)
    DELETE /icons/cache         - Invalidate cached icon data

Example Usage:
    # Newest free icons
    GET /icons/search?price=free&limit=20

    # Next page
    GET /icons/search?price=free&limit=20&cursor=eyJjcmVhdGVkQXQiOi...

    # Search-engine ranking
    GET /icons/search?sort=relevance&iconIds=42&iconIds=7&iconIds=19

    # Force a fresh read and re-cache it
    GET /icons/search?price=free&cacheMode=refresh
"""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.core.dependencies import CacheServiceDep, get_db_session
from catalog_service.core.settings import get_pagination_settings
from catalog_service.features.icons.entities import IconEntity
from catalog_service.features.icons.schemas import (
    CacheClearResponse,
    IconPageResponse,
    IconSearchParams,
    IconSort,
    PriceFilter,
)
from catalog_service.features.icons.service import ICON_SEARCH_CACHE_KEY, IconService

router = APIRouter(prefix="/icons", tags=["icons"])
logger = logging.getLogger(__name__)

pagination_settings = get_pagination_settings()


# ──────────────────────────────────────────────────────────────
# Search
# ──────────────────────────────────────────────────────────────


@router.get(
    "/search",
    response_model=IconPageResponse,
    summary="Search icons",
    description="Keyset-paginated icon search with price, tag, family and text facets.",
)
async def search_icons(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    cache: CacheServiceDep,
    price: Annotated[PriceFilter, Query()] = "all",
    tag_ids: Annotated[list[int] | None, Query(alias="tagIds")] = None,
    style_id: Annotated[int | None, Query(alias="styleId")] = None,
    user_id: Annotated[int | None, Query(alias="userId")] = None,
    set_id: Annotated[int | None, Query(alias="setId")] = None,
    family_id: Annotated[int | None, Query(alias="familyId")] = None,
    search_term: Annotated[str | None, Query(alias="searchTerm", max_length=200)] = None,
    icon_ids: Annotated[list[int] | None, Query(alias="iconIds")] = None,
    cursor: Annotated[str | None, Query()] = None,
    limit: Annotated[int, Query(ge=1)] = pagination_settings.default_limit,
    sort: Annotated[IconSort, Query()] = "newest",
    include_total_count: Annotated[bool, Query(alias="includeTotalCount")] = False,
    cache_mode: Annotated[  # noqa: ARG001 - read by the cache handler
        str | None,
        Query(alias="cacheMode", description="skip, bust, refresh or default"),
    ] = None,
) -> JSONResponse:
    """Search icons, serving repeated queries from cache.

    Limits above the maximum page size are clamped rather than rejected.
    """
    params = IconSearchParams(
        price=price,
        tag_ids=tag_ids or [],
        style_id=style_id,
        user_id=user_id,
        set_id=set_id,
        family_id=family_id,
        search_term=search_term,
        icon_ids=icon_ids,
        cursor=cursor,
        limit=min(limit, pagination_settings.max_limit),
        sort=sort,
        include_total_count=include_total_count,
    )
    service = IconService(session, cache)

    async def fetch_page(_: Request) -> dict[str, Any]:
        page = await service.search_icons(params)
        return page.model_dump(mode="json", by_alias=True)

    handler = cache.cache_handler(ICON_SEARCH_CACHE_KEY, fetch_page)
    return await handler(request)


# ──────────────────────────────────────────────────────────────
# Cache administration
# ──────────────────────────────────────────────────────────────


@router.delete(
    "/cache",
    response_model=CacheClearResponse,
    summary="Clear icon cache",
    description="Remove cached icon searches and lookups, optionally under one base key.",
)
async def clear_icon_cache(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    cache: CacheServiceDep,
    base_key: Annotated[str | None, Query(alias="baseKey")] = None,
) -> CacheClearResponse:
    cleared = await IconService(session, cache).clear_icon_cache(base_key)
    return CacheClearResponse(cleared=cleared)


# ──────────────────────────────────────────────────────────────
# Lookup
# ──────────────────────────────────────────────────────────────


@router.get(
    "/{icon_id}",
    response_model=IconEntity,
    summary="Get an icon",
    description="Fetch an icon by id.",
)
async def get_icon(
    icon_id: int,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    cache: CacheServiceDep,
) -> IconEntity:
    return await IconService(session, cache).get_icon(icon_id)
