"""Pydantic schemas for the icons feature."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from catalog_service.core.pagination import PageInfo
from catalog_service.core.schemas import CustomBase
from catalog_service.features.icons.entities import IconEntity

PriceFilter = Literal["free", "premium", "all"]
IconSort = Literal["newest", "bestseller", "relevance"]


class IconSearchParams(CustomBase):
    """Search facets for the icon catalog.

    ``sort="relevance"`` keeps the order of ``icon_ids`` (e.g. a search engine
    hit list); without ids it behaves like ``"newest"``.
    """

    price: PriceFilter = Field(default="all", description="free, premium or all")
    tag_ids: list[int] = Field(default_factory=list, description="Icons with any of these tags")
    style_id: int | None = None
    user_id: int | None = None
    set_id: int | None = None
    family_id: int | None = None
    search_term: str | None = Field(default=None, max_length=200)
    icon_ids: list[int] | None = Field(
        default=None,
        description="Restrict to these ids; ranking order for relevance sort",
    )
    cursor: str | None = Field(default=None, description="endCursor of the previous page")
    limit: int = Field(default=20, ge=1)
    sort: IconSort = "newest"
    include_total_count: bool = False


class IconPageResponse(CustomBase):
    """A page of icons as served by the search endpoint."""

    results: list[IconEntity]
    page_info: PageInfo
    from_cache: bool = Field(description="Whether the page was served from cache")


class CacheClearResponse(CustomBase):
    """Result of a cache invalidation request."""

    cleared: int = Field(description="Number of cache entries removed")


__all__ = [
    "CacheClearResponse",
    "IconPageResponse",
    "IconSearchParams",
    "IconSort",
    "PriceFilter",
]
