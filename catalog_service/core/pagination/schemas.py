"""Pagination response schemas for cursor-based pagination.

Serialized in camelCase:

    {
        "results": [...],
        "pageInfo": {
            "hasNextPage": true,
            "hasPreviousPage": false,
            "startCursor": "eyJ...",
            "endCursor": "eyJ...",
            "totalCount": 125
        }
    }

``totalCount`` only appears when it was requested.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, SerializerFunctionWrapHandler, model_serializer

from catalog_service.core.schemas.base import CustomBase


class PageInfo(CustomBase):
    """Pagination metadata.

    Attributes:
        has_next_page: Whether more items exist after this page
        has_previous_page: Whether the request was made with a cursor
        start_cursor: Cursor of the first item in this page
        end_cursor: Cursor of the last item in this page
        total_count: Total matching items (only when requested)
    """

    has_next_page: bool = Field(description="Whether more items exist")
    has_previous_page: bool = Field(description="Whether previous items exist")
    start_cursor: str | None = Field(default=None, description="Cursor of the first item")
    end_cursor: str | None = Field(default=None, description="Cursor of the last item")
    total_count: int | None = Field(default=None, description="Total count (optional)")

    @model_serializer(mode="wrap")
    def _omit_missing_total(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        if self.total_count is None:
            data.pop("totalCount", None)
            data.pop("total_count", None)
        return data


class Page(CustomBase):
    """One page of keyset-paginated results.

    Usage:
        page = await repo.cursor_paginate(session, limit=20)
        for icon in page.results:
            ...
        if page.page_info.has_next_page:
            next_page = await repo.cursor_paginate(
                session, cursor=page.page_info.end_cursor
            )
    """

    results: list[Any] = Field(default_factory=list, description="Entities in this page")
    page_info: PageInfo = Field(description="Pagination metadata")


__all__ = ["Page", "PageInfo"]
