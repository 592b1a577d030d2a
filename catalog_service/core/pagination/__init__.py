"""Cursor-based (keyset) pagination.

- CursorCodec: opaque, URL-safe cursor tokens (fail-open)
- Page / PageInfo: camelCase response models
- CursorPaginationMixin: ``cursor_paginate`` for repositories
"""

from catalog_service.core.pagination.cursor import MAX_CURSOR_LENGTH, CursorCodec
from catalog_service.core.pagination.keyset import (
    DEFAULT_RANKING_FILTER_KEY,
    MAX_PAGE_SIZE,
    RELEVANCE_SORT,
    CursorPaginationMixin,
    QueryCapable,
)
from catalog_service.core.pagination.schemas import Page, PageInfo

__all__ = [
    "DEFAULT_RANKING_FILTER_KEY",
    "MAX_CURSOR_LENGTH",
    "MAX_PAGE_SIZE",
    "RELEVANCE_SORT",
    "CursorCodec",
    "CursorPaginationMixin",
    "Page",
    "PageInfo",
    "QueryCapable",
]
