"""Icon catalog feature.

This module provides:
- ORM models for icons, icon sets and tags
- IconRepository with faceted keyset pagination
- IconService wiring searches and lookups through the cache service
- The /icons API router
"""

from __future__ import annotations

from .entities import IconEntity
from .models import Icon, IconSet, Tag
from .repository import IconRepository, get_icon_repository
from .router import router
from .service import IconService

__all__ = [
    "Icon",
    "IconEntity",
    "IconRepository",
    "IconService",
    "IconSet",
    "Tag",
    "get_icon_repository",
    "router",
]
