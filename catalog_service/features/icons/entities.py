"""Immutable icon entities returned by the icons repository."""

from __future__ import annotations

from datetime import datetime

from catalog_service.core.entities import BaseEntity


class IconEntity(BaseEntity):
    """Public view of an icon.

    Serialized in camelCase (``uniqueId``, ``setId``, ``createdAt`` ...), and
    accepts either casing when rehydrated from a cache backend.
    """

    id: int
    name: str
    unique_id: str
    price: float = 0.0
    width: int | None = None
    height: int | None = None
    popularity: int = 0
    set_id: int | None = None
    style_id: int | None = None
    team_id: int | None = None
    user_id: int | None = None
    license_id: int | None = None
    is_active: bool = True
    is_deleted: bool = False
    created_at: datetime
    updated_at: datetime | None = None

    @property
    def is_free(self) -> bool:
        return self.price == 0
