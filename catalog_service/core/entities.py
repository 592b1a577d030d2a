"""Immutable domain entities.

Entities are what repositories hand to services: frozen pydantic models built
from ORM rows, raw mappings, or JSON previously written to a cache backend.
Because they validate by field name *and* camelCase alias, the same class can
rehydrate a record read back from Redis (camelCase keys) or a database row
(snake_case attributes).
"""

from __future__ import annotations

from typing import Any, Self

from pydantic import ConfigDict

from catalog_service.core.schemas.base import CustomBase


class BaseEntity(CustomBase):
    """Base class for domain entities.

    Example:
        class IconEntity(BaseEntity):
            id: int
            name: str

        IconEntity.from_record(icon_row)
        IconEntity.from_record({"id": 1, "name": "home"})
    """

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_record(cls, record: Any, options: dict[str, Any] | None = None) -> Self:
        """Build an entity from an ORM instance or a plain mapping.

        Args:
            record: SQLAlchemy instance, row mapping or dict.
            options: Validation context forwarded to pydantic validators.

        Returns:
            New entity instance.
        """
        return cls.model_validate(record, from_attributes=True, context=options or None)
