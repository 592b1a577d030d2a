"""Base schema classes for API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CustomBase(BaseModel):
    """Base model with common configuration for all schemas.

    Fields are declared in snake_case and exposed to clients in camelCase,
    matching the query-string and cursor vocabulary of the catalog API.

    Example:
        class IconSummary(CustomBase):
            id: int
            set_id: int | None

        IconSummary(id=1, setId=3).model_dump(by_alias=True)
        # {"id": 1, "setId": 3}
    """

    model_config = ConfigDict(
        # Allow creation from ORM models (SQLAlchemy)
        from_attributes=True,
        # Use enum values instead of names
        use_enum_values=True,
        # Accept both field names and camelCase aliases
        populate_by_name=True,
        alias_generator=to_camel,
        # Ignore extra fields (silently drop unexpected data)
        extra="ignore",
    )
