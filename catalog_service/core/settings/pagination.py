"""Page size limits for list endpoints.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_LIMIT=50
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Page sizes applied by routes before the keyset engine runs.

    Routes clamp ``limit`` to ``max_limit``; the keyset engine clamps again
    to its own hard ceiling of 100.
    """

    default_limit: int = Field(default=20, ge=1, le=100, description="Page size when none is given")
    max_limit: int = Field(default=100, ge=1, le=1000, description="Larger limits are clamped")

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_order(self) -> PaginationSettings:
        if self.default_limit > self.max_limit:
            raise ValueError("default_limit must not exceed max_limit")
        return self
