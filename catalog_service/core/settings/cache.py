"""Cache service settings.

Environment variables use CACHE_ prefix.
Example: CACHE_DRIVER=redis, CACHE_DEFAULT_TTL=3600
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CacheDriver = Literal["memory", "redis"]


class CacheSettings(BaseSettings):
    """Read-through cache configuration.

    Attributes:
        driver: Backend selected at startup ("memory" or "redis").
        default_ttl: TTL applied by the cache service when callers give none.
        adapter_ttl: Fallback TTL used by adapters when set() receives no TTL.
        memory_check_period: Minimum seconds between expired-entry sweeps
            in the in-process adapter.
        memory_max_entries: Size bound for the in-process adapter.
    """

    driver: CacheDriver = Field(
        default="memory",
        description="Cache backend (memory|redis)",
    )
    default_ttl: int = Field(
        default=3600,
        ge=0,
        description="Default cache-service TTL in seconds (1 hour)",
    )
    adapter_ttl: int = Field(
        default=60,
        ge=0,
        description="Adapter fallback TTL in seconds",
    )
    memory_check_period: float = Field(
        default=120.0,
        gt=0,
        description="Seconds between expired-entry sweeps for the memory adapter",
    )
    memory_max_entries: int | None = Field(
        default=None,
        ge=1,
        description="Entry bound for the memory adapter (unbounded when unset)",
    )

    model_config = SettingsConfigDict(
        env_prefix="CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @field_validator("driver", mode="before")
    @classmethod
    def _normalize_driver(cls, value: object) -> object:
        """Accept driver names in any case (e.g. CACHE_DRIVER=Redis)."""
        if isinstance(value, str):
            return value.strip().lower()
        return value
