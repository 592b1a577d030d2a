"""Redis connection settings for the networked cache adapter.

Only read when ``CACHE_DRIVER=redis``. The connection can be given either as
a single ``REDIS_URL`` or as separate components; both forms end up in the
same fields, and ``url`` is always rebuilt from them.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, urlparse

from pydantic import Field, SecretStr, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisSettings(BaseSettings):
    """Redis cache backend settings.

    Environment variables use REDIS_ prefix.
    Example: REDIS_URL="rediss://:secret@cache.internal:6380/1"
    """

    # ──────────────────────────────────────────────────────────────
    # Connection
    # ──────────────────────────────────────────────────────────────

    redis_url: str | None = Field(
        default=None,
        alias="REDIS_URL",
        description="Full connection URL; overrides host, port, db and credentials",
    )
    host: str = Field(default="localhost", description="Redis host")
    port: int = Field(default=6379, ge=1, le=65535, description="Redis port")
    db: int = Field(default=0, ge=0, le=15, description="Logical database index")
    username: str | None = Field(default=None, description="ACL username (Redis 6+)")
    password: SecretStr | None = Field(default=None, description="Password")
    ssl_enabled: bool = Field(default=False, description="Connect over TLS (rediss://)")

    # ──────────────────────────────────────────────────────────────
    # Pool and timeouts
    # ──────────────────────────────────────────────────────────────

    max_connections: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Connection pool size shared by all cache operations",
    )
    socket_timeout: float = Field(
        default=5.0,
        ge=0.1,
        le=30.0,
        description="Per-command timeout in seconds",
    )
    socket_connect_timeout: float = Field(
        default=5.0,
        ge=0.1,
        le=30.0,
        description="Connect timeout in seconds",
    )

    # ──────────────────────────────────────────────────────────────
    # Cache behaviour
    # ──────────────────────────────────────────────────────────────

    max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for get/set/delete on connection or timeout errors",
    )
    retry_delay: float = Field(
        default=0.5,
        ge=0.01,
        le=5.0,
        description="First backoff delay in seconds, doubled on each retry",
    )
    scan_count: int = Field(
        default=1000,
        ge=1,
        le=100_000,
        description="SCAN COUNT hint and delete batch size for prefix invalidation",
    )

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @model_validator(mode="after")
    def _split_url(self) -> RedisSettings:
        """Copy the parts of ``REDIS_URL`` onto the component fields."""
        if not self.redis_url:
            return self

        parsed = urlparse(self.redis_url)
        parts: dict[str, Any] = {"ssl_enabled": parsed.scheme == "rediss"}
        if parsed.hostname:
            parts["host"] = parsed.hostname
        if parsed.port:
            parts["port"] = parsed.port
        db = parsed.path.lstrip("/")
        if db.isdigit():
            parts["db"] = int(db)
        if parsed.username:
            parts["username"] = parsed.username
        if parsed.password:
            parts["password"] = SecretStr(parsed.password)

        # frozen model
        for name, value in parts.items():
            object.__setattr__(self, name, value)
        return self

    @computed_field
    @property
    def url(self) -> str:
        """Connection URL rebuilt from the component fields."""
        scheme = "rediss" if self.ssl_enabled else "redis"
        user = quote(self.username) if self.username else ""
        secret = quote(self.password.get_secret_value()) if self.password else ""
        auth = f"{user}:{secret}@" if secret else ""
        return f"{scheme}://{auth}{self.host}:{self.port}/{self.db}"

    @computed_field
    @property
    def is_configured(self) -> bool:
        """True when a URL or a non-default host was provided."""
        return self.redis_url is not None or self.host != "localhost"

    def connection_pool_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``redis.asyncio.Redis.from_url``."""
        return {
            "max_connections": self.max_connections,
            "socket_timeout": self.socket_timeout,
            "socket_connect_timeout": self.socket_connect_timeout,
            "decode_responses": True,
            "encoding": "utf-8",
        }
