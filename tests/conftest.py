"""Pytest configuration and shared fixtures.

Organization:
    - Application Fixtures: FastAPI app wired to test doubles, HTTP client
    - Database Fixtures: in-memory SQLite engine, session, icon factories
    - Cache Fixtures: in-process cache service, mock Redis client
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

# Ensure tests run without external infrastructure
os.environ.setdefault("CACHE_DRIVER", "memory")
os.environ.setdefault("REDIS_RETRY_DELAY", "0.01")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_CONSOLE_ENABLED", "false")

BASE_TIME = datetime(2025, 1, 1, tzinfo=UTC)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Async engine on a fresh in-memory SQLite database with all tables."""
    from catalog_service.core.database import Base

    # Register icon tables on Base.metadata
    import catalog_service.features.icons.models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session on the test database, rolled back after each test."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def make_icons(db_session: AsyncSession):
    """Factory persisting icons with strictly increasing ``created_at``.

    Example:
        icons = await make_icons(25)
        icons = await make_icons(3, price=4.99, set_id=icon_set.id)
    """
    from catalog_service.features.icons.models import Icon

    counter = {"next": 1}

    async def _make(count: int, **overrides: Any) -> list[Icon]:
        icons = []
        for _ in range(count):
            n = counter["next"]
            counter["next"] += 1
            values: dict[str, Any] = {
                "name": f"icon {n}",
                "unique_id": f"icon-{n}",
                "price": 0.0,
                "popularity": n,
                "created_at": BASE_TIME + timedelta(minutes=n),
            }
            values.update(overrides)
            icons.append(Icon(**values))
        db_session.add_all(icons)
        await db_session.flush()
        for icon in icons:
            await db_session.refresh(icon)
        return icons

    return _make


# ============================================================================
# Cache Fixtures
# ============================================================================


@pytest.fixture
def cache_service():
    """CacheService over a fresh in-process adapter."""
    from catalog_service.infra.cache import CacheService, MemoryCacheAdapter

    return CacheService(MemoryCacheAdapter(), default_ttl=300)


@pytest.fixture
def mock_redis_client() -> AsyncMock:
    """AsyncMock standing in for ``redis.asyncio.Redis``.

    ``scan_iter`` yields whatever is in ``mock_redis_client.scan_keys``.
    """
    client = AsyncMock()
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.scan_keys = []
    client.scan_calls = []

    def scan_iter(match: str | None = None, count: int | None = None):
        client.scan_calls.append({"match": match, "count": count})

        async def _iter():
            for key in list(client.scan_keys):
                yield key

        return _iter()

    client.scan_iter = scan_iter
    return client


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
async def app(db_session: AsyncSession, cache_service):
    """FastAPI app using the test session and an in-process cache.

    The ASGI transport does not run the lifespan, so the cache service is
    installed on ``app.state`` directly.
    """
    from catalog_service.app.main import create_app
    from catalog_service.core.dependencies import get_db_session

    application = create_app()

    async def _override_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    application.dependency_overrides[get_db_session] = _override_session
    application.state.cache_service = cache_service
    return application


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client bound to the test app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
