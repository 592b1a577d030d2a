"""Database session management with SQLAlchemy's async engine.

The engine is created on first use from ``PostgresSettings`` so that importing
the application (e.g. in tests) never opens a connection pool. Without a
configured DSN it falls back to a local aiosqlite file.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from catalog_service.core.settings import get_app_settings, get_db_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Return the process-wide async engine, creating it on first call."""
    global _engine
    if _engine is None:
        db_settings = get_db_settings()
        kwargs = db_settings.engine_kwargs()
        kwargs["echo"] = kwargs.get("echo", False) or get_app_settings().debug
        _engine = create_async_engine(db_settings.get_sqlalchemy_url(), **kwargs)
        logger.info(
            "Database engine created",
            extra={
                "dialect": _engine.dialect.name,
                "configured": db_settings.is_configured,
            },
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory bound to the process-wide engine."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Get async database session.

    Yields:
        Database session that is automatically closed.

    Example:
        async with get_async_session() as session:
            page = await repo.cursor_paginate(session, limit=20)
    """
    async with get_session_factory()() as session:
        try:
            yield session
        finally:
            await session.close()


async def dispose_engine() -> None:
    """Dispose the engine's pool; the next session recreates it."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("Database engine disposed")
    _engine = None
    _session_factory = None


__all__ = [
    "dispose_engine",
    "get_async_session",
    "get_engine",
    "get_session_factory",
]
