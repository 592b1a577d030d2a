"""Database dependencies for FastAPI route handlers.

Two session getters exist:

1. ``get_db_session()`` (this module): FastAPI dependency, session lifecycle
   tied to the HTTP request.
2. ``get_async_session()`` (infra.database): framework-agnostic async context
   manager for scripts and background work.

Both use the same session factory.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from catalog_service.infra.database import get_async_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency for database session.

    Example:
        @router.get("/icons/{icon_id}")
        async def get_icon(icon_id: int, session: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with get_async_session() as session:
        yield session
