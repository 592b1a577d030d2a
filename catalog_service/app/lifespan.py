"""Application lifespan management.

Startup Order:
1. Logging
2. Cache adapter (memory or Redis, per CACHE_DRIVER) and CacheService

Shutdown Order: cache adapter, then the database engine.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from catalog_service.core.settings import (
    get_app_settings,
    get_cache_settings,
    get_logging_settings,
    get_redis_settings,
)
from catalog_service.infra.cache import CacheService, build_cache_adapter
from catalog_service.infra.database import dispose_engine
from catalog_service.infra.logging.config import setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start and stop application services.

    The cache service lives on ``app.state.cache_service``; routes reach it
    through the ``get_cache_service`` dependency.
    """
    app_settings = get_app_settings()
    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Application starting",
        extra={
            "service": app_settings.service_name,
            "version": app_settings.version,
            "environment": app_settings.environment,
        },
    )

    cache_settings = get_cache_settings()
    adapter = build_cache_adapter(cache_settings, get_redis_settings())
    app.state.cache_service = CacheService(adapter, default_ttl=cache_settings.default_ttl)

    try:
        yield
    finally:
        logger.info("Application shutting down")
        await app.state.cache_service.close()
        await dispose_engine()
        logger.info("Application shutdown complete")
