"""Cache dependencies for FastAPI route handlers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from catalog_service.core.exceptions import ServiceUnavailableException
from catalog_service.infra.cache.service import CacheService


def get_cache_service(request: Request) -> CacheService:
    """Return the CacheService built during application startup.

    Raises:
        ServiceUnavailableException: When the lifespan has not initialised the cache.
    """
    service = getattr(request.app.state, "cache_service", None)
    if service is None:
        raise ServiceUnavailableException(
            detail="Cache service is not initialised",
            type="cache-unavailable",
        )
    return service


CacheServiceDep = Annotated[CacheService, Depends(get_cache_service)]
