"""FastAPI dependencies shared across features."""

from catalog_service.core.dependencies.cache import CacheServiceDep, get_cache_service
from catalog_service.core.dependencies.database import get_db_session

__all__ = ["CacheServiceDep", "get_cache_service", "get_db_session"]
