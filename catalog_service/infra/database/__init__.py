"""Database infrastructure: engine and session lifecycle."""

from catalog_service.infra.database.session import (
    dispose_engine,
    get_async_session,
    get_engine,
    get_session_factory,
)

__all__ = [
    "dispose_engine",
    "get_async_session",
    "get_engine",
    "get_session_factory",
]
