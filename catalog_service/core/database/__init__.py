"""Core database package: declarative base, mixins and repository.

Base Classes and Mixins:
    - Base: Declarative base with constraint naming convention
    - IntegerPKMixin: Auto-increment integer primary key
    - TimestampMixin: created_at, updated_at tracking
    - TimestampedBase: Integer PK + timestamps

Repository:
    - BaseRepository[T]: Generic CRUD with explicit session passing

Exceptions:
    - RepositoryError, NotFoundError, InvalidFilterError
"""

from catalog_service.core.database.base import (
    NAMING_CONVENTION,
    Base,
    IntegerPKMixin,
    TimestampedBase,
    TimestampMixin,
)
from catalog_service.core.database.exceptions import (
    InvalidFilterError,
    NotFoundError,
    RepositoryError,
)
from catalog_service.core.database.repository import BaseRepository

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "BaseRepository",
    "IntegerPKMixin",
    "InvalidFilterError",
    "NotFoundError",
    "RepositoryError",
    "TimestampMixin",
    "TimestampedBase",
]
