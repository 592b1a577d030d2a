"""Repository exceptions.

These stay free of HTTP concerns. The application's exception handlers map
them to problem details: NotFoundError is a 404, InvalidFilterError a 422,
and any other RepositoryError a 500 with details withheld.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def _pairs(values: Mapping[str, Any]) -> str:
    return ", ".join(f"{name}={value!r}" for name, value in values.items())


class RepositoryError(Exception):
    """Base class for data access failures.

    ``details`` holds structured context for logs and, for client errors,
    the problem body.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message} ({_pairs(self.details)})"


class NotFoundError(RepositoryError):
    """No row of ``model_name`` matches ``identifier``.

    Example:
        raise NotFoundError("Icon", {"id": 42})  # "Icon not found with id=42"
    """

    def __init__(self, model_name: str, identifier: dict[str, Any]):
        self.model_name = model_name
        self.identifier = identifier
        super().__init__(
            f"{model_name} not found with {_pairs(identifier)}",
            details={"model": model_name, **identifier},
        )

    def __repr__(self) -> str:
        return f"NotFoundError(model={self.model_name!r}, identifier={self.identifier!r})"


class InvalidFilterError(RepositoryError):
    """Filter key does not name a column of the paginated model."""

    def __init__(self, message: str, filter_name: str | None = None):
        self.filter_name = filter_name
        super().__init__(message, details={"filter": filter_name} if filter_name else None)


__all__ = [
    "InvalidFilterError",
    "NotFoundError",
    "RepositoryError",
]
