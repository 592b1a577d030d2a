"""Cache layer exceptions."""

from __future__ import annotations

from typing import Any


class CacheError(Exception):
    """Base exception for the cache layer."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class CacheConfigurationError(CacheError):
    """The cache service was built with an unusable adapter or settings."""


__all__ = ["CacheConfigurationError", "CacheError"]
