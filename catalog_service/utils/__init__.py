"""Shared utilities."""

from catalog_service.utils.retry import retry

__all__ = ["retry"]
