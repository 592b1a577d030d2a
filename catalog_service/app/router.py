"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from catalog_service.core.settings import get_app_settings
from catalog_service.features.icons.router import router as icons_router
from catalog_service.features.metrics.router import router as metrics_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from catalog_service.core.settings.app import AppSettings

logger = logging.getLogger(__name__)


def setup_routers(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Register all feature routers under the API prefix.

    Args:
        app: FastAPI application instance.
        app_settings: Optional settings override for the API prefix.
    """
    settings = app_settings or get_app_settings()
    api_prefix = settings.api_prefix

    app.include_router(icons_router, prefix=api_prefix)
    # Scrape endpoint stays unversioned at /metrics
    app.include_router(metrics_router)

    logger.info(
        "Routers registered",
        extra={"api_prefix": api_prefix, "routers": ["icons", "metrics"]},
    )
