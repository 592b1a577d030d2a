"""FastAPI application factory.

Run with:
    uvicorn catalog_service.app.main:app
"""

from __future__ import annotations

from fastapi import FastAPI

from catalog_service.app.exception_handlers import configure_exception_handlers
from catalog_service.app.lifespan import lifespan
from catalog_service.app.router import setup_routers
from catalog_service.core.settings import get_app_settings

OPENAPI_TAGS = [
    {
        "name": "icons",
        "description": "Icon search with keyset pagination and cache controls (?cacheMode=).",
    },
    {"name": "observability", "description": "Prometheus metrics."},
]


def create_app() -> FastAPI:
    """Build the catalog application.

    The cache service and logging are set up by ``lifespan`` when the
    server starts, not here, so building an app has no side effects.
    """
    app_settings = get_app_settings()

    app = FastAPI(
        title=app_settings.title,
        version=app_settings.version,
        debug=app_settings.debug,
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    # Handlers before routers so routes resolve problems from the start
    configure_exception_handlers(app)
    setup_routers(app, app_settings)

    return app


app = create_app()
