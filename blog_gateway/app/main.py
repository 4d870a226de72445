"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from blog_gateway.app.lifespan import lifespan
from blog_gateway.app.router import setup_routers
from blog_gateway.core.settings import get_app_settings, get_graphql_settings


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Settings are loaded once and cached via LRU cache.

    Returns:
        Configured FastAPI application instance.
    """
    app_settings = get_app_settings()

    app = FastAPI(
        title=app_settings.title,
        version=app_settings.version,
        debug=app_settings.debug,
        # No REST surface to document
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    setup_routers(app, get_graphql_settings())

    return app


# Application instance for uvicorn
app = create_app()
