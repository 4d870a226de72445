"""Main entry point for blog-gateway.

Runs the FastAPI application under uvicorn with settings from configuration.
"""

from __future__ import annotations

import sys
from typing import NoReturn


def run_server() -> NoReturn:
    """Run the FastAPI application server."""
    import uvicorn

    from blog_gateway.core.settings import get_app_settings, get_logging_settings

    settings = get_app_settings()
    log_settings = get_logging_settings()

    uvicorn.run(
        "blog_gateway.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        access_log=settings.debug,
        log_level=log_settings.level.lower(),
    )
    sys.exit(0)


if __name__ == "__main__":
    run_server()
