"""Application lifespan management.

Startup Order:
1. Logging
2. Database (connectivity check, optional schema creation)
3. Member type seed data

Shutdown Order: Reverse of startup (what starts first, shuts down last)
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from importlib import import_module
import logging
from typing import TYPE_CHECKING

from blog_gateway.core.settings import get_app_settings, get_db_settings, get_logging_settings
from blog_gateway.infra.logging import setup_logging, shutdown as shutdown_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)

# Modules whose import registers tables on Base.metadata
MODEL_MODULES = (
    "blog_gateway.features.member_types.models",
    "blog_gateway.features.users.models",
    "blog_gateway.features.posts.models",
    "blog_gateway.features.profiles.models",
)


# =============================================================================
# Startup functions
# =============================================================================


async def _startup_core() -> None:
    """Configure logging."""
    app = get_app_settings()

    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Application starting",
        extra={"service": app.service_name, "environment": app.environment},
    )


async def _startup_database() -> None:
    """Initialize database connection and seed member tiers."""
    from blog_gateway.features.member_types.repository import get_member_type_repository
    from blog_gateway.infra.database import get_async_session, init_database

    for module in MODEL_MODULES:
        import_module(module)

    await init_database()

    if not get_db_settings().seed_member_types:
        return

    async with get_async_session() as session:
        inserted = await get_member_type_repository().seed_defaults(session)
        await session.commit()
    logger.info("Member types ready", extra={"inserted": inserted})


# =============================================================================
# Shutdown functions
# =============================================================================


async def _shutdown_database() -> None:
    from blog_gateway.infra.database import close_database

    await close_database()


# =============================================================================
# Main lifespan context manager
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    await _startup_core()
    await _startup_database()

    logger.info("Application startup complete")

    yield

    logger.info("Application shutting down")
    await _shutdown_database()
    logger.info("Application shutdown complete")
    shutdown_logging()


__all__ = ["lifespan"]
