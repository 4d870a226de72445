"""Database session management with the SQLAlchemy async engine."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from blog_gateway.core.settings import get_app_settings, get_db_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from blog_gateway.core.settings.database import DatabaseSettings

logger = logging.getLogger(__name__)

SLOW_QUERY_SECONDS = 1.0


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on foreign key enforcement for every SQLite connection.

    SQLite ignores ``ON DELETE CASCADE`` unless ``PRAGMA foreign_keys`` is set
    per connection.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, connection_record: Any) -> None:
        _ = connection_record
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def track_query_duration(engine: AsyncEngine) -> None:
    """Log statements that run longer than SLOW_QUERY_SECONDS."""

    @event.listens_for(engine.sync_engine, "before_cursor_execute")
    def _before_cursor_execute(
        conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: Any
    ) -> None:
        _ = conn, cursor, statement, parameters, executemany
        context._query_start_time = time.perf_counter()

    @event.listens_for(engine.sync_engine, "after_cursor_execute")
    def _after_cursor_execute(
        conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: Any
    ) -> None:
        _ = conn, cursor, parameters, executemany
        duration = time.perf_counter() - context._query_start_time
        if duration > SLOW_QUERY_SECONDS:
            logger.warning(
                "Slow query",
                extra={"duration_seconds": round(duration, 3), "statement": statement[:200]},
            )


def build_engine(db_settings: DatabaseSettings, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine configured from settings.

    Args:
        db_settings: Database settings
        echo: Force SQL echo on top of ``db_settings.echo``

    Returns:
        AsyncEngine with SQLite foreign keys and slow query logging wired in
    """
    kwargs: dict[str, Any] = {"echo": db_settings.echo or echo}
    if not db_settings.is_sqlite:
        kwargs.update(
            pool_size=db_settings.pool_size,
            max_overflow=db_settings.max_overflow,
            pool_pre_ping=db_settings.pool_pre_ping,
        )

    new_engine = create_async_engine(db_settings.url, **kwargs)
    if db_settings.is_sqlite:
        enable_sqlite_foreign_keys(new_engine)
    track_query_duration(new_engine)
    return new_engine


db_settings = get_db_settings()
app_settings = get_app_settings()

engine = build_engine(db_settings, echo=app_settings.debug)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Get async database session.

    Yields:
        Database session that is automatically closed.

    Example:
        async with get_async_session() as session:
            result = await session.execute(select(User))
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_database() -> None:
    """Verify connectivity and create missing tables when configured.

    Models must be imported before this runs so their tables are registered
    on ``Base.metadata``.

    Raises:
        ConnectionError: If the database cannot be reached.
    """
    from blog_gateway.core.database import Base

    logger.info("Initializing database connection", extra={"url": engine.url.render_as_string()})

    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if db_settings.create_schema:
                await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        logger.exception("Failed to initialize database", extra={"error": str(e)})
        msg = f"Database unavailable: {e}"
        raise ConnectionError(msg) from e

    logger.info("Database initialized", extra={"create_schema": db_settings.create_schema})


async def close_database() -> None:
    """Close database connection and cleanup resources.

    This should be called during application shutdown.
    """
    logger.info("Closing database connection")

    try:
        await engine.dispose()
        logger.info("Database connection closed successfully")
    except Exception as e:
        logger.exception("Error closing database connection", extra={"error": str(e)})
