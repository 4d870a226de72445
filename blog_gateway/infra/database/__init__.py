"""Database infrastructure package.

Example:
    from blog_gateway.infra.database import get_async_session

    async with get_async_session() as session:
        result = await session.execute(...)
"""

from .session import (
    AsyncSessionLocal,
    build_engine,
    close_database,
    enable_sqlite_foreign_keys,
    engine,
    get_async_session,
    init_database,
)

__all__ = [
    "AsyncSessionLocal",
    "build_engine",
    "close_database",
    "enable_sqlite_foreign_keys",
    "engine",
    "get_async_session",
    "init_database",
]
