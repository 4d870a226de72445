"""Database dependencies for FastAPI route handlers.

``get_db_session()`` wraps the framework-agnostic ``get_async_session()``
context manager so the session lifecycle is tied to one HTTP request.
Tests override it through ``app.dependency_overrides``.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from blog_gateway.infra.database import get_async_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency for database session.

    Yields:
        Database session that is automatically closed after request.
    """
    async with get_async_session() as session:
        yield session
