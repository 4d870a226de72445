"""Pytest configuration and shared fixtures.

Organization:
    - Application Fixtures: FastAPI app and HTTP client
    - Database Fixtures: in-memory SQLite engine, session, statement counter
    - GraphQL Fixtures: per-execution context and an ``execute`` helper
    - Data Fixtures: small factories for users, posts and profiles
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Settings are read at import time; keep tests off the on-disk database
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("LOG_ENABLE_QUEUE", "false")
os.environ.setdefault("LOG_JSON_LOGS", "false")

from blog_gateway.core.database import Base  # noqa: E402
from blog_gateway.features.graphql.context import build_context  # noqa: E402
from blog_gateway.features.graphql.schema import schema as default_schema  # noqa: E402
from blog_gateway.features.member_types.models import MemberTypeId  # noqa: E402
from blog_gateway.features.member_types.repository import get_member_type_repository  # noqa: E402
from blog_gateway.features.posts.models import Post  # noqa: E402
from blog_gateway.features.profiles.models import Profile  # noqa: E402
from blog_gateway.features.users.models import SubscribersOnAuthors, User  # noqa: E402
from blog_gateway.infra.database import enable_sqlite_foreign_keys  # noqa: E402

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine
    from strawberry.types import ExecutionResult

    from blog_gateway.features.graphql.context import GraphQLContext


# ============================================================================
# Database Fixtures
# ============================================================================


@dataclass
class StatementCounter:
    """Records every SQL statement sent to the database."""

    statements: list[str] = field(default_factory=list)

    def reset(self) -> None:
        self.statements.clear()

    @property
    def selects(self) -> list[str]:
        return [s for s in self.statements if s.lstrip().upper().startswith("SELECT")]

    def selects_from(self, table: str) -> list[str]:
        return [s for s in self.selects if f"FROM {table}" in s]


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Create async SQLAlchemy engine with in-memory SQLite.

    ``StaticPool`` keeps a single connection so every session sees the same
    in-memory database. Foreign keys are enforced so cascades run.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Session on a database with the default member tiers seeded."""
    async with session_factory() as session:
        await get_member_type_repository().seed_defaults(session)
        await session.commit()
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def statement_counter(db_engine: AsyncEngine) -> StatementCounter:
    """Count statements issued from the moment the fixture is requested.

    Example:
        async def test_batching(execute, statement_counter):
            statement_counter.reset()
            await execute("{ users { posts { title } } }")
            assert len(statement_counter.selects_from("posts")) == 1
    """
    counter = StatementCounter()

    @event.listens_for(db_engine.sync_engine, "before_cursor_execute")
    def _record(conn: Any, cursor: Any, statement: str, *args: Any) -> None:
        counter.statements.append(statement)

    return counter


# ============================================================================
# GraphQL Fixtures
# ============================================================================


@pytest.fixture
def make_context(db_session: AsyncSession) -> Callable[[], GraphQLContext]:
    """Build a fresh context (lock + loaders) per execution."""
    return lambda: build_context(db_session, correlation_id="test")


@pytest.fixture
def execute(
    make_context: Callable[[], GraphQLContext],
) -> Callable[..., Awaitable[ExecutionResult]]:
    """Execute a document against the schema with a fresh context.

    Example:
        result = await execute("{ users { id } }")
        assert result.errors is None
    """

    async def _execute(
        query: str,
        variables: dict[str, Any] | None = None,
        *,
        schema: Any = None,
        context: GraphQLContext | None = None,
    ) -> ExecutionResult:
        return await (schema or default_schema).execute(
            query,
            variable_values=variables,
            context_value=context or make_context(),
        )

    return _execute


# ============================================================================
# Data Fixtures
# ============================================================================


@pytest.fixture
def create_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    async def _create(name: str = "user", balance: float = 0.0) -> User:
        user = User(name=name, balance=balance)
        db_session.add(user)
        await db_session.commit()
        return user

    return _create


@pytest.fixture
def create_post(db_session: AsyncSession) -> Callable[..., Awaitable[Post]]:
    async def _create(author: User, title: str = "title", content: str = "content") -> Post:
        post = Post(author_id=author.id, title=title, content=content)
        db_session.add(post)
        await db_session.commit()
        return post

    return _create


@pytest.fixture
def create_profile(db_session: AsyncSession) -> Callable[..., Awaitable[Profile]]:
    async def _create(
        user: User,
        member_type_id: MemberTypeId = MemberTypeId.BASIC,
        *,
        is_male: bool = True,
        year_of_birth: int = 1990,
    ) -> Profile:
        profile = Profile(
            user_id=user.id,
            member_type_id=member_type_id,
            is_male=is_male,
            year_of_birth=year_of_birth,
        )
        db_session.add(profile)
        await db_session.commit()
        return profile

    return _create


@pytest.fixture
def subscribe(db_session: AsyncSession) -> Callable[[User, User], Awaitable[None]]:
    async def _subscribe(subscriber: User, author: User) -> None:
        db_session.add(SubscribersOnAuthors(subscriber_id=subscriber.id, author_id=author.id))
        await db_session.commit()

    return _subscribe


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
async def app(session_factory: async_sessionmaker[AsyncSession], db_session: AsyncSession):
    """FastAPI application whose requests use the test database.

    Lifespan does not run under ASGITransport; the session dependency is
    overridden instead.
    """
    from blog_gateway.app.main import create_app
    from blog_gateway.core.dependencies.database import get_db_session

    application = create_app()

    async def _override_session() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db_session] = _override_session
    try:
        yield application
    finally:
        application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
