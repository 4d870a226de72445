"""GraphQL context for request-scoped dependencies.

The context is created fresh for each GraphQL request and provides:
- Database session (for queries/mutations)
- Session lock (serializes every use of the session within the request)
- DataLoaders (for N+1 prevention)
- Correlation ID (for log correlation)

Following Strawberry's FastAPI integration pattern:
https://strawberry.rocks/docs/integrations/fastapi#context_getter
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from strawberry.fastapi import BaseContext

from blog_gateway.core.settings import get_graphql_settings
from blog_gateway.features.graphql.dataloaders import DataLoaders, create_dataloaders

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from starlette.background import BackgroundTasks
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.websockets import WebSocket


@dataclass
class GraphQLContext(BaseContext):
    """Request context for GraphQL operations.

    Standard fields (per Strawberry docs):
    - request: The HTTP request
    - response: The HTTP response (for setting headers)
    - background_tasks: FastAPI BackgroundTasks

    Custom fields:
    - session: Database session (request-scoped)
    - lock: Guards ``session``; loaders take it for each batch and mutations
      for each write
    - loaders: DataLoaders (request-scoped, tied to session and lock)
    - correlation_id: Copied into every log record of the request

    Example usage in resolver:
        @strawberry.field
        async def user(self, info: Info[GraphQLContext, None], id: UUID) -> UserType | None:
            user = await info.context.loaders.users.load(id)
            return UserType.from_model(user) if user else None
    """

    request: Request | WebSocket | None = None
    response: Response | None = None
    background_tasks: BackgroundTasks | None = None

    session: AsyncSession = field(default=None)  # type: ignore[assignment]
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    loaders: DataLoaders = field(default=None)  # type: ignore[assignment]
    correlation_id: str | None = None


def build_context(
    session: AsyncSession,
    *,
    request: Request | None = None,
    response: Response | None = None,
    background_tasks: BackgroundTasks | None = None,
    correlation_id: str | None = None,
) -> GraphQLContext:
    """Create a context with a fresh lock and loader registry for ``session``.

    Call once per GraphQL execution; never share the result between executions.
    """
    lock = asyncio.Lock()
    loaders = create_dataloaders(
        session,
        lock,
        max_batch_size=get_graphql_settings().max_batch_size,
    )
    return GraphQLContext(
        request=request,
        response=response,
        background_tasks=background_tasks,
        session=session,
        lock=lock,
        loaders=loaders,
        correlation_id=correlation_id,
    )


__all__ = ["GraphQLContext", "build_context"]
