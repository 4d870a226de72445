"""GraphQL router for FastAPI integration.

Provides:
- GraphQL endpoint at GRAPHQL_PATH (default /graphql), POST only
- Optional GraphQL IDE served over GET
- Request context with session, session lock, DataLoaders and correlation id
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated, Any, cast
from uuid import uuid4

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.fastapi import GraphQLRouter

from blog_gateway.core.dependencies.database import get_db_session
from blog_gateway.core.settings import get_graphql_settings
from blog_gateway.features.graphql.context import GraphQLContext, build_context
from blog_gateway.features.graphql.schema import schema
from blog_gateway.infra.logging import set_log_context

if TYPE_CHECKING:
    from blog_gateway.core.settings.graphql import GraphQLSettings

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


async def get_graphql_context(
    request: Request,
    response: Response,
    background_tasks: BackgroundTasks,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> GraphQLContext:
    """Create GraphQL context from FastAPI dependencies.

    Following Strawberry's FastAPI integration pattern, this provides
    the standard context fields (request, response, background_tasks)
    plus a fresh session lock and loader registry for this request.

    The correlation id is taken from the request header or generated, echoed
    back in the response, and attached to every log record of the request.

    Args:
        request: FastAPI request
        response: FastAPI response (for setting headers)
        background_tasks: FastAPI background tasks
        session: Database session from dependency

    Returns:
        GraphQLContext for use in resolvers
    """
    correlation_id = request.headers.get(CORRELATION_HEADER) or uuid4().hex
    set_log_context(correlation_id=correlation_id)
    response.headers[CORRELATION_HEADER] = correlation_id

    return build_context(
        session,
        request=request,
        response=response,
        background_tasks=background_tasks,
        correlation_id=correlation_id,
    )


def create_graphql_router(settings: GraphQLSettings | None = None) -> APIRouter:
    """Create GraphQL router with settings-based configuration.

    Args:
        settings: GraphQL settings to use; defaults to the cached settings.
    """
    settings = settings or get_graphql_settings()

    graphql_app = GraphQLRouter(
        schema,
        path=settings.path,
        context_getter=cast("Any", get_graphql_context),
        graphql_ide=settings.graphql_ide or None,
        allow_queries_via_get=False,
    )

    router = APIRouter()
    router.include_router(graphql_app)

    logger.debug("GraphQL endpoint mounted at %s (ide=%s)", settings.path, settings.graphql_ide)
    return router


__all__ = ["create_graphql_router", "get_graphql_context"]
