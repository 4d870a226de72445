"""GraphQL schema assembly.

Combines the Query and Mutation root types into a single schema with the
configured extensions. ``BlogSchema`` routes every execution error through
``process_graphql_errors`` for classification and logging.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import strawberry

from blog_gateway.features.graphql.error_handler import process_graphql_errors
from blog_gateway.features.graphql.extensions import get_extensions
from blog_gateway.features.graphql.resolvers import Mutation, Query

if TYPE_CHECKING:
    from graphql import GraphQLError
    from strawberry.types import ExecutionContext

logger = logging.getLogger(__name__)


class BlogSchema(strawberry.Schema):
    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        process_graphql_errors(errors, execution_context)


def build_schema(*, max_depth: int | None = None, debug: bool | None = None) -> BlogSchema:
    """Create a schema; arguments override the configured extension settings."""
    return BlogSchema(
        query=Query,
        mutation=Mutation,
        extensions=get_extensions(max_depth=max_depth, debug=debug),
    )


schema = build_schema()

logger.info("GraphQL schema created successfully")

__all__ = ["BlogSchema", "build_schema", "schema"]
