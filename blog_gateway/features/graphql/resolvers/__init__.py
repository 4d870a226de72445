"""GraphQL resolvers for queries and mutations.

This package contains:
- queries.py: Query resolvers (RootQueryType)
- mutations.py: Mutation resolvers (RootMutationType)
"""

from __future__ import annotations

from blog_gateway.features.graphql.resolvers.mutations import Mutation
from blog_gateway.features.graphql.resolvers.queries import Query

__all__ = ["Mutation", "Query"]
