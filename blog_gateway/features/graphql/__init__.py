"""GraphQL API feature.

Exposes users, profiles, posts and member tiers over a single POST endpoint.
Nested fields resolve through request-scoped DataLoaders; see
``dataloaders`` and ``resolvers``.
"""

from __future__ import annotations
