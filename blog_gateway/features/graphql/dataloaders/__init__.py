"""DataLoader container and factory.

DataLoaders batch and cache database lookups within a single request,
preventing N+1 query problems common in GraphQL resolvers.

Each GraphQL request gets its own DataLoaders instance, so caches never
outlive the request and never leak between requests.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

from blog_gateway.features.graphql.dataloaders.core import KeyScopedLoader, SessionLoader
from blog_gateway.features.graphql.dataloaders.member_types import MemberTypeDataLoader
from blog_gateway.features.graphql.dataloaders.posts import PostsByAuthorDataLoader
from blog_gateway.features.graphql.dataloaders.profiles import ProfileByUserDataLoader
from blog_gateway.features.graphql.dataloaders.subscriptions import (
    SubscribedAuthorIdsDataLoader,
    SubscriberIdsDataLoader,
)
from blog_gateway.features.graphql.dataloaders.users import UserDataLoader

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession


@dataclass
class DataLoaders:
    """Container for all DataLoader instances.

    One instance created per GraphQL request.

    Usage in resolver:
        ctx = info.context
        user = await ctx.loaders.users.load(user_id)
    """

    member_types: MemberTypeDataLoader
    posts_by_author: PostsByAuthorDataLoader
    profiles_by_user: ProfileByUserDataLoader
    users: UserDataLoader
    subscribed_authors: SubscribedAuthorIdsDataLoader
    subscribers: SubscriberIdsDataLoader

    def forget_users(self, *user_ids: UUID) -> None:
        """Drop cached users and their edge lists after a user or edge write."""
        self.users.clear_many(user_ids)
        self.subscribed_authors.clear_many(user_ids)
        self.subscribers.clear_many(user_ids)

    def clear_all(self) -> None:
        """Drop every cached entry, e.g. after a delete that cascades across kinds."""
        for loader in (
            self.member_types,
            self.posts_by_author,
            self.profiles_by_user,
            self.users,
            self.subscribed_authors,
            self.subscribers,
        ):
            loader.clear_all()


def create_dataloaders(
    session: AsyncSession,
    lock: asyncio.Lock | None = None,
    *,
    max_batch_size: int | None = None,
) -> DataLoaders:
    """Factory for creating request-scoped DataLoaders.

    Args:
        session: Database session for the current request
        lock: Lock serializing use of ``session``; a new one is created if omitted
        max_batch_size: Optional chunk size for every loader

    Returns:
        DataLoaders container with all loaders initialized
    """
    lock = lock or asyncio.Lock()
    return DataLoaders(
        member_types=MemberTypeDataLoader(session, lock, max_batch_size=max_batch_size),
        posts_by_author=PostsByAuthorDataLoader(session, lock, max_batch_size=max_batch_size),
        profiles_by_user=ProfileByUserDataLoader(session, lock, max_batch_size=max_batch_size),
        users=UserDataLoader(session, lock, max_batch_size=max_batch_size),
        subscribed_authors=SubscribedAuthorIdsDataLoader(session, lock, max_batch_size=max_batch_size),
        subscribers=SubscriberIdsDataLoader(session, lock, max_batch_size=max_batch_size),
    )


__all__ = [
    "DataLoaders",
    "KeyScopedLoader",
    "MemberTypeDataLoader",
    "PostsByAuthorDataLoader",
    "ProfileByUserDataLoader",
    "SessionLoader",
    "SubscribedAuthorIdsDataLoader",
    "SubscriberIdsDataLoader",
    "UserDataLoader",
    "create_dataloaders",
]
