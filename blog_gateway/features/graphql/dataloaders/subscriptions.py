"""Subscription edge loaders.

Resolve a user's ``userSubscribedTo`` / ``subscribedToUser`` ids when the
user row was loaded without its edges. Only id pairs are read; the referenced
users then go through the user loader in one batch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import select

from blog_gateway.features.graphql.dataloaders.core import SessionLoader
from blog_gateway.features.users.models import SubscribersOnAuthors

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute


async def _batch_load_edge_ids(
    session: AsyncSession,
    keys: list[UUID],
    key_column: InstrumentedAttribute[UUID],
    value_column: InstrumentedAttribute[UUID],
) -> list[list[UUID]]:
    if not keys:
        return []

    stmt = select(key_column, value_column).where(key_column.in_(keys))
    result = await session.execute(stmt)

    grouped: dict[UUID, list[UUID]] = {key: [] for key in keys}
    for key, value in result.all():
        grouped.setdefault(key, []).append(value)

    return [grouped.get(key, []) for key in keys]


async def batch_load_subscribed_author_ids(
    session: AsyncSession,
    user_ids: list[UUID],
) -> list[list[UUID]]:
    """Batch load the ids of the authors each user follows.

    Returns:
        One list of author ids per user_id (empty list if none)
    """
    return await _batch_load_edge_ids(
        session,
        user_ids,
        SubscribersOnAuthors.subscriber_id,
        SubscribersOnAuthors.author_id,
    )


async def batch_load_subscriber_ids(
    session: AsyncSession,
    user_ids: list[UUID],
) -> list[list[UUID]]:
    """Batch load the ids of each user's subscribers.

    Returns:
        One list of subscriber ids per user_id (empty list if none)
    """
    return await _batch_load_edge_ids(
        session,
        user_ids,
        SubscribersOnAuthors.author_id,
        SubscribersOnAuthors.subscriber_id,
    )


class SubscribedAuthorIdsDataLoader(SessionLoader[UUID, list[UUID]]):
    """subscriber id -> ids of the authors they follow."""

    async def fetch(self, session: AsyncSession, keys: list[UUID]) -> list[list[UUID]]:
        return await batch_load_subscribed_author_ids(session, keys)


class SubscriberIdsDataLoader(SessionLoader[UUID, list[UUID]]):
    """author id -> ids of their subscribers."""

    async def fetch(self, session: AsyncSession, keys: list[UUID]) -> list[list[UUID]]:
        return await batch_load_subscriber_ids(session, keys)


__all__ = [
    "SubscribedAuthorIdsDataLoader",
    "SubscriberIdsDataLoader",
    "batch_load_subscribed_author_ids",
    "batch_load_subscriber_ids",
]
