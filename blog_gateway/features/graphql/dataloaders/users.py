"""User loader with on-demand subscription projections."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import select

from blog_gateway.features.graphql.dataloaders.core import SessionLoader
from blog_gateway.features.users.models import User
from blog_gateway.features.users.repository import USER_RELATIONS, user_relation_options

if TYPE_CHECKING:
    import asyncio
    from collections.abc import Iterable

    from sqlalchemy.ext.asyncio import AsyncSession


async def batch_load_users(
    session: AsyncSession,
    ids: list[UUID],
    relations: Iterable[str] = (),
) -> list[User | None]:
    """Batch load users, eagerly loading only the requested edge relations.

    With no relations this is a single SELECT on users; each requested
    relation adds one SELECT ... IN on ``subscribers_on_authors``.

    ``populate_existing`` refreshes instances already in the session so edge
    collections reflect writes made earlier in the request.

    Args:
        session: AsyncSession scoped to the current request
        ids: User UUIDs
        relations: Names from USER_RELATIONS to eagerly load

    Returns:
        One user (or None) per id, in input order
    """
    if not ids:
        return []

    stmt = (
        select(User)
        .where(User.id.in_(ids))
        .options(*user_relation_options(relations))
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    users = {user.id: user for user in result.scalars().all()}

    return [users.get(uid) for uid in ids]


class UserDataLoader(SessionLoader[UUID, User]):
    """Loads ``User`` rows by id.

    Resolvers that know a query selects ``userSubscribedTo`` or
    ``subscribedToUser`` call ``request_relations()`` before loading, so the
    next batch brings those edges along instead of each user fetching them
    later. Requested relations accumulate for the rest of the request.
    """

    def __init__(
        self,
        session: AsyncSession,
        lock: asyncio.Lock,
        *,
        max_batch_size: int | None = None,
    ) -> None:
        super().__init__(session, lock, max_batch_size=max_batch_size)
        self._relations: set[str] = set()

    @property
    def relations(self) -> frozenset[str]:
        return frozenset(self._relations)

    def request_relations(self, *relations: str) -> None:
        """Include ``relations`` in every batch fetched from now on."""
        unknown = set(relations) - set(USER_RELATIONS)
        if unknown:
            msg = f"Unknown user relation(s): {sorted(unknown)}"
            raise ValueError(msg)
        self._relations.update(relations)

    async def fetch(self, session: AsyncSession, keys: list[UUID]) -> list[User | None]:
        return await batch_load_users(session, keys, self._relations)


__all__ = ["UserDataLoader", "batch_load_users"]
