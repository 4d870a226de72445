"""Profile loader keyed by owning user."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import select

from blog_gateway.features.graphql.dataloaders.core import SessionLoader
from blog_gateway.features.profiles.models import Profile

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


async def batch_load_profiles_by_user(
    session: AsyncSession,
    user_ids: list[UUID],
) -> list[Profile | None]:
    """Batch load the profile of each user.

    ``profiles.user_id`` is unique, so each user maps to zero or one profile.

    Args:
        session: AsyncSession scoped to the current request
        user_ids: User UUIDs

    Returns:
        One profile (or None) per user_id, in input order
    """
    if not user_ids:
        return []

    stmt = select(Profile).where(Profile.user_id.in_(user_ids))
    result = await session.execute(stmt)
    profiles = {profile.user_id: profile for profile in result.scalars().all()}

    return [profiles.get(uid) for uid in user_ids]


class ProfileByUserDataLoader(SessionLoader[UUID, Profile]):
    """Loads ``Profile`` rows by ``user_id``."""

    async def fetch(self, session: AsyncSession, keys: list[UUID]) -> list[Profile | None]:
        return await batch_load_profiles_by_user(session, keys)


__all__ = ["ProfileByUserDataLoader", "batch_load_profiles_by_user"]
