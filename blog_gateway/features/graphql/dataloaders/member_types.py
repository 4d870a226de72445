"""Member tier loader."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from blog_gateway.features.graphql.dataloaders.core import SessionLoader
from blog_gateway.features.member_types.models import MemberType, MemberTypeId

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


async def batch_load_member_types(
    session: AsyncSession,
    ids: list[MemberTypeId],
) -> list[MemberType | None]:
    """Batch load member tiers by id.

    Args:
        session: AsyncSession scoped to the current request
        ids: Tier keys

    Returns:
        One tier (or None) per id, in input order
    """
    if not ids:
        return []

    stmt = select(MemberType).where(MemberType.id.in_(ids))
    result = await session.execute(stmt)
    tiers = {tier.id: tier for tier in result.scalars().all()}

    return [tiers.get(tier_id) for tier_id in ids]


class MemberTypeDataLoader(SessionLoader[MemberTypeId, MemberType]):
    """Loads ``MemberType`` rows by tier key.

    Usage:
        tier = await ctx.loaders.member_types.load(MemberTypeId.BASIC)
    """

    async def fetch(self, session: AsyncSession, keys: list[MemberTypeId]) -> list[MemberType | None]:
        return await batch_load_member_types(session, keys)


__all__ = ["MemberTypeDataLoader", "batch_load_member_types"]
