"""Repository and seed data for member tiers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select

from blog_gateway.core.database import BaseRepository
from blog_gateway.features.member_types.models import MemberType, MemberTypeId

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

# discount, posts_limit_per_month
DEFAULT_MEMBER_TYPES: dict[MemberTypeId, tuple[float, int]] = {
    MemberTypeId.BASIC: (2.3, 20),
    MemberTypeId.BUSINESS: (7.7, 100),
}


class MemberTypeRepository(BaseRepository[MemberType]):
    """Repository for the MemberType model."""

    def __init__(self) -> None:
        """Initialize with MemberType model."""
        super().__init__(MemberType)

    async def seed_defaults(self, session: AsyncSession) -> int:
        """Insert any missing default tiers.

        Idempotent: existing rows are left untouched.

        Args:
            session: Database session (caller commits)

        Returns:
            Number of tiers inserted
        """
        result = await session.execute(select(MemberType.id))
        existing = set(result.scalars().all())

        missing = [
            MemberType(id=tier, discount=discount, posts_limit_per_month=limit)
            for tier, (discount, limit) in DEFAULT_MEMBER_TYPES.items()
            if tier not in existing
        ]
        if missing:
            session.add_all(missing)
            await session.flush()
            logger.info("Seeded member types: %s", ", ".join(m.id for m in missing))
        return len(missing)


_member_type_repository: MemberTypeRepository | None = None


def get_member_type_repository() -> MemberTypeRepository:
    """Get the shared MemberTypeRepository instance."""
    global _member_type_repository
    if _member_type_repository is None:
        _member_type_repository = MemberTypeRepository()
    return _member_type_repository
