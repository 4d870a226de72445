"""Repository for profiles."""

from __future__ import annotations

from blog_gateway.core.database import BaseRepository
from blog_gateway.features.profiles.models import Profile


class ProfileRepository(BaseRepository[Profile]):
    """Repository for the Profile model."""

    def __init__(self) -> None:
        """Initialize with Profile model."""
        super().__init__(Profile)


_profile_repository: ProfileRepository | None = None


def get_profile_repository() -> ProfileRepository:
    """Get the shared ProfileRepository instance."""
    global _profile_repository
    if _profile_repository is None:
        _profile_repository = ProfileRepository()
    return _profile_repository
