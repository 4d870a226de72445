"""Repository for posts."""

from __future__ import annotations

from blog_gateway.core.database import BaseRepository
from blog_gateway.features.posts.models import Post


class PostRepository(BaseRepository[Post]):
    """Repository for the Post model."""

    def __init__(self) -> None:
        """Initialize with Post model."""
        super().__init__(Post)


_post_repository: PostRepository | None = None


def get_post_repository() -> PostRepository:
    """Get the shared PostRepository instance."""
    global _post_repository
    if _post_repository is None:
        _post_repository = PostRepository()
    return _post_repository
