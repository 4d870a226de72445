"""Post loaders."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import select

from blog_gateway.features.graphql.dataloaders.core import SessionLoader
from blog_gateway.features.posts.models import Post

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


async def batch_load_posts_by_author(
    session: AsyncSession,
    author_ids: list[UUID],
) -> list[list[Post]]:
    """Batch load posts for multiple authors.

    Does: SELECT posts.* FROM posts WHERE posts.author_id IN (...)

    Args:
        session: AsyncSession scoped to the current request
        author_ids: User UUIDs

    Returns:
        List of post lists, one per author_id (empty list if none)
    """
    if not author_ids:
        return []

    stmt = select(Post).where(Post.author_id.in_(author_ids))
    result = await session.execute(stmt)

    posts_by_author: dict[UUID, list[Post]] = {aid: [] for aid in author_ids}
    for post in result.scalars().all():
        posts_by_author.setdefault(post.author_id, []).append(post)

    return [posts_by_author.get(aid, []) for aid in author_ids]


class PostsByAuthorDataLoader(SessionLoader[UUID, list[Post]]):
    """Loads the posts of each author id; authors without posts get ``[]``."""

    async def fetch(self, session: AsyncSession, keys: list[UUID]) -> list[list[Post]]:
        return await batch_load_posts_by_author(session, keys)


__all__ = ["PostsByAuthorDataLoader", "batch_load_posts_by_author"]
