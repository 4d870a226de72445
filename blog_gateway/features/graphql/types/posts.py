"""GraphQL types for posts."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

if TYPE_CHECKING:
    from blog_gateway.features.posts.models import Post


@strawberry.type(name="Post", description="A post written by a user")
class PostType:
    id: UUID
    title: str
    content: str
    author_id: UUID

    @classmethod
    def from_model(cls, post: Post) -> PostType:
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            author_id=post.author_id,
        )


# ============================================================================
# Input Types
# ============================================================================


@strawberry.input(name="CreatePostInput", description="Input for creating a post")
class CreatePostInput:
    author_id: UUID
    title: str
    content: str


@strawberry.input(name="ChangePostInput", description="Input for changing a post")
class ChangePostInput:
    """Only provided fields are changed."""

    title: str | None = None
    content: str | None = None


__all__ = ["ChangePostInput", "CreatePostInput", "PostType"]
