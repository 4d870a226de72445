"""GraphQL types for users.

Nested fields never query per row:

- ``profile`` and ``posts`` go through the profile and post loaders.
- ``userSubscribedTo`` and ``subscribedToUser`` start from flat id lists,
  taken from the parent row when its edges were eagerly loaded or from the
  edge loaders otherwise, and fetch the referenced users with one
  ``users.load_many()``.

The edge ids are captured in ``from_model`` because a later batch with
``populate_existing`` may reset the ORM collections on the shared instance.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from strawberry.types import Info

from blog_gateway.core.database import is_loaded
from blog_gateway.features.graphql.context import GraphQLContext
from blog_gateway.features.graphql.selection import requested_user_relations
from blog_gateway.features.graphql.types.posts import PostType
from blog_gateway.features.graphql.types.profiles import ProfileType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from blog_gateway.features.users.models import User


async def load_user_types(
    info: Info[GraphQLContext, None],
    user_ids: Iterable[UUID],
) -> list[UserType]:
    """Load users by id in one batch, with the relations the current field selects.

    Ids without a matching row are skipped.
    """
    loaders = info.context.loaders
    relations = requested_user_relations(info)
    if relations:
        loaders.users.request_relations(*relations)

    users = await loaders.users.load_many(list(user_ids))
    return [UserType.from_model(user) for user in users if user is not None]


@strawberry.type(name="User", description="Blog user")
class UserType:
    id: UUID
    name: str
    balance: float

    # Edge ids known from the loaded row; None when the edges were not loaded
    subscribed_author_ids: strawberry.Private[list[UUID] | None] = None
    subscriber_ids: strawberry.Private[list[UUID] | None] = None

    @strawberry.field(description="Profile of this user, if any")
    async def profile(self, info: Info[GraphQLContext, None]) -> ProfileType | None:
        profile = await info.context.loaders.profiles_by_user.load(self.id)
        return ProfileType.from_model(profile) if profile else None

    @strawberry.field(description="Posts written by this user")
    async def posts(self, info: Info[GraphQLContext, None]) -> list[PostType]:
        posts = await info.context.loaders.posts_by_author.load(self.id)
        return [PostType.from_model(post) for post in posts or []]

    @strawberry.field(description="Users this user is subscribed to")
    async def user_subscribed_to(self, info: Info[GraphQLContext, None]) -> list[UserType]:
        author_ids = self.subscribed_author_ids
        if author_ids is None:
            author_ids = await info.context.loaders.subscribed_authors.load(self.id) or []
        return await load_user_types(info, author_ids)

    @strawberry.field(description="Users subscribed to this user")
    async def subscribed_to_user(self, info: Info[GraphQLContext, None]) -> list[UserType]:
        subscriber_ids = self.subscriber_ids
        if subscriber_ids is None:
            subscriber_ids = await info.context.loaders.subscribers.load(self.id) or []
        return await load_user_types(info, subscriber_ids)

    @classmethod
    def from_model(cls, user: User) -> UserType:
        subscribed_author_ids = None
        if is_loaded(user, "user_subscribed_to"):
            subscribed_author_ids = [edge.author_id for edge in user.user_subscribed_to]

        subscriber_ids = None
        if is_loaded(user, "subscribed_to_user"):
            subscriber_ids = [edge.subscriber_id for edge in user.subscribed_to_user]

        return cls(
            id=user.id,
            name=user.name,
            balance=user.balance,
            subscribed_author_ids=subscribed_author_ids,
            subscriber_ids=subscriber_ids,
        )


# ============================================================================
# Input Types
# ============================================================================


@strawberry.input(name="CreateUserInput", description="Input for creating a user")
class CreateUserInput:
    name: str
    balance: float


@strawberry.input(name="ChangeUserInput", description="Input for changing a user")
class ChangeUserInput:
    """Only provided fields are changed."""

    name: str | None = None
    balance: float | None = None


__all__ = ["ChangeUserInput", "CreateUserInput", "UserType", "load_user_types"]
