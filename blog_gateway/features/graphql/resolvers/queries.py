"""Query resolvers for the GraphQL API.

Provides read operations:
- memberTypes, posts, profiles, users: list every row
- memberType(id), post(id), profile(id), user(id): lookup by id, null when missing

List queries read under the request's session lock and prime the loaders
with what they fetched, so nested fields resolve from cache.
"""

from __future__ import annotations

import logging
from typing import Annotated
from uuid import UUID

import strawberry
from strawberry.types import Info

from blog_gateway.features.graphql.context import GraphQLContext
from blog_gateway.features.graphql.selection import requested_user_relations
from blog_gateway.features.graphql.types import (
    MemberTypeIdEnum,
    MemberTypeType,
    PostType,
    ProfileType,
    UserType,
)
from blog_gateway.features.member_types.models import MemberTypeId
from blog_gateway.features.member_types.repository import get_member_type_repository
from blog_gateway.features.posts.repository import get_post_repository
from blog_gateway.features.profiles.repository import get_profile_repository
from blog_gateway.features.users.repository import get_user_repository

logger = logging.getLogger(__name__)

UUIDArg = Annotated[UUID, strawberry.argument(description="Entity UUID")]


@strawberry.type(name="RootQueryType", description="Root query type")
class Query:
    """GraphQL Query resolvers."""

    @strawberry.field(description="List all member tiers")
    async def member_types(self, info: Info[GraphQLContext, None]) -> list[MemberTypeType]:
        ctx = info.context
        async with ctx.lock:
            member_types = await get_member_type_repository().list(ctx.session)

        ctx.loaders.member_types.prime_many({mt.id: mt for mt in member_types})
        return [MemberTypeType.from_model(mt) for mt in member_types]

    @strawberry.field(description="Get a member tier by key")
    async def member_type(
        self,
        info: Info[GraphQLContext, None],
        id: MemberTypeIdEnum,
    ) -> MemberTypeType | None:
        member_type = await info.context.loaders.member_types.load(MemberTypeId(id))
        return MemberTypeType.from_model(member_type) if member_type else None

    @strawberry.field(description="List all posts")
    async def posts(self, info: Info[GraphQLContext, None]) -> list[PostType]:
        ctx = info.context
        async with ctx.lock:
            posts = await get_post_repository().list(ctx.session)
        return [PostType.from_model(post) for post in posts]

    @strawberry.field(description="Get a post by ID")
    async def post(self, info: Info[GraphQLContext, None], id: UUIDArg) -> PostType | None:
        ctx = info.context
        async with ctx.lock:
            post = await get_post_repository().get(ctx.session, id)
        return PostType.from_model(post) if post else None

    @strawberry.field(description="List all profiles")
    async def profiles(self, info: Info[GraphQLContext, None]) -> list[ProfileType]:
        ctx = info.context
        async with ctx.lock:
            profiles = await get_profile_repository().list(ctx.session)

        ctx.loaders.profiles_by_user.prime_many({p.user_id: p for p in profiles})
        return [ProfileType.from_model(profile) for profile in profiles]

    @strawberry.field(description="Get a profile by ID")
    async def profile(self, info: Info[GraphQLContext, None], id: UUIDArg) -> ProfileType | None:
        ctx = info.context
        async with ctx.lock:
            profile = await get_profile_repository().get(ctx.session, id)
        return ProfileType.from_model(profile) if profile else None

    @strawberry.field(description="List all users")
    async def users(self, info: Info[GraphQLContext, None]) -> list[UserType]:
        """List users, eagerly loading only the subscription edges the query selects.

        Every fetched user primes the user loader, so subscription fields
        that point back at listed users need no further user query.
        """
        ctx = info.context
        relations = requested_user_relations(info)

        async with ctx.lock:
            users = await get_user_repository().list_with_relations(ctx.session, relations)

        ctx.loaders.users.prime_many({user.id: user for user in users})
        logger.debug("Listed %d users with relations %s", len(users), relations)
        return [UserType.from_model(user) for user in users]

    @strawberry.field(description="Get a user by ID")
    async def user(self, info: Info[GraphQLContext, None], id: UUIDArg) -> UserType | None:
        loaders = info.context.loaders
        relations = requested_user_relations(info)
        if relations:
            loaders.users.request_relations(*relations)

        user = await loaders.users.load(id)
        return UserType.from_model(user) if user else None


__all__ = ["Query"]
