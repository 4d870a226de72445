"""Mutation resolvers for the GraphQL API.

Provides write operations:
- createUser / changeUser / deleteUser
- createPost / changePost / deletePost
- createProfile / changeProfile / deleteProfile
- subscribeTo / unsubscribeFrom: add or remove a subscription edge

Each mutation runs in ``write_transaction``: it holds the session lock,
commits on success and rolls back on failure. Constraint violations and
missing targets surface as errors with ``extensions.code`` set. Afterwards
the loader entries the write made stale are cleared, so later fields of the
same request read the new state.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Annotated, Any
from uuid import UUID

import strawberry
from sqlalchemy.exc import IntegrityError
from strawberry.types import Info

from blog_gateway.core.database import ConstraintViolationError, NotFoundError
from blog_gateway.features.graphql.context import GraphQLContext
from blog_gateway.features.graphql.error_handler import (
    format_constraint_violation_error,
    format_not_found_error,
)
from blog_gateway.features.graphql.types import (
    ChangePostInput,
    ChangeProfileInput,
    ChangeUserInput,
    CreatePostInput,
    CreateProfileInput,
    CreateUserInput,
    PostType,
    ProfileType,
    UserType,
    load_user_types,
)
from blog_gateway.features.member_types.models import MemberTypeId
from blog_gateway.features.posts.models import Post
from blog_gateway.features.posts.repository import get_post_repository
from blog_gateway.features.profiles.models import Profile
from blog_gateway.features.profiles.repository import get_profile_repository
from blog_gateway.features.users.models import User
from blog_gateway.features.users.repository import get_user_repository

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

UUIDArg = Annotated[UUID, strawberry.argument(description="Entity UUID")]


@asynccontextmanager
async def write_transaction(
    ctx: GraphQLContext,
    model_name: str,
    operation: str,
) -> AsyncIterator[AsyncSession]:
    """Run a write under the session lock and commit it.

    Raises:
        GraphQLError: CONSTRAINT_VIOLATION or NOT_FOUND; the session is
            rolled back first
    """
    async with ctx.lock:
        try:
            yield ctx.session
            await ctx.session.commit()
        except IntegrityError as e:
            await _rollback(ctx)
            violation = ConstraintViolationError(model_name, operation, str(e.orig))
            logger.info("Write rejected: %s", violation)
            raise format_constraint_violation_error(violation) from e
        except ConstraintViolationError as e:
            await _rollback(ctx)
            logger.info("Write rejected: %s", e)
            raise format_constraint_violation_error(e) from e
        except NotFoundError as e:
            await _rollback(ctx)
            raise format_not_found_error(e.model_name, _identifier_label(e.identifier)) from e
        except Exception:
            await _rollback(ctx)
            raise


async def _rollback(ctx: GraphQLContext) -> None:
    # Rollback expires every loaded instance, including the ones loaders cached
    await ctx.session.rollback()
    ctx.loaders.clear_all()


def _identifier_label(identifier: dict[str, Any]) -> object:
    if set(identifier) == {"id"}:
        return identifier["id"]
    return ", ".join(f"{key}={value}" for key, value in identifier.items())


def _provided(dto: object, *fields: str) -> dict[str, Any]:
    """Fields of a Change* input that were given a value."""
    values = {field: getattr(dto, field) for field in fields}
    return {field: value for field, value in values.items() if value is not None}


async def _reload_user(info: Info[GraphQLContext, None], user_id: UUID) -> UserType:
    users = await load_user_types(info, [user_id])
    if not users:
        raise format_not_found_error("User", user_id)
    return users[0]


@strawberry.type(name="RootMutationType", description="Root mutation type")
class Mutation:
    """GraphQL Mutation resolvers."""

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    @strawberry.mutation(description="Create a new user")
    async def create_user(self, info: Info[GraphQLContext, None], dto: CreateUserInput) -> UserType:
        ctx = info.context
        async with write_transaction(ctx, "User", "create") as session:
            user = await get_user_repository().create(
                session, User(name=dto.name, balance=dto.balance)
            )

        logger.info("Created user: %s", user.id)
        ctx.loaders.forget_users(user.id)
        return await _reload_user(info, user.id)

    @strawberry.mutation(description="Change an existing user")
    async def change_user(
        self,
        info: Info[GraphQLContext, None],
        id: UUIDArg,
        dto: ChangeUserInput,
    ) -> UserType:
        ctx = info.context
        repo = get_user_repository()
        async with write_transaction(ctx, "User", "update") as session:
            user = await repo.get_or_raise(session, id)
            await repo.update(session, user, _provided(dto, "name", "balance"))

        logger.info("Changed user: %s", id)
        ctx.loaders.forget_users(id)
        return await _reload_user(info, id)

    @strawberry.mutation(description="Delete a user with its profile, posts and subscriptions")
    async def delete_user(self, info: Info[GraphQLContext, None], id: UUIDArg) -> None:
        ctx = info.context
        async with write_transaction(ctx, "User", "delete") as session:
            if not await get_user_repository().delete_by_id(session, id):
                raise NotFoundError("User", {"id": id})

        logger.info("Deleted user: %s", id)
        # The cascade reaches posts, profiles and other users' edge lists
        ctx.loaders.clear_all()

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    @strawberry.mutation(description="Create a new post")
    async def create_post(self, info: Info[GraphQLContext, None], dto: CreatePostInput) -> PostType:
        ctx = info.context
        async with write_transaction(ctx, "Post", "create") as session:
            post = await get_post_repository().create(
                session,
                Post(author_id=dto.author_id, title=dto.title, content=dto.content),
            )

        logger.info("Created post: %s", post.id)
        ctx.loaders.posts_by_author.clear(post.author_id)
        return PostType.from_model(post)

    @strawberry.mutation(description="Change an existing post")
    async def change_post(
        self,
        info: Info[GraphQLContext, None],
        id: UUIDArg,
        dto: ChangePostInput,
    ) -> PostType:
        ctx = info.context
        repo = get_post_repository()
        async with write_transaction(ctx, "Post", "update") as session:
            post = await repo.get_or_raise(session, id)
            await repo.update(session, post, _provided(dto, "title", "content"))

        logger.info("Changed post: %s", id)
        ctx.loaders.posts_by_author.clear(post.author_id)
        return PostType.from_model(post)

    @strawberry.mutation(description="Delete a post")
    async def delete_post(self, info: Info[GraphQLContext, None], id: UUIDArg) -> None:
        ctx = info.context
        repo = get_post_repository()
        async with write_transaction(ctx, "Post", "delete") as session:
            post = await repo.get_or_raise(session, id)
            author_id = post.author_id
            await repo.delete_by_id(session, id)

        logger.info("Deleted post: %s", id)
        ctx.loaders.posts_by_author.clear(author_id)

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    @strawberry.mutation(description="Create a profile for a user")
    async def create_profile(
        self,
        info: Info[GraphQLContext, None],
        dto: CreateProfileInput,
    ) -> ProfileType:
        ctx = info.context
        async with write_transaction(ctx, "Profile", "create") as session:
            profile = await get_profile_repository().create(
                session,
                Profile(
                    user_id=dto.user_id,
                    member_type_id=MemberTypeId(dto.member_type_id),
                    is_male=dto.is_male,
                    year_of_birth=dto.year_of_birth,
                ),
            )

        logger.info("Created profile: %s", profile.id)
        ctx.loaders.profiles_by_user.clear(profile.user_id)
        return ProfileType.from_model(profile)

    @strawberry.mutation(description="Change an existing profile")
    async def change_profile(
        self,
        info: Info[GraphQLContext, None],
        id: UUIDArg,
        dto: ChangeProfileInput,
    ) -> ProfileType:
        ctx = info.context
        repo = get_profile_repository()
        values = _provided(dto, "is_male", "year_of_birth", "member_type_id")
        if "member_type_id" in values:
            values["member_type_id"] = MemberTypeId(values["member_type_id"])

        async with write_transaction(ctx, "Profile", "update") as session:
            profile = await repo.get_or_raise(session, id)
            await repo.update(session, profile, values)

        logger.info("Changed profile: %s", id)
        ctx.loaders.profiles_by_user.clear(profile.user_id)
        return ProfileType.from_model(profile)

    @strawberry.mutation(description="Delete a profile")
    async def delete_profile(self, info: Info[GraphQLContext, None], id: UUIDArg) -> None:
        ctx = info.context
        repo = get_profile_repository()
        async with write_transaction(ctx, "Profile", "delete") as session:
            profile = await repo.get_or_raise(session, id)
            user_id = profile.user_id
            await repo.delete_by_id(session, id)

        logger.info("Deleted profile: %s", id)
        ctx.loaders.profiles_by_user.clear(user_id)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    @strawberry.mutation(description="Subscribe a user to an author; returns the subscriber")
    async def subscribe_to(
        self,
        info: Info[GraphQLContext, None],
        user_id: UUIDArg,
        author_id: UUIDArg,
    ) -> UserType:
        ctx = info.context
        async with write_transaction(ctx, "SubscribersOnAuthors", "subscribe") as session:
            await get_user_repository().subscribe(session, user_id, author_id)

        ctx.loaders.forget_users(user_id, author_id)
        return await _reload_user(info, user_id)

    @strawberry.mutation(description="Remove a subscription edge")
    async def unsubscribe_from(
        self,
        info: Info[GraphQLContext, None],
        user_id: UUIDArg,
        author_id: UUIDArg,
    ) -> None:
        ctx = info.context
        async with write_transaction(ctx, "SubscribersOnAuthors", "unsubscribe") as session:
            await get_user_repository().unsubscribe(session, user_id, author_id)

        ctx.loaders.forget_users(user_id, author_id)


__all__ = ["Mutation", "write_transaction"]
