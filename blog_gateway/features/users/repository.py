"""Repository for users and subscription edges."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete as sql_delete
from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from blog_gateway.core.database import BaseRepository, ConstraintViolationError, NotFoundError
from blog_gateway.features.users.models import SubscribersOnAuthors, User

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

# Relationship attribute names on User that can be eagerly projected
USER_RELATIONS = ("user_subscribed_to", "subscribed_to_user")


def user_relation_options(relations: Iterable[str]) -> list:
    """Build ``selectinload`` options for the requested user relations.

    Raises:
        ValueError: If a name is not a known subscription relation
    """
    options = []
    for relation in sorted(set(relations)):
        if relation not in USER_RELATIONS:
            msg = f"Unknown user relation: {relation!r}"
            raise ValueError(msg)
        options.append(selectinload(getattr(User, relation)))
    return options


class UserRepository(BaseRepository[User]):
    """Repository for the User model.

    Inherits basic CRUD from BaseRepository. Feature-specific methods
    manage the ``subscribers_on_authors`` edges.
    """

    def __init__(self) -> None:
        """Initialize with User model."""
        super().__init__(User)

    async def list_with_relations(
        self,
        session: AsyncSession,
        relations: Iterable[str] = (),
    ) -> Sequence[User]:
        """List all users with the requested edge relations eagerly loaded.

        One SELECT on users plus one SELECT ... IN per requested relation.
        Instances already in the session are refreshed.
        """
        stmt = (
            select(User)
            .options(*user_relation_options(relations))
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        users = result.scalars().all()

        self._lazy.debug(
            lambda: f"db.list_with_relations: User {sorted(set(relations))} -> {len(users)} items"
        )
        return users

    async def subscribe(
        self,
        session: AsyncSession,
        subscriber_id: UUID,
        author_id: UUID,
    ) -> None:
        """Create a subscription edge.

        Written with a Core INSERT so the edge never enters the identity map.

        Args:
            session: Database session (caller commits)
            subscriber_id: User who follows
            author_id: User being followed

        Raises:
            ConstraintViolationError: If the edge exists or either user is missing
        """
        stmt = insert(SubscribersOnAuthors).values(
            subscriber_id=subscriber_id, author_id=author_id
        )
        try:
            await session.execute(stmt)
        except IntegrityError as e:
            raise ConstraintViolationError("SubscribersOnAuthors", "subscribe", str(e.orig)) from e

        self._logger.info(
            "Subscription created",
            extra={"subscriber_id": str(subscriber_id), "author_id": str(author_id)},
        )

    async def unsubscribe(
        self,
        session: AsyncSession,
        subscriber_id: UUID,
        author_id: UUID,
    ) -> None:
        """Delete a subscription edge by its composite key.

        Args:
            session: Database session (caller commits)
            subscriber_id: User who follows
            author_id: User being followed

        Raises:
            NotFoundError: If no such edge exists
        """
        stmt = sql_delete(SubscribersOnAuthors).where(
            SubscribersOnAuthors.subscriber_id == subscriber_id,
            SubscribersOnAuthors.author_id == author_id,
        )
        result = await session.execute(stmt)
        if not result.rowcount:
            raise NotFoundError(
                "SubscribersOnAuthors",
                {"subscriber_id": subscriber_id, "author_id": author_id},
            )

        self._logger.info(
            "Subscription removed",
            extra={"subscriber_id": str(subscriber_id), "author_id": str(author_id)},
        )


_user_repository: UserRepository | None = None


def get_user_repository() -> UserRepository:
    """Get the shared UserRepository instance."""
    global _user_repository
    if _user_repository is None:
        _user_repository = UserRepository()
    return _user_repository
