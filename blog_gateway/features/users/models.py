"""SQLAlchemy models for users and subscriptions."""
from __future__ import annotations

from uuid import UUID

from sqlalchemy import Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blog_gateway.core.database import Base, UUIDPKMixin


class SubscribersOnAuthors(Base):
    """Directed subscription edge: ``subscriber_id`` follows ``author_id``.

    The composite primary key makes each (subscriber, author) pair unique.
    Both sides cascade when either user is deleted.
    """

    __tablename__ = "subscribers_on_authors"

    subscriber_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    author_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<SubscribersOnAuthors({self.subscriber_id} -> {self.author_id})>"


class User(UUIDPKMixin, Base):
    """Blog user.

    The two edge collections are read-only projections that must be eagerly
    loaded (``selectinload``); touching them unloaded raises instead of
    issuing a per-row query.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    balance: Mapped[float] = mapped_column(Float(), nullable=False)

    # Edges where this user is the subscriber (authors this user follows)
    user_subscribed_to: Mapped[list[SubscribersOnAuthors]] = relationship(
        SubscribersOnAuthors,
        foreign_keys=[SubscribersOnAuthors.subscriber_id],
        lazy="raise",
        viewonly=True,
    )
    # Edges where this user is the author (this user's subscribers)
    subscribed_to_user: Mapped[list[SubscribersOnAuthors]] = relationship(
        SubscribersOnAuthors,
        foreign_keys=[SubscribersOnAuthors.author_id],
        lazy="raise",
        viewonly=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name={self.name!r})>"
