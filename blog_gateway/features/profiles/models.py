"""SQLAlchemy models for profiles."""
from __future__ import annotations

from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from blog_gateway.core.database import Base, UUIDPKMixin
from blog_gateway.features.member_types.models import MemberTypeId, member_type_id_type


class Profile(UUIDPKMixin, Base):
    """Profile of a user.

    ``user_id`` is unique, so each user has at most one profile. The profile
    is removed with its user or its member tier.
    """

    __tablename__ = "profiles"

    is_male: Mapped[bool] = mapped_column(Boolean(), nullable=False)
    year_of_birth: Mapped[int] = mapped_column(Integer(), nullable=False)
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    member_type_id: Mapped[MemberTypeId] = mapped_column(
        member_type_id_type(),
        ForeignKey("member_types.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, user_id={self.user_id})>"
