"""SQLAlchemy models for member tiers."""
from __future__ import annotations

from enum import StrEnum

from sqlalchemy import Enum, Float, Integer
from sqlalchemy.orm import Mapped, mapped_column

from blog_gateway.core.database import Base


class MemberTypeId(StrEnum):
    """Closed set of member tier keys."""

    BASIC = "BASIC"
    BUSINESS = "BUSINESS"


def member_type_id_type() -> Enum:
    """Column type for tier keys, stored as VARCHAR + CHECK on every backend."""
    return Enum(
        MemberTypeId,
        name="member_type_id",
        native_enum=False,
        create_constraint=True,
        length=16,
        values_callable=lambda enum: [member.value for member in enum],
    )


class MemberType(Base):
    """Member tier with its discount and monthly post allowance."""

    __tablename__ = "member_types"

    id: Mapped[MemberTypeId] = mapped_column(member_type_id_type(), primary_key=True)
    discount: Mapped[float] = mapped_column(Float(), nullable=False)
    posts_limit_per_month: Mapped[int] = mapped_column(Integer(), nullable=False)

    def __repr__(self) -> str:
        return f"<MemberType(id={self.id!s})>"
