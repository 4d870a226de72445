"""GraphQL types for member tiers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from blog_gateway.features.member_types.models import MemberTypeId

if TYPE_CHECKING:
    from blog_gateway.features.member_types.models import MemberType

MemberTypeIdEnum = strawberry.enum(MemberTypeId, name="MemberTypeId", description="Member tier key")


@strawberry.type(name="MemberType", description="Member tier with discount and posting allowance")
class MemberTypeType:
    id: MemberTypeIdEnum
    discount: float
    posts_limit_per_month: int

    @classmethod
    def from_model(cls, member_type: MemberType) -> MemberTypeType:
        return cls(
            id=MemberTypeId(member_type.id),
            discount=member_type.discount,
            posts_limit_per_month=member_type.posts_limit_per_month,
        )


__all__ = ["MemberTypeIdEnum", "MemberTypeType"]
