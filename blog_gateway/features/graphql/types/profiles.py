"""GraphQL types for profiles.

``memberType`` resolves through the member type loader, so listing many
profiles costs one member type query in total.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry
from strawberry.types import Info

from blog_gateway.features.graphql.context import GraphQLContext
from blog_gateway.features.graphql.types.member_types import MemberTypeIdEnum, MemberTypeType
from blog_gateway.features.member_types.models import MemberTypeId

if TYPE_CHECKING:
    from blog_gateway.features.profiles.models import Profile


@strawberry.type(name="Profile", description="Personal details and tier of a user")
class ProfileType:
    id: UUID
    is_male: bool
    year_of_birth: int
    user_id: UUID
    member_type_id: MemberTypeIdEnum

    @strawberry.field(description="Member tier of this profile")
    async def member_type(self, info: Info[GraphQLContext, None]) -> MemberTypeType | None:
        member_type = await info.context.loaders.member_types.load(MemberTypeId(self.member_type_id))
        return MemberTypeType.from_model(member_type) if member_type else None

    @classmethod
    def from_model(cls, profile: Profile) -> ProfileType:
        return cls(
            id=profile.id,
            is_male=profile.is_male,
            year_of_birth=profile.year_of_birth,
            user_id=profile.user_id,
            member_type_id=MemberTypeId(profile.member_type_id),
        )


# ============================================================================
# Input Types
# ============================================================================


@strawberry.input(name="CreateProfileInput", description="Input for creating a profile")
class CreateProfileInput:
    user_id: UUID
    member_type_id: MemberTypeIdEnum
    is_male: bool
    year_of_birth: int


@strawberry.input(name="ChangeProfileInput", description="Input for changing a profile")
class ChangeProfileInput:
    """Only provided fields are changed. ``userId`` cannot be changed."""

    is_male: bool | None = None
    year_of_birth: int | None = None
    member_type_id: MemberTypeIdEnum | None = None


__all__ = ["ChangeProfileInput", "CreateProfileInput", "ProfileType"]
