"""GraphQL type definitions.

This package contains Strawberry types for:
- Output types (MemberType, Post, Profile, User)
- Mutation inputs (Create*/Change* per entity)
"""

from __future__ import annotations

from blog_gateway.features.graphql.types.member_types import MemberTypeIdEnum, MemberTypeType
from blog_gateway.features.graphql.types.posts import ChangePostInput, CreatePostInput, PostType
from blog_gateway.features.graphql.types.profiles import (
    ChangeProfileInput,
    CreateProfileInput,
    ProfileType,
)
from blog_gateway.features.graphql.types.users import (
    ChangeUserInput,
    CreateUserInput,
    UserType,
    load_user_types,
)

__all__ = [
    "ChangePostInput",
    "ChangeProfileInput",
    "ChangeUserInput",
    "CreatePostInput",
    "CreateProfileInput",
    "CreateUserInput",
    "MemberTypeIdEnum",
    "MemberTypeType",
    "PostType",
    "ProfileType",
    "UserType",
    "load_user_types",
]
