"""Tests for GraphQL query resolvers."""

from __future__ import annotations

from uuid import uuid4

import pytest

from blog_gateway.features.member_types.models import MemberTypeId

USER_QUERY = """
    query GetUser($id: UUID!) {
        user(id: $id) {
            id
            name
            balance
        }
    }
"""


@pytest.mark.asyncio
class TestLookups:
    async def test_create_then_read_user(self, execute):
        created = await execute(
            """
            mutation { createUser(dto: {name: "Ann", balance: 100}) { id } }
            """
        )
        assert created.errors is None
        user_id = created.data["createUser"]["id"]

        result = await execute(USER_QUERY, {"id": user_id})

        assert result.errors is None
        assert result.data["user"] == {"id": user_id, "name": "Ann", "balance": 100}

    @pytest.mark.parametrize("field", ["user", "post", "profile"])
    async def test_missing_id_returns_null(self, execute, field):
        result = await execute(f"query Q($id: UUID!) {{ {field}(id: $id) {{ id }} }}", {"id": str(uuid4())})

        assert result.errors is None
        assert result.data == {field: None}

    async def test_member_type_by_key(self, execute):
        result = await execute(
            "{ memberType(id: BUSINESS) { id discount postsLimitPerMonth } }"
        )

        assert result.errors is None
        assert result.data["memberType"] == {
            "id": "BUSINESS",
            "discount": pytest.approx(7.7),
            "postsLimitPerMonth": 100,
        }

    async def test_unknown_member_type_key_is_validation_error(self, execute):
        result = await execute("{ memberType(id: PLATINUM) { id } }")

        assert result.data is None
        assert result.errors
        assert result.errors[0].extensions["code"] == "VALIDATION_ERROR"

    async def test_post_by_id(self, execute, create_user, create_post):
        author = await create_user(name="writer")
        post = await create_post(author, title="Hello", content="World")

        result = await execute(
            "query Q($id: UUID!) { post(id: $id) { title content authorId } }",
            {"id": str(post.id)},
        )

        assert result.errors is None
        assert result.data["post"] == {
            "title": "Hello",
            "content": "World",
            "authorId": str(author.id),
        }

    async def test_profile_with_member_type(self, execute, create_user, create_profile):
        user = await create_user()
        profile = await create_profile(
            user, MemberTypeId.BUSINESS, is_male=False, year_of_birth=1985
        )

        result = await execute(
            """
            query Q($id: UUID!) {
                profile(id: $id) {
                    isMale
                    yearOfBirth
                    userId
                    memberTypeId
                    memberType { id postsLimitPerMonth }
                }
            }
            """,
            {"id": str(profile.id)},
        )

        assert result.errors is None
        assert result.data["profile"] == {
            "isMale": False,
            "yearOfBirth": 1985,
            "userId": str(user.id),
            "memberTypeId": "BUSINESS",
            "memberType": {"id": "BUSINESS", "postsLimitPerMonth": 100},
        }


@pytest.mark.asyncio
class TestLists:
    async def test_member_types(self, execute):
        result = await execute("{ memberTypes { id discount } }")

        assert result.errors is None
        assert sorted(mt["id"] for mt in result.data["memberTypes"]) == ["BASIC", "BUSINESS"]

    async def test_posts_and_profiles(self, execute, create_user, create_post, create_profile):
        ann = await create_user(name="Ann")
        bob = await create_user(name="Bob")
        await create_post(ann, title="a1")
        await create_post(bob, title="b1")
        await create_profile(ann)

        result = await execute("{ posts { title } profiles { userId } }")

        assert result.errors is None
        assert sorted(p["title"] for p in result.data["posts"]) == ["a1", "b1"]
        assert result.data["profiles"] == [{"userId": str(ann.id)}]

    async def test_users_with_nested_relations(
        self, execute, create_user, create_post, create_profile, subscribe
    ):
        ann = await create_user(name="Ann")
        bob = await create_user(name="Bob")
        await create_post(ann, title="hello")
        await create_profile(bob, MemberTypeId.BASIC)
        await subscribe(bob, ann)

        result = await execute(
            """
            {
                users {
                    name
                    posts { title }
                    profile { memberType { id } }
                    userSubscribedTo { name }
                    subscribedToUser { name }
                }
            }
            """
        )

        assert result.errors is None
        users = {u["name"]: u for u in result.data["users"]}
        assert users["Ann"] == {
            "name": "Ann",
            "posts": [{"title": "hello"}],
            "profile": None,
            "userSubscribedTo": [],
            "subscribedToUser": [{"name": "Bob"}],
        }
        assert users["Bob"] == {
            "name": "Bob",
            "posts": [],
            "profile": {"memberType": {"id": "BASIC"}},
            "userSubscribedTo": [{"name": "Ann"}],
            "subscribedToUser": [],
        }

    async def test_relations_selected_through_fragments(self, execute, create_user, subscribe):
        ann = await create_user(name="Ann")
        bob = await create_user(name="Bob")
        await subscribe(bob, ann)

        result = await execute(
            """
            query {
                users { name ...Following }
            }
            fragment Following on User {
                ... on User { userSubscribedTo { name } }
            }
            """
        )

        assert result.errors is None
        users = {u["name"]: u["userSubscribedTo"] for u in result.data["users"]}
        assert users == {"Ann": [], "Bob": [{"name": "Ann"}]}

    async def test_nested_subscription_traversal(self, execute, create_user, subscribe):
        a = await create_user(name="A")
        b = await create_user(name="B")
        c = await create_user(name="C")
        await subscribe(a, b)
        await subscribe(b, c)

        result = await execute(
            """
            query Q($id: UUID!) {
                user(id: $id) {
                    userSubscribedTo {
                        name
                        userSubscribedTo { name subscribedToUser { name } }
                    }
                }
            }
            """,
            {"id": str(a.id)},
        )

        assert result.errors is None
        assert result.data["user"] == {
            "userSubscribedTo": [
                {
                    "name": "B",
                    "userSubscribedTo": [{"name": "C", "subscribedToUser": [{"name": "B"}]}],
                }
            ]
        }
