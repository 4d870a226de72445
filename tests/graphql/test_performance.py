"""Statement counts for nested queries.

Each nested relation must cost one bulk SELECT for the whole result, no
matter how many parent rows there are.
"""

from __future__ import annotations

import pytest

from blog_gateway.features.member_types.models import MemberTypeId
from blog_gateway.features.posts.models import Post
from blog_gateway.features.profiles.models import Profile
from blog_gateway.features.users.models import SubscribersOnAuthors, User

USER_COUNT = 50


@pytest.fixture
async def many_users(db_session):
    """50 users, each with two posts and a profile, each following the next."""
    users = [User(name=f"user-{i}", balance=float(i)) for i in range(USER_COUNT)]
    db_session.add_all(users)
    await db_session.flush()

    for i, user in enumerate(users):
        db_session.add_all([
            Post(author_id=user.id, title=f"p{i}-a", content="..."),
            Post(author_id=user.id, title=f"p{i}-b", content="..."),
            Profile(
                user_id=user.id,
                member_type_id=MemberTypeId.BASIC if i % 2 else MemberTypeId.BUSINESS,
                is_male=bool(i % 2),
                year_of_birth=1950 + i,
            ),
            SubscribersOnAuthors(subscriber_id=user.id, author_id=users[(i + 1) % USER_COUNT].id),
        ])
    await db_session.commit()
    return users


@pytest.mark.asyncio
class TestDataLoaderBatching:
    async def test_users_posts_issue_one_post_query(self, execute, many_users, statement_counter):
        statement_counter.reset()

        result = await execute("{ users { posts { title } } }")

        assert result.errors is None
        assert len(result.data["users"]) == USER_COUNT
        assert all(len(u["posts"]) == 2 for u in result.data["users"])
        assert len(statement_counter.selects_from("posts")) == 1
        assert len(statement_counter.selects) == 2

    async def test_profiles_and_member_types_batch(self, execute, many_users, statement_counter):
        statement_counter.reset()

        result = await execute("{ users { profile { yearOfBirth memberType { id } } } }")

        assert result.errors is None
        assert all(u["profile"]["memberType"] for u in result.data["users"])
        assert len(statement_counter.selects_from("profiles")) == 1
        assert len(statement_counter.selects_from("member_types")) == 1
        assert len(statement_counter.selects) == 3

    async def test_subscriptions_resolve_from_primed_users(
        self, execute, many_users, statement_counter
    ):
        statement_counter.reset()

        result = await execute(
            "{ users { name userSubscribedTo { name } subscribedToUser { name } } }"
        )

        assert result.errors is None
        by_name = {u["name"]: u for u in result.data["users"]}
        assert by_name["user-0"]["userSubscribedTo"] == [{"name": "user-1"}]
        assert by_name["user-0"]["subscribedToUser"] == [{"name": f"user-{USER_COUNT - 1}"}]
        # users + one SELECT ... IN per eagerly loaded edge relation
        assert len(statement_counter.selects) == 3

    async def test_unselected_relations_are_not_loaded(
        self, execute, many_users, statement_counter
    ):
        statement_counter.reset()

        result = await execute("{ users { id name } }")

        assert result.errors is None
        assert statement_counter.selects_from("subscribers_on_authors") == []
        assert len(statement_counter.selects) == 1

    async def test_nested_levels_batch_per_level(self, execute, many_users, statement_counter):
        statement_counter.reset()

        result = await execute(
            """
            {
                posts {
                    title
                }
                memberTypes { id }
                profiles { memberType { discount } }
            }
            """
        )

        assert result.errors is None
        # Listing member types primes the loader used by profile.memberType
        assert len(statement_counter.selects_from("member_types")) == 1

    async def test_single_user_subscriptions_batch_referenced_users(
        self, execute, many_users, statement_counter
    ):
        statement_counter.reset()

        result = await execute(
            """
            query Q($id: UUID!) {
                user(id: $id) {
                    userSubscribedTo { name userSubscribedTo { name } }
                }
            }
            """,
            {"id": str(many_users[0].id)},
        )

        assert result.errors is None
        assert result.data["user"]["userSubscribedTo"] == [
            {"name": "user-1", "userSubscribedTo": [{"name": "user-2"}]}
        ]
        # One user batch plus its edge SELECT per level
        assert len(statement_counter.selects_from("users")) == 3
