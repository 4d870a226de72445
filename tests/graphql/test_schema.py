"""Tests for schema shape, validation, depth limiting and error masking."""

from __future__ import annotations

from uuid import uuid4

import pytest

from blog_gateway.features.graphql.dataloaders.users import UserDataLoader
from blog_gateway.features.graphql.error_handler import MASKED_ERROR_MESSAGE
from blog_gateway.features.graphql.schema import build_schema, schema

DEPTH_5 = "{ users { userSubscribedTo { userSubscribedTo { userSubscribedTo { userSubscribedTo { id } } } } } }"
DEPTH_6 = (
    "{ users { userSubscribedTo { userSubscribedTo { userSubscribedTo { "
    "userSubscribedTo { userSubscribedTo { id } } } } } } }"
)


class TestSchemaShape:
    def test_root_type_names(self):
        sdl = schema.as_str()

        assert "type RootQueryType" in sdl
        assert "type RootMutationType" in sdl
        assert "enum MemberTypeId" in sdl

    def test_inputs(self):
        sdl = schema.as_str()

        assert "input CreateUserInput" in sdl
        assert "input ChangeProfileInput" in sdl
        assert "subscribeTo(" in sdl
        assert "unsubscribeFrom(" in sdl


@pytest.mark.asyncio
class TestDepthLimit:
    async def test_depth_five_is_accepted(self, execute):
        result = await execute(DEPTH_5)

        assert result.errors is None
        assert result.data == {"users": []}

    async def test_depth_six_is_rejected_before_execution(self, execute, statement_counter):
        statement_counter.reset()

        result = await execute(DEPTH_6)

        assert result.data is None
        assert result.errors
        assert "exceeds maximum operation depth" in result.errors[0].message
        assert result.errors[0].extensions["code"] == "DEPTH_LIMIT_EXCEEDED"
        assert statement_counter.statements == []

    async def test_depth_bound_is_configurable(self, execute):
        shallow = build_schema(max_depth=1)

        result = await execute("{ users { posts { id } } }", schema=shallow)

        assert result.data is None
        assert result.errors


@pytest.mark.asyncio
class TestValidation:
    async def test_unknown_field(self, execute, statement_counter):
        statement_counter.reset()

        result = await execute("{ users { nickname } }")

        assert result.data is None
        assert result.errors[0].extensions["code"] == "VALIDATION_ERROR"
        assert statement_counter.statements == []

    async def test_malformed_document(self, execute):
        result = await execute("{ users { id ")

        assert result.data is None
        assert result.errors


@pytest.mark.asyncio
class TestBatchFailure:
    @pytest.fixture
    def broken_user_fetch(self, monkeypatch):
        calls = []

        async def fail(self, session, keys):
            calls.append(list(keys))
            msg = "connection reset"
            raise RuntimeError(msg)

        monkeypatch.setattr(UserDataLoader, "fetch", fail)
        return calls

    async def test_failure_reaches_every_sibling_and_is_masked(
        self, execute, broken_user_fetch
    ):
        result = await execute(
            "query Q($a: UUID!, $b: UUID!) { a: user(id: $a) { id } b: user(id: $b) { id } memberTypes { id } }",
            {"a": str(uuid4()), "b": str(uuid4())},
        )

        # Both lookups went out in a single batch
        assert len(broken_user_fetch) == 1
        assert len(broken_user_fetch[0]) == 2
        assert result.data["a"] is None
        assert result.data["b"] is None
        # Sibling fields that did not fail still resolve
        assert len(result.data["memberTypes"]) == 2
        assert {tuple(e.path) for e in result.errors} == {("a",), ("b",)}
        for error in result.errors:
            assert error.message == MASKED_ERROR_MESSAGE
            assert error.extensions["code"] == "INTERNAL_ERROR"

    async def test_debug_schema_keeps_message(self, execute, broken_user_fetch):
        debug_schema = build_schema(debug=True)

        result = await execute(
            "query Q($id: UUID!) { user(id: $id) { id } }",
            {"id": str(uuid4())},
            schema=debug_schema,
        )

        assert result.errors[0].message == "connection reset"
        assert result.errors[0].extensions["code"] == "INTERNAL_ERROR"

    async def test_retry_in_same_request_fetches_again(
        self, execute, make_context, broken_user_fetch
    ):
        context = make_context()
        query = "query Q($id: UUID!) { user(id: $id) { id } }"
        variables = {"id": str(uuid4())}

        await execute(query, variables, context=context)
        await execute(query, variables, context=context)

        assert len(broken_user_fetch) == 2
