"""HTTP tests for the GraphQL endpoint through the FastAPI app."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

GRAPHQL_PATH = "/graphql"


@pytest.mark.asyncio
class TestGraphQLEndpoint:
    async def test_post_query(self, client):
        response = await client.post(GRAPHQL_PATH, json={"query": "{ memberTypes { id } }"})

        assert response.status_code == 200
        body = response.json()
        assert "errors" not in body
        assert sorted(mt["id"] for mt in body["data"]["memberTypes"]) == ["BASIC", "BUSINESS"]

    async def test_post_mutation_with_variables(self, client):
        created = await client.post(
            GRAPHQL_PATH,
            json={
                "query": "mutation C($dto: CreateUserInput!) { createUser(dto: $dto) { id } }",
                "variables": {"dto": {"name": "Ann", "balance": 100}},
            },
        )
        user_id = created.json()["data"]["createUser"]["id"]

        response = await client.post(
            GRAPHQL_PATH,
            json={
                "query": "query U($id: UUID!) { user(id: $id) { name balance } }",
                "variables": {"id": user_id},
            },
        )

        assert response.json()["data"] == {"user": {"name": "Ann", "balance": 100.0}}

    async def test_depth_limit_over_http(self, client):
        query = (
            "{ users { userSubscribedTo { userSubscribedTo { userSubscribedTo { "
            "userSubscribedTo { userSubscribedTo { id } } } } } } }"
        )

        response = await client.post(GRAPHQL_PATH, json={"query": query})

        body = response.json()
        assert body["data"] is None
        assert body["errors"][0]["extensions"]["code"] == "DEPTH_LIMIT_EXCEEDED"

    async def test_get_is_rejected(self, client):
        response = await client.get(GRAPHQL_PATH, params={"query": "{ memberTypes { id } }"})

        assert response.status_code >= 400

    async def test_correlation_id_is_echoed(self, client):
        response = await client.post(
            GRAPHQL_PATH,
            json={"query": "{ posts { id } }"},
            headers={"X-Correlation-ID": "req-42"},
        )

        assert response.headers["X-Correlation-ID"] == "req-42"

    async def test_correlation_id_is_generated(self, client):
        response = await client.post(GRAPHQL_PATH, json={"query": "{ posts { id } }"})

        assert response.headers["X-Correlation-ID"]


@pytest.mark.asyncio
class TestRouterSettings:
    async def test_custom_path_from_settings(self, session_factory, db_session):
        from fastapi import FastAPI

        from blog_gateway.app.router import setup_routers
        from blog_gateway.core.dependencies.database import get_db_session
        from blog_gateway.core.settings.graphql import GraphQLSettings

        application = FastAPI()
        setup_routers(application, GraphQLSettings(path="/api/graph"))

        async def _override_session():
            async with session_factory() as session:
                yield session

        application.dependency_overrides[get_db_session] = _override_session

        async with AsyncClient(
            transport=ASGITransport(app=application), base_url="http://test"
        ) as ac:
            moved = await ac.post("/api/graph", json={"query": "{ memberTypes { id } }"})
            default = await ac.post(GRAPHQL_PATH, json={"query": "{ memberTypes { id } }"})

        assert moved.status_code == 200
        assert len(moved.json()["data"]["memberTypes"]) == 2
        assert default.status_code == 404
