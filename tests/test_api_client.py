"""Tests for the GraphQL client."""

from __future__ import annotations

import httpx
import pytest

from wikit.api import GraphQLClient
from wikit.config import WikitConfig, add_instance
from wikit.errors import ApiError, GraphQLError, TransportError


@pytest.mark.asyncio
async def test_execute_sends_bearer_token(fake_wiki) -> None:
    async with GraphQLClient(
        "https://wiki.test/graphql", "secret", transport=fake_wiki.transport()
    ) as client:
        data = await client.execute("query { pages { list(limit: 1) { id } } }")

    assert len(data["pages"]["list"]) == 5
    request = fake_wiki.requests[0]
    assert request["headers"]["authorization"] == "Bearer secret"
    assert request["body"]["variables"] == {}


@pytest.mark.asyncio
async def test_http_error_raises_api_error(fake_wiki) -> None:
    fake_wiki.status_code = 502
    client = GraphQLClient("https://wiki.test/graphql", "secret", transport=fake_wiki.transport())

    with pytest.raises(ApiError) as exc_info:
        await client.execute("query { system { info { currentVersion } } }")
    await client.close()

    assert exc_info.value.status_code == 502
    assert "upstream failure" in str(exc_info.value)


@pytest.mark.asyncio
async def test_graphql_errors_are_raised(fake_wiki) -> None:
    async with GraphQLClient(
        "https://wiki.test/graphql", "secret", transport=fake_wiki.transport()
    ) as client:
        with pytest.raises(GraphQLError) as exc_info:
            await client.execute("query { nonsense }")

    assert exc_info.value.messages == ["Unknown query"]


@pytest.mark.asyncio
async def test_unreachable_endpoint_raises_transport_error(fake_wiki) -> None:
    fake_wiki.unreachable = True
    async with GraphQLClient(
        "https://wiki.test/graphql", "secret", transport=fake_wiki.transport()
    ) as client:
        with pytest.raises(TransportError, match="Cannot reach https://wiki.test/graphql"):
            await client.execute("query { system { info { currentVersion } } }")


@pytest.mark.asyncio
async def test_non_json_body_raises_api_error(fake_wiki) -> None:
    """A login page served with status 200 is an API error, not a crash."""
    fake_wiki.raw_body = "<html>login</html>"
    async with GraphQLClient(
        "https://wiki.test/graphql", "secret", transport=fake_wiki.transport()
    ) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.execute("query { system { info { currentVersion } } }")

    assert exc_info.value.status_code == 200
    assert "<html>login</html>" in exc_info.value.body


@pytest.mark.asyncio
async def test_json_that_is_not_an_object_raises_api_error(fake_wiki) -> None:
    fake_wiki.raw_body = "[1, 2, 3]"
    async with GraphQLClient(
        "https://wiki.test/graphql", "secret", transport=fake_wiki.transport()
    ) as client:
        with pytest.raises(ApiError):
            await client.execute("query { pages { list(limit: 1) { id } } }")


def test_from_config_uses_default_instance() -> None:
    config = add_instance(WikitConfig(), "prod", "https://prod.test/graphql", "k1")
    config = add_instance(config, "staging", "https://staging.test/graphql", "k2", make_default=True)

    client = GraphQLClient.from_config(config)
    explicit = GraphQLClient.from_config(config, "prod")

    assert client.instance_id == "staging"
    assert client.url == "https://staging.test/graphql"
    assert explicit.instance_id == "prod"
