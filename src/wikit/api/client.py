"""GraphQL client for the Wiki.js API."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from wikit.config.schema import InstanceConfig, WikitConfig
from wikit.errors import ApiError, GraphQLError, TransportError

logger = logging.getLogger(__name__)


def _query_preview(query: str) -> str:
    """First non-empty line of a query, for logs."""
    for line in query.strip().splitlines():
        if line.strip():
            return line.strip()[:100]
    return ""


class GraphQLClient:
    """Async GraphQL client for one instance.

    Usage:
        async with GraphQLClient(url, key) as client:
            data = await client.execute("query { pages { list { id } } }")
    """

    def __init__(
        self,
        url: str,
        key: str,
        timeout: float = 30.0,
        instance_id: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize client.

        Args:
            url: GraphQL endpoint (e.g. https://wiki.example.com/graphql)
            key: API key sent as a bearer token
            timeout: Request timeout in seconds
            instance_id: Instance id, used in logs
            transport: Optional httpx transport (tests)
        """
        self.url = url
        self.instance_id = instance_id
        self._timeout = timeout
        self._headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {key}",
        }
        self._transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_config(
        cls,
        config: WikitConfig,
        instance: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "GraphQLClient":
        """Build a client for ``instance`` (or the default instance)."""
        instance_id, settings = config.get_instance(instance)
        return cls.from_instance(instance_id, settings, config.http.timeout, transport)

    @classmethod
    def from_instance(
        cls,
        instance_id: str,
        settings: InstanceConfig,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "GraphQLClient":
        return cls(
            settings.url,
            settings.key,
            timeout=timeout,
            instance_id=instance_id,
            transport=transport,
        )

    async def __aenter__(self) -> "GraphQLClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self.client is not None:
            await self.client.aclose()
            self.client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self.client is None:
            self.client = httpx.AsyncClient(
                timeout=self._timeout,
                headers=self._headers,
                transport=self._transport,
            )
        return self.client

    async def execute(
        self,
        query: str,
        variables: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Run a query or mutation and return its ``data`` object.

        Raises:
            ApiError: Non-2xx HTTP status or a body that is not a JSON object
            GraphQLError: The response carried GraphQL errors
            TransportError: The endpoint could not be reached
        """
        preview = _query_preview(query)
        logger.info(f"GraphQL request [{self.instance_id}]: {preview}")
        client = self._ensure_client()

        try:
            response = await client.post(
                self.url, json={"query": query, "variables": variables or {}}
            )
        except httpx.RequestError as exc:
            logger.error(f"GraphQL transport error [{self.instance_id}]: {exc}")
            raise TransportError(self.url, str(exc) or exc.__class__.__name__) from exc

        if response.is_error:
            logger.error(
                f"GraphQL fetch failed [{self.instance_id}] status={response.status_code}: {preview}"
            )
            raise ApiError(response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error(f"GraphQL response is not JSON [{self.instance_id}]: {exc}")
            raise ApiError(response.status_code, response.text) from exc
        if not isinstance(payload, dict):
            raise ApiError(response.status_code, response.text)

        errors = payload.get("errors") or []
        if errors:
            messages = [str(error.get("message", error)) for error in errors]
            logger.error(f"GraphQL returned errors [{self.instance_id}]: {messages}")
            raise GraphQLError(messages)

        logger.debug(f"GraphQL request succeeded [{self.instance_id}]: {preview}")
        return payload.get("data") or {}
