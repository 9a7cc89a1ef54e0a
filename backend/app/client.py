"""
Forum API Client.

Thin async wrapper used by client code to call the forum API.

The response body is always decoded as JSON and returned as-is:
error responses come back like successful ones, and a body that is not
JSON raises when decoded.
"""

from typing import Any

import httpx
from loguru import logger

from app.core.config import settings


class ApiClient:
    """
    Async client for the forum REST API.

    Usage:
        async with ApiClient() as client:
            forums = await client.fetch("/forums")
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        token: str | None = None,
    ) -> None:
        """
        Initialize API client.

        Args:
            base_url: API base URL (default from settings)
            timeout: Request timeout in seconds
            transport: Custom httpx transport
            token: Bearer token sent with every request
        """
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = timeout or settings.api_timeout
        headers = {"Authorization": f"Bearer {token}"} if token else None
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            transport=transport,
            headers=headers,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close HTTP client."""
        await self._client.aclose()

    async def fetch(self, path: str, method: str = "GET", **options: Any) -> Any:
        """
        Request `path` and return the decoded JSON body.

        Args:
            path: API path appended to the base URL
            method: HTTP method
            **options: Extra httpx request arguments (json, params, headers...)

        Returns:
            Decoded JSON, whatever the status code

        Raises:
            ValueError: If the body is not valid JSON
            httpx.RequestError: If the API is unreachable
        """
        url = f"{self.base_url}{path}"
        response = await self._client.request(method, url, **options)
        logger.debug(f"{method} {url} -> {response.status_code}")
        return response.json()


async def api_fetch(path: str, **options: Any) -> Any:
    """One-shot request against settings.api_url."""
    async with ApiClient() as client:
        return await client.fetch(path, **options)
