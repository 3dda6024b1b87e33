"""Base collector: shared HTTP plumbing for the three data providers.

Uses a module-level shared httpx.AsyncClient for connection pooling.
Every failure (unreachable, non-2xx, undecodable body) is raised as
ProviderError so callers only handle one exception type.
"""

from __future__ import annotations

from typing import Any

import httpx

from insider_tracker.config import settings
from insider_tracker.utils.logger import logger

# Created lazily on first use; closed on application shutdown.
_shared_client: httpx.AsyncClient | None = None


class ProviderError(Exception):
    """A provider call failed.

    ``status_code`` is the provider's HTTP status when it answered,
    None when it was unreachable or never called.
    """

    def __init__(
        self, provider: str, message: str, status_code: int | None = None,
    ) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message
        self.status_code = status_code


async def get_shared_client() -> httpx.AsyncClient:
    """Get or create the shared httpx.AsyncClient."""
    global _shared_client  # noqa: PLW0603
    if _shared_client is None or _shared_client.is_closed:
        _shared_client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.HTTP_TIMEOUT),
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
        )
    return _shared_client


async def close_shared_client() -> None:
    global _shared_client  # noqa: PLW0603
    if _shared_client is not None and not _shared_client.is_closed:
        await _shared_client.aclose()
    _shared_client = None


class BaseCollector:
    """Common GET-and-decode logic. Subclasses set ``provider``."""

    provider: str = ""

    def __init__(
        self,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self._client = client

    async def _client_for_request(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        return await get_shared_client()

    def _require_key(self) -> str:
        """Return the API key or fail the call without touching the network."""
        if not self.api_key:
            logger.warning("[%s] API key is not configured", self.provider)
            raise ProviderError(self.provider, "API key is not configured")
        return self.api_key

    async def _get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET ``url`` and return the decoded JSON body."""
        client = await self._client_for_request()
        try:
            resp = await client.get(url, params=params, headers=headers)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise ProviderError(
                self.provider, e.response.text[:200] or f"HTTP {status}", status,
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(
                self.provider, str(e) or type(e).__name__,
            ) from e

        try:
            return resp.json()
        except ValueError as e:
            raise ProviderError(
                self.provider, "response body is not valid JSON",
            ) from e
