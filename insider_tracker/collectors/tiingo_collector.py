"""Tiingo collector: end-of-day price series for one symbol."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from insider_tracker.collectors.base_collector import BaseCollector, ProviderError
from insider_tracker.config import settings


class TiingoCollector(BaseCollector):
    """Forwards price requests to Tiingo; token goes in the Authorization header."""

    provider = "Tiingo"

    def __init__(
        self,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
    ) -> None:
        super().__init__(api_key=api_key or settings.TIINGO_API_KEY, client=client)
        self.base_url = (base_url or settings.TIINGO_URL).rstrip("/")

    async def fetch_prices(self, symbol: str) -> list[dict[str, Any]]:
        """Daily price records for ``symbol``; empty list when the provider has none."""
        token = self._require_key()
        body = await self._get_json(
            f"{self.base_url}/tiingo/daily/{quote(symbol, safe='')}/prices",
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Token {token}",
            },
        )
        if not isinstance(body, list):
            raise ProviderError(self.provider, "expected a JSON array of prices")
        return body
