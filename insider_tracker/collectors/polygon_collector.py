"""Polygon.io collector: most recent reported financials for one symbol."""

from __future__ import annotations

from typing import Any

import httpx

from insider_tracker.collectors.base_collector import BaseCollector
from insider_tracker.config import settings


class PolygonCollector(BaseCollector):
    provider = "Polygon"

    def __init__(
        self,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
    ) -> None:
        super().__init__(api_key=api_key or settings.POLYGON_API_KEY, client=client)
        self.base_url = (base_url or settings.POLYGON_URL).rstrip("/")

    async def fetch_latest_financials(self, symbol: str) -> dict[str, Any] | None:
        """Return the single most recent financials result, or None if there is none."""
        api_key = self._require_key()
        body = await self._get_json(
            f"{self.base_url}/vX/reference/financials",
            params={"ticker": symbol, "limit": 1, "apiKey": api_key},
        )
        results = body.get("results") if isinstance(body, dict) else None
        if not results or not isinstance(results, list):
            return None
        return results[0]
