"""Finnhub collector: latest insider transactions across all symbols.

Data source:
    GET {FINNHUB_URL}/stock/insider-transactions?limit=N&token=KEY
Response shape: ``{"data": [...], "symbol": ...}``.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from insider_tracker.collectors.base_collector import BaseCollector, ProviderError
from insider_tracker.config import settings
from insider_tracker.models.insider import Transaction, is_us_equity
from insider_tracker.utils.logger import logger


class FinnhubCollector(BaseCollector):
    """Fetches and filters the insider transactions feed."""

    provider = "Finnhub"

    def __init__(
        self,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
    ) -> None:
        super().__init__(api_key=api_key or settings.FINNHUB_API_KEY, client=client)
        self.base_url = (base_url or settings.FINNHUB_URL).rstrip("/")

    async def fetch_raw(self, limit: int | None = None) -> list[dict[str, Any]]:
        """Return the feed's ``data`` array, most recent first."""
        token = self._require_key()
        body = await self._get_json(
            f"{self.base_url}/stock/insider-transactions",
            params={"limit": limit or settings.TRANSACTIONS_LIMIT, "token": token},
        )
        items = body.get("data") if isinstance(body, dict) else None
        if not isinstance(items, list):
            raise ProviderError(self.provider, "response has no 'data' array")
        return items

    async def fetch_us_transactions(
        self, limit: int | None = None,
    ) -> tuple[Transaction, ...]:
        """Fetch the feed and keep US-equity records, in provider order."""
        items = await self.fetch_raw(limit)
        return filter_us_equities(items)


def filter_us_equities(items: list[Any]) -> tuple[Transaction, ...]:
    """Parse feed elements, dropping non-US symbols and unparseable records."""
    kept: list[Transaction] = []
    for item in items:
        if not isinstance(item, dict) or not is_us_equity(item.get("symbol")):
            continue
        try:
            kept.append(Transaction.model_validate(item))
        except ValidationError as e:
            logger.warning(
                "[Finnhub] Skipping malformed record for %s: %s",
                item.get("symbol"), e.error_count(),
            )
    return tuple(kept)
