"""Query service: the three read operations behind the HTTP API.

Transactions come from the in-memory store; prices and financials are
forwarded to their providers on every call, uncached. ProviderError
propagates to the caller untouched.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from insider_tracker.collectors.base_collector import ProviderError
from insider_tracker.collectors.polygon_collector import PolygonCollector
from insider_tracker.collectors.tiingo_collector import TiingoCollector
from insider_tracker.models.insider import Transaction
from insider_tracker.models.market_data import PriceSeries
from insider_tracker.services.transaction_store import TransactionStore
from insider_tracker.utils.logger import logger


class QueryService:
    def __init__(
        self,
        store: TransactionStore,
        prices: TiingoCollector | None = None,
        financials: PolygonCollector | None = None,
    ) -> None:
        self.store = store
        self.prices = prices or TiingoCollector()
        self.financials = financials or PolygonCollector()

    def get_transactions(self) -> tuple[Transaction, ...]:
        return self.store.snapshot

    async def get_price_series(self, symbol: str) -> PriceSeries | None:
        """Daily prices for ``symbol``; None when the provider has no data."""
        records = await self.prices.fetch_prices(symbol)
        if not records:
            logger.warning("[Tiingo] No stock price data available for %s", symbol)
            return None
        try:
            series = PriceSeries(symbol=symbol, records=records)
        except ValidationError as e:
            raise ProviderError(
                self.prices.provider, f"malformed price records ({e.error_count()} errors)",
            ) from e
        logger.info("[Tiingo] Stock price data fetched for %s", symbol)
        return series

    async def get_financials(self, symbol: str) -> dict[str, Any] | None:
        """Most recent financials result for ``symbol``; None when there is none."""
        result = await self.financials.fetch_latest_financials(symbol)
        if result is None:
            logger.warning("[Polygon] No financial data found for %s", symbol)
        return result
