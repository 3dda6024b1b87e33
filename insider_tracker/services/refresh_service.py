"""Refresh service: pulls the transactions feed into the store.

A failed refresh (unreachable provider, non-2xx, malformed body) is logged
and leaves the previous snapshot in place. No retries; the next scheduled
tick is the retry.
"""

from __future__ import annotations

from insider_tracker.collectors.base_collector import ProviderError
from insider_tracker.collectors.finnhub_collector import FinnhubCollector
from insider_tracker.config import settings
from insider_tracker.services.transaction_store import TransactionStore
from insider_tracker.utils.logger import logger


class TransactionRefresher:
    """Fetch, filter, swap."""

    def __init__(
        self,
        store: TransactionStore,
        collector: FinnhubCollector | None = None,
        limit: int | None = None,
    ) -> None:
        self.store = store
        self.collector = collector or FinnhubCollector()
        self.limit = limit or settings.TRANSACTIONS_LIMIT

    async def refresh(self) -> bool:
        """Run one refresh. Returns True when the snapshot was replaced."""
        try:
            transactions = await self.collector.fetch_us_transactions(self.limit)
        except ProviderError as e:
            logger.error(
                "[Refresh] Error fetching insider trading data: %s (status=%s)",
                e.message, e.status_code,
            )
            return False

        self.store.replace(transactions)
        logger.info(
            "[Refresh] Insider trading data updated: %d US equity transactions",
            len(transactions),
        )
        return True
