"""Tests for the transaction store and the refresh operation.

Covers: failed refresh keeps the old snapshot (same object), each snapshot
is the filtered output of exactly one provider response, overlapping
refreshes resolve last-writer-wins.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from insider_tracker.collectors.base_collector import ProviderError
from insider_tracker.collectors.finnhub_collector import FinnhubCollector, filter_us_equities
from insider_tracker.models.insider import Transaction
from insider_tracker.services.refresh_service import TransactionRefresher
from insider_tracker.services.transaction_store import TransactionStore


def _tx(symbol: str) -> Transaction:
    return Transaction(symbol=symbol, transaction_code="P", change=1)


class TestTransactionStore:

    def test_starts_empty(self) -> None:
        store = TransactionStore()
        assert store.snapshot == ()
        assert store.refreshed_at is None
        assert store.stats()["refresh_count"] == 0

    def test_replace_swaps_whole_snapshot(self) -> None:
        store = TransactionStore()
        first = store.snapshot
        store.replace((_tx("AAPL"), _tx("MSFT")))
        assert store.snapshot is not first
        assert [t.symbol for t in store.snapshot] == ["AAPL", "MSFT"]
        assert store.refreshed_at is not None
        assert store.stats()["transactions"] == 2

    def test_reader_copy_unaffected_by_later_replace(self) -> None:
        store = TransactionStore((_tx("AAPL"),))
        held = store.snapshot
        store.replace((_tx("MSFT"),))
        assert [t.symbol for t in held] == ["AAPL"]


class TestTransactionRefresher:

    @pytest.mark.asyncio
    async def test_success_replaces_snapshot(self, mock_client, finnhub_payload) -> None:
        store = TransactionStore()
        collector = FinnhubCollector(
            api_key="k",
            client=mock_client(lambda r: httpx.Response(200, json=finnhub_payload)),
        )
        refresher = TransactionRefresher(store, collector)

        assert await refresher.refresh() is True
        assert store.snapshot == filter_us_equities(finnhub_payload["data"])
        assert [t.symbol for t in store.snapshot] == ["ABC", "AAPL"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(500, text="boom"),
            httpx.Response(200, text="not json"),
            httpx.Response(200, json={"unexpected": True}),
        ],
    )
    async def test_failure_keeps_previous_snapshot(self, mock_client, response) -> None:
        store = TransactionStore((_tx("AAPL"),))
        before = store.snapshot
        collector = FinnhubCollector(api_key="k", client=mock_client(lambda r: response))
        refresher = TransactionRefresher(store, collector)

        assert await refresher.refresh() is False
        assert store.snapshot is before
        assert store.stats()["refresh_count"] == 0

    @pytest.mark.asyncio
    async def test_unreachable_keeps_previous_snapshot(self) -> None:
        store = TransactionStore((_tx("AAPL"),))
        before = store.snapshot
        collector = MagicMock()
        collector.fetch_us_transactions = AsyncMock(
            side_effect=ProviderError("Finnhub", "connection refused"),
        )
        refresher = TransactionRefresher(store, collector)

        assert await refresher.refresh() is False
        assert store.snapshot is before

    @pytest.mark.asyncio
    async def test_each_snapshot_comes_from_one_response(self) -> None:
        responses = [(_tx("AAPL"), _tx("MSFT")), (_tx("NVDA"),)]
        collector = MagicMock()
        collector.fetch_us_transactions = AsyncMock(side_effect=responses)
        store = TransactionStore()
        refresher = TransactionRefresher(store, collector)

        seen = []
        for _ in responses:
            await refresher.refresh()
            seen.append(store.snapshot)
        assert seen == responses

    @pytest.mark.asyncio
    async def test_overlapping_refreshes_last_writer_wins(self) -> None:
        slow_gate = asyncio.Event()
        slow = (_tx("SLOW"),)
        fast = (_tx("FAST"),)

        async def fetch(limit):
            if not slow_gate.is_set():
                slow_gate.set()
                await asyncio.sleep(0.05)
                return slow
            return fast

        collector = MagicMock()
        collector.fetch_us_transactions = fetch
        store = TransactionStore()
        refresher = TransactionRefresher(store, collector)

        # Tick N starts first but answers last
        await asyncio.gather(refresher.refresh(), refresher.refresh())

        assert store.snapshot == slow
        assert store.stats()["refresh_count"] == 2
