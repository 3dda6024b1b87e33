import os
import tempfile
from typing import Any, Callable

import httpx
import pytest

# Route run logs to a temp dir before the package reads its settings
os.environ.setdefault("LOGS_DIR", tempfile.mkdtemp(prefix="insider_tracker_logs_"))


# ── Provider payloads ─────────────────────────────────────────────

@pytest.fixture
def finnhub_payload() -> dict[str, Any]:
    """Insider transactions feed: two US tickers, three that must be filtered."""
    return {
        "data": [
            {
                "name": "Doe John",
                "share": 12000,
                "change": 5000,
                "filingDate": "2024-05-02",
                "transactionDate": "2024-05-01",
                "transactionCode": "P",
                "transactionPrice": 1.5,
                "symbol": "ABC",
                "currency": "USD",
                "isDerivative": False,
            },
            {
                "name": "Roe Jane",
                "change": -200,
                "transactionDate": "2024-05-01",
                "transactionCode": "S",
                "transactionPrice": 180.25,
                "symbol": "BRK.B",
            },
            {
                "name": "Tanaka Ken",
                "change": 100,
                "transactionDate": "2024-04-30",
                "transactionCode": "P",
                "transactionPrice": 3000,
                "symbol": "7203",
            },
            {
                "name": "Smith Ann",
                "change": -5,
                "transactionDate": "2024-04-29",
                "transactionCode": "S",
                "transactionPrice": 10,
                "symbol": "AAPL",
            },
            {
                "name": "Nobody",
                "change": 1,
                "transactionCode": "P",
                "symbol": "",
            },
        ],
        "symbol": "",
    }


@pytest.fixture
def tiingo_payload() -> list[dict[str, Any]]:
    return [
        {
            "date": "2024-05-01T00:00:00.000Z",
            "close": 1.8,
            "high": 2.1,
            "low": 1.7,
            "open": 1.9,
            "volume": 250000,
            "adjClose": 1.8,
        },
    ]


@pytest.fixture
def polygon_result() -> dict[str, Any]:
    """Polygon financials result matching the worked BUY example."""
    return {
        "tickers": ["ABC"],
        "company_name": "ABC Corp",
        "fiscal_period": "Q1",
        "fiscal_year": "2024",
        "start_date": "2024-01-01",
        "end_date": "2024-03-31",
        "financials": {
            "income_statement": {
                "revenues": {"value": 1000, "unit": "USD"},
                "net_income_loss": {"value": 150, "unit": "USD"},
            },
            "balance_sheet": {
                "assets": {"value": 2000, "unit": "USD"},
                "current_assets": {"value": 500, "unit": "USD"},
                "current_liabilities": {"value": 200, "unit": "USD"},
                "liabilities": {"value": 300, "unit": "USD"},
                "equity": {"value": 1000, "unit": "USD"},
            },
        },
    }


# ── HTTP mocking ──────────────────────────────────────────────────

@pytest.fixture
def mock_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an httpx.AsyncClient whose requests are answered by ``handler``."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make
