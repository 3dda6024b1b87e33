"""Analysis output models: ratio report and dashboard view descriptions."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from insider_tracker.models.market_data import PricePoint

Recommendation = Literal["BUY", "HOLD", "SELL"]


class RatioReport(BaseModel):
    """Six financial ratios plus a discrete recommendation.

    ``details`` is keyed by ratio name (``netProfitMargin``, ``returnOnAssets``,
    ``returnOnEquity``, ``currentRatio``, ``debtToEquity``, ``assetTurnover``)
    and is empty when no financials were available.
    """

    recommendation: Recommendation = "HOLD"
    details: dict[str, float] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Dashboard views
# ---------------------------------------------------------------------------

class TableRow(BaseModel):
    """One rendered row of the transactions table."""

    symbol: str
    insider: str
    transaction_code: str
    shares: str
    price: str
    trade_value: str
    transaction_date: str
    css_class: str = ""


class MetricRow(BaseModel):
    label: str
    value: str


class ChartData(BaseModel):
    """Bar chart of headline financial figures (USD)."""

    labels: list[str]
    values: list[float]


class DetailView(BaseModel):
    """Everything the detail modal shows for one symbol."""

    symbol: str
    title: str
    price: PricePoint
    price_signal: bool = False
    recommendation: Recommendation = "HOLD"
    metrics: list[MetricRow] = Field(default_factory=list)
    chart: ChartData | None = None
