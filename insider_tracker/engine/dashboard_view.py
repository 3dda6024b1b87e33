"""Dashboard view: pure render functions for the browser dashboard.

``render_table`` turns a transaction snapshot into table rows and
``render_detail`` turns a price series plus financials into the detail
modal. Neither does any I/O, so both are testable without a browser.
"""

from __future__ import annotations

from typing import Any, Iterable

from insider_tracker.engine.ratio_analyzer import (
    RATIOS,
    analyze_financials,
    is_recommended_buy,
)
from insider_tracker.models.analysis import ChartData, DetailView, MetricRow, TableRow
from insider_tracker.models.insider import Transaction
from insider_tracker.models.market_data import FinancialsSnapshot, PriceSeries

NA = "N/A"

# Row classes (styled in static/style.css)
HIGHLIGHT_BOLD = "highlight-green-bold"
HIGHLIGHT = "highlight-green"

# Purchases at or below this price get the bold highlight
PENNY_PRICE = 2.0

CHART_LABELS = ["Revenue", "Net Income", "Assets", "Liabilities", "Equity"]


def format_currency(value: float | None) -> str:
    if not value:
        return NA
    return f"${value:,.2f}"


def _format_shares(value: int | float | None) -> str:
    if not value:
        return "0"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def row_class(tx: Transaction) -> str:
    """Bold green for purchases at or under $2, green for other purchases.

    A purchase with no reported price counts as at or under $2.
    """
    if tx.kind != "purchase":
        return ""
    price = tx.transaction_price
    if price is None or price <= PENNY_PRICE:
        return HIGHLIGHT_BOLD
    return HIGHLIGHT


def render_row(tx: Transaction) -> TableRow:
    return TableRow(
        symbol=tx.symbol or NA,
        insider=tx.name or NA,
        transaction_code=tx.transaction_code or NA,
        shares=_format_shares(tx.change),
        price=format_currency(tx.price),
        trade_value=format_currency(tx.trade_value),
        transaction_date=tx.transaction_date or NA,
        css_class=row_class(tx),
    )


def render_table(snapshot: Iterable[Transaction]) -> list[TableRow]:
    """Full re-render of the transactions table, in snapshot order."""
    return [render_row(tx) for tx in snapshot]


def chart_data(fin: FinancialsSnapshot) -> ChartData:
    return ChartData(
        labels=list(CHART_LABELS),
        values=[
            fin.revenue or 0.0,
            fin.net_income or 0.0,
            fin.total_assets or 0.0,
            fin.total_liabilities or 0.0,
            fin.equity or 0.0,
        ],
    )


def _metric_rows(details: dict[str, float]) -> list[MetricRow]:
    rows = []
    for key, label, is_percent in RATIOS:
        value = details.get(key)
        if value is None:
            shown = NA
        elif is_percent:
            shown = f"{value:.2f}%"
        else:
            shown = f"{value:.2f}"
        rows.append(MetricRow(label=label, value=shown))
    return rows


def render_detail(
    symbol: str,
    series: PriceSeries | None,
    financials: dict[str, Any] | None,
) -> DetailView | None:
    """Detail modal for ``symbol``.

    Returns None when there is no price data: the modal does not open.
    Missing financials give a HOLD with N/A metrics and no chart.
    """
    point = series.latest if series else None
    if point is None:
        return None

    fin = FinancialsSnapshot.from_polygon(financials, ticker=symbol)
    report = analyze_financials(fin)

    return DetailView(
        symbol=symbol,
        title=f"Detailed Analysis for {symbol}",
        price=point,
        price_signal=is_recommended_buy(point),
        recommendation=report.recommendation,
        metrics=_metric_rows(report.details),
        chart=chart_data(fin) if fin else None,
    )
