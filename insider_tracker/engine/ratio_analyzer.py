"""Ratio Analyzer: profitability, liquidity and leverage ratios → BUY/HOLD/SELL.

Pure and deterministic: same financials in, same report out. Undefined
divisions (zero denominators) come out as 0, and missing or zero
denominators for current liabilities and equity are taken as 1.
"""

from __future__ import annotations

from insider_tracker.models.analysis import RatioReport, Recommendation
from insider_tracker.models.market_data import FinancialsSnapshot, PricePoint
from insider_tracker.utils.logger import logger

# (key, label, is_percent), in display order
RATIOS: list[tuple[str, str, bool]] = [
    ("netProfitMargin", "Net Profit Margin", True),
    ("returnOnAssets", "Return on Assets (ROA)", True),
    ("returnOnEquity", "Return on Equity (ROE)", True),
    ("currentRatio", "Current Ratio", False),
    ("debtToEquity", "Debt-to-Equity Ratio", False),
    ("assetTurnover", "Asset Turnover Ratio", False),
]

# BUY thresholds (all must hold, strict comparisons)
BUY_MIN_NET_MARGIN = 10.0
BUY_MIN_ROA = 5.0
BUY_MIN_ROE = 10.0
BUY_MIN_CURRENT_RATIO = 1.5
BUY_MAX_DEBT_TO_EQUITY = 2.0

# SELL thresholds (any one triggers)
SELL_MAX_NET_MARGIN = 0.0
SELL_MAX_ROA = 1.0
SELL_MAX_CURRENT_RATIO = 1.0


def _ratio(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return numerator / denominator


def compute_ratios(fin: FinancialsSnapshot) -> dict[str, float]:
    """The six ratios for one reporting period, keyed as in RATIOS."""
    revenue = fin.revenue or 0.0
    net_income = fin.net_income or 0.0
    total_assets = fin.total_assets or 0.0
    current_assets = fin.current_assets or 0.0
    current_liabilities = fin.current_liabilities or 1.0
    total_liabilities = fin.total_liabilities or 0.0
    equity = fin.equity or 1.0

    return {
        "netProfitMargin": _ratio(net_income, revenue) * 100,
        "returnOnAssets": _ratio(net_income, total_assets) * 100,
        "returnOnEquity": _ratio(net_income, equity) * 100,
        "currentRatio": _ratio(current_assets, current_liabilities),
        "debtToEquity": _ratio(total_liabilities, equity),
        "assetTurnover": _ratio(revenue, total_assets),
    }


def recommend(details: dict[str, float]) -> Recommendation:
    """BUY is checked first, then SELL; anything else is HOLD."""
    if (
        details["netProfitMargin"] > BUY_MIN_NET_MARGIN
        and details["returnOnAssets"] > BUY_MIN_ROA
        and details["returnOnEquity"] > BUY_MIN_ROE
        and details["currentRatio"] > BUY_MIN_CURRENT_RATIO
        and details["debtToEquity"] < BUY_MAX_DEBT_TO_EQUITY
    ):
        return "BUY"
    if (
        details["netProfitMargin"] < SELL_MAX_NET_MARGIN
        or details["returnOnAssets"] < SELL_MAX_ROA
        or details["currentRatio"] < SELL_MAX_CURRENT_RATIO
    ):
        return "SELL"
    return "HOLD"


def analyze_financials(fin: FinancialsSnapshot | None) -> RatioReport:
    """Turn a financials snapshot into a RatioReport.

    Absent financials short-circuit to HOLD with no details.
    """
    if fin is None:
        return RatioReport(recommendation="HOLD", details={})

    details = compute_ratios(fin)
    logger.debug("[Ratios] %s: %s", fin.ticker or "?", details)
    return RatioReport(recommendation=recommend(details), details=details)


def is_recommended_buy(point: PricePoint) -> bool:
    """Price-only signal: at or under $2, or >30% below the day's high on volume."""
    if point.close is None:
        return False
    price = point.close
    high = point.high or 0.0
    volume = point.volume or 0.0
    return price <= 2 or (price < 0.7 * high and volume > 100_000)
