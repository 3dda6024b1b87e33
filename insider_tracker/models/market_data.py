"""Market data models: daily prices and reported financials."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class PricePoint(BaseModel):
    """Single daily price row from the price provider."""

    model_config = ConfigDict(populate_by_name=True)

    date: str | None = None
    close: float | None = None
    high: float | None = None
    low: float | None = None
    open: float | None = None
    volume: float | None = None
    adj_close: float | None = Field(default=None, alias="adjClose")


class PriceSeries(BaseModel):
    """Raw daily price records for one symbol, as the provider returned them."""

    symbol: str
    records: list[dict[str, Any]] = Field(default_factory=list)

    @field_validator("records")
    @classmethod
    def _records_are_prices(cls, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        for i, record in enumerate(records):
            try:
                PricePoint.model_validate(record)
            except ValidationError as e:
                raise ValueError(f"price record {i} is malformed: {e.error_count()} errors") from e
        return records

    @property
    def latest(self) -> PricePoint | None:
        """Freshest record: greatest ``date``, first record on ties."""
        if not self.records:
            return None
        freshest = max(self.records, key=lambda r: str(r.get("date") or ""))
        return PricePoint.model_validate(freshest)


def _text(raw: Any) -> str | None:
    return None if raw is None else str(raw)


def _value(section: dict[str, Any], key: str) -> float | None:
    """Pull ``section[key]["value"]`` as a float, None when absent."""
    item = section.get(key)
    if not isinstance(item, dict):
        return None
    raw = item.get("value")
    if raw is None:
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


class FinancialsSnapshot(BaseModel):
    """One reporting period of income statement and balance sheet figures."""

    ticker: str = ""
    company_name: str | None = None
    fiscal_period: str | None = None
    fiscal_year: str | None = None
    start_date: str | None = None
    end_date: str | None = None

    # Income statement
    revenue: float | None = None
    net_income: float | None = None

    # Balance sheet
    total_assets: float | None = None
    current_assets: float | None = None
    current_liabilities: float | None = None
    total_liabilities: float | None = None
    equity: float | None = None

    @classmethod
    def from_polygon(
        cls, result: dict[str, Any] | None, ticker: str = "",
    ) -> FinancialsSnapshot | None:
        """Build a snapshot from one Polygon financials result.

        Returns None when the result carries no ``financials`` object.
        """
        if not result:
            return None
        financials = result.get("financials")
        if not isinstance(financials, dict):
            return None

        income = financials.get("income_statement") or {}
        balance = financials.get("balance_sheet") or {}
        tickers = result.get("tickers") or []

        return cls(
            ticker=ticker or (tickers[0] if tickers else ""),
            company_name=_text(result.get("company_name")),
            fiscal_period=_text(result.get("fiscal_period")),
            fiscal_year=_text(result.get("fiscal_year")),
            start_date=_text(result.get("start_date")),
            end_date=_text(result.get("end_date")),
            revenue=_value(income, "revenues"),
            net_income=_value(income, "net_income_loss"),
            total_assets=_value(balance, "assets"),
            current_assets=_value(balance, "current_assets"),
            current_liabilities=_value(balance, "current_liabilities"),
            total_liabilities=_value(balance, "liabilities"),
            equity=_value(balance, "equity"),
        )
