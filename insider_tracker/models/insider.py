"""Insider transaction model: one element of the transactions feed."""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

US_EQUITY_RE = re.compile(r"^[A-Z]+$")
"""Plain US tickers: uppercase letters only, no digits, dots or exchange suffixes."""

PURCHASE_CODE = "P"
SALE_CODE = "S"


def is_us_equity(symbol: object) -> bool:
    """True when ``symbol`` is a non-empty string of uppercase A-Z letters."""
    return isinstance(symbol, str) and US_EQUITY_RE.fullmatch(symbol) is not None


class Transaction(BaseModel):
    """A disclosed insider trade, immutable once parsed.

    Field names are snake_case; the wire format keeps the provider's
    camelCase names (``transactionCode``, ``transactionPrice``...).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    symbol: str
    name: str | None = None
    transaction_code: str | None = Field(default=None, alias="transactionCode")
    change: int | float | None = None
    share: int | float | None = None
    transaction_price: float | None = Field(default=None, alias="transactionPrice")
    transaction_date: str | None = Field(default=None, alias="transactionDate")
    filing_date: str | None = Field(default=None, alias="filingDate")
    currency: str | None = None
    is_derivative: bool | None = Field(default=None, alias="isDerivative")

    @property
    def kind(self) -> Literal["purchase", "sale", "other"]:
        if self.transaction_code == PURCHASE_CODE:
            return "purchase"
        if self.transaction_code == SALE_CODE:
            return "sale"
        return "other"

    @property
    def price(self) -> float | None:
        """Transaction price, with the feed's 0 placeholder treated as missing."""
        return self.transaction_price or None

    @computed_field(alias="tradeValue")  # type: ignore[prop-decorator]
    @property
    def trade_value(self) -> float | None:
        """price × |shares| when both are present, else None."""
        if self.price and self.change:
            return self.price * abs(self.change)
        return None
