"""Transaction Store: the single in-memory snapshot of filtered insider trades.

One writer (the refresher), any number of readers. The snapshot is an
immutable tuple that is replaced wholesale, never mutated, so a reader
always sees the complete result of exactly one refresh.
"""

from __future__ import annotations

from datetime import datetime, timezone

from insider_tracker.models.insider import Transaction


class TransactionStore:
    """Holds the latest snapshot behind a narrow read/replace interface."""

    def __init__(self, initial: tuple[Transaction, ...] = ()) -> None:
        self._snapshot: tuple[Transaction, ...] = tuple(initial)
        self._refreshed_at: datetime | None = None
        self._refresh_count = 0

    @property
    def snapshot(self) -> tuple[Transaction, ...]:
        return self._snapshot

    @property
    def refreshed_at(self) -> datetime | None:
        return self._refreshed_at

    def replace(self, transactions: tuple[Transaction, ...]) -> None:
        """Swap in a new snapshot. The only mutation point."""
        self._snapshot = tuple(transactions)
        self._refreshed_at = datetime.now(timezone.utc)
        self._refresh_count += 1

    def stats(self) -> dict:
        return {
            "transactions": len(self._snapshot),
            "refresh_count": self._refresh_count,
            "refreshed_at": (
                self._refreshed_at.isoformat() if self._refreshed_at else None
            ),
        }
