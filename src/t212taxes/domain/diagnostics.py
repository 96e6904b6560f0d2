"""Optional diagnostics for best-effort calculations.

Calculators never raise on incomplete records; they skip them. Passing a
``Diagnostics`` instance lets callers see what was skipped without changing
any computed figure.
"""

from collections import Counter
from decimal import Decimal

SKIP_NO_TICKER = "trade without ticker"
SKIP_NO_ISIN = "trade without ISIN"
SKIP_MISSING_SHARES_OR_PRICE = "trade without shares or price"
SKIP_MISSING_SHARES_OR_TOTAL = "trade without shares or total"
SKIP_SELL_WITHOUT_POSITION = "sell without open position"
SKIP_NO_AMOUNT = "income without result or total"
SKIP_DEPOSIT_WITHOUT_TOTAL = "deposit without total"


class Diagnostics:
    """Counters of skipped records and unmatched sell quantities."""

    def __init__(self):
        self.skipped: Counter[str] = Counter()
        self.oversold_shares: dict[str, Decimal] = {}

    def skip(self, reason: str) -> None:
        """Count one record skipped for ``reason``."""
        self.skipped[reason] += 1

    def record_oversell(self, ticker: str, shares: Decimal) -> None:
        """Record sell shares that no prior lot could match."""
        self.oversold_shares[ticker] = self.oversold_shares.get(ticker, Decimal("0")) + shares

    @property
    def total_skipped(self) -> int:
        """Number of records skipped for any reason."""
        return sum(self.skipped.values())

    @property
    def has_issues(self) -> bool:
        """True when anything was skipped or oversold."""
        return bool(self.skipped) or bool(self.oversold_shares)
