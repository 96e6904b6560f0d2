"""FIFO capital gains domain service."""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Optional, Sequence

from t212taxes.domain import actions
from t212taxes.domain.currency import CurrencyNormalizer
from t212taxes.domain.diagnostics import (
    Diagnostics,
    SKIP_MISSING_SHARES_OR_PRICE,
    SKIP_NO_TICKER,
)
from t212taxes.domain.entities import ZERO, PurchaseLot, Transaction

logger = logging.getLogger(__name__)


class CapitalGainsService:
    """Service for realized gains and losses using first-in-first-out lots."""

    def __init__(self, base_currency: str):
        """Initialize capital gains service.

        Args:
            base_currency: Currency gains and losses are reported in
        """
        self.base_currency = base_currency
        self.normalizer = CurrencyNormalizer(base_currency)

    def capital_gains(
        self,
        transactions: Sequence[Transaction],
        diagnostics: Optional[Diagnostics] = None,
    ) -> tuple[Decimal, Decimal]:
        """Calculate realized gains and losses across all securities.

        Gains and losses are separate non-negative totals; they are never
        netted against each other.

        Args:
            transactions: Transactions in any order
            diagnostics: Optional collector for skipped records and oversells

        Returns:
            Tuple of (total_gains, total_losses)
        """
        diagnostics = diagnostics or Diagnostics()
        total_gains = ZERO
        total_losses = ZERO

        for ticker, ticker_transactions in self.group_trades_by_ticker(
            transactions, diagnostics
        ).items():
            gains, losses = self.security_gains_losses(
                ticker, ticker_transactions, diagnostics
            )
            total_gains += gains
            total_losses += losses

        logger.debug("FIFO gains %s, losses %s", total_gains, total_losses)
        return total_gains, total_losses

    def group_trades_by_ticker(
        self,
        transactions: Sequence[Transaction],
        diagnostics: Diagnostics,
    ) -> dict[str, list[Transaction]]:
        """Group buy and sell transactions by ticker, dropping untickered trades."""
        grouped: dict[str, list[Transaction]] = defaultdict(list)
        for txn in transactions:
            if not actions.is_trade(txn):
                continue
            if txn.ticker is None:
                diagnostics.skip(SKIP_NO_TICKER)
                continue
            grouped[txn.ticker].append(txn)
        return dict(grouped)

    def security_gains_losses(
        self,
        ticker: str,
        transactions: Sequence[Transaction],
        diagnostics: Diagnostics,
    ) -> tuple[Decimal, Decimal]:
        """Run the FIFO queue over one security's trades in time order."""
        lots: list[PurchaseLot] = []
        gains = ZERO
        losses = ZERO

        for txn in sorted(transactions, key=actions.transaction_time):
            if txn.shares is None or txn.price_per_share is None:
                diagnostics.skip(SKIP_MISSING_SHARES_OR_PRICE)
                continue
            if actions.is_buy(txn):
                lots.append(self.open_lot(txn))
            else:
                sell_gains, sell_losses = self.match_sell(
                    ticker, lots, txn, diagnostics
                )
                gains += sell_gains
                losses += sell_losses

        return gains, losses

    def open_lot(self, txn: Transaction) -> PurchaseLot:
        """Create a purchase lot priced in the base currency."""
        price = self.normalizer.normalize(
            txn.price_per_share, txn.currency_price_per_share, txn.exchange_rate
        )
        return PurchaseLot(
            date=actions.transaction_time(txn),
            shares=txn.shares,
            price_per_share=price,
            total_cost=txn.shares * price,
        )

    def match_sell(
        self,
        ticker: str,
        lots: list[PurchaseLot],
        txn: Transaction,
        diagnostics: Diagnostics,
    ) -> tuple[Decimal, Decimal]:
        """Consume lots oldest-first for a sell and return its (gains, losses).

        Lots are decremented in place and stay in the queue once exhausted.
        Shares beyond what the lots hold are dropped without any gain or
        loss, so unrecorded inflows (transfers, splits) behave as cost-free.
        """
        sell_price = self.normalizer.normalize(
            txn.price_per_share, txn.currency_price_per_share, txn.exchange_rate
        )
        remaining = txn.shares
        gains = ZERO
        losses = ZERO

        for lot in lots:
            if remaining <= 0:
                break
            if lot.shares <= 0:
                continue

            matched = min(remaining, lot.shares)
            gain_loss = matched * (sell_price - lot.price_per_share)
            if gain_loss > 0:
                gains += gain_loss
            else:
                losses += abs(gain_loss)

            lot.shares -= matched
            remaining -= matched

        if remaining > 0:
            logger.warning(
                "Sell of %s %s on %s exceeds recorded lots by %s shares; excess ignored",
                txn.shares,
                ticker,
                actions.transaction_time(txn).date(),
                remaining,
            )
            diagnostics.record_oversell(ticker, remaining)

        return gains, losses
