"""Portfolio valuation domain service."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from t212taxes.domain import actions
from t212taxes.domain.currency import CurrencyNormalizer
from t212taxes.domain.diagnostics import (
    Diagnostics,
    SKIP_MISSING_SHARES_OR_TOTAL,
    SKIP_NO_ISIN,
    SKIP_NO_TICKER,
    SKIP_SELL_WITHOUT_POSITION,
)
from t212taxes.domain.entities import (
    ZERO,
    LastPrice,
    PortfolioPosition,
    PortfolioSummary,
    PortfolioValuationReport,
    Transaction,
)
from t212taxes.domain.reports import percentage_of
from t212taxes.utils.date_parser import year_end

logger = logging.getLogger(__name__)

# Positions at or below this share count are treated as closed
MIN_POSITION_SHARES = Decimal("0.001")


class PortfolioService:
    """Service for year-end portfolio snapshots.

    Positions use weighted-average cost and are valued at the last traded
    price seen for each ticker. This is independent of the FIFO figures in
    ``CapitalGainsService``.
    """

    def __init__(self, base_currency: str):
        """Initialize portfolio service.

        Args:
            base_currency: Currency positions are valued in
        """
        self.base_currency = base_currency
        self.normalizer = CurrencyNormalizer(base_currency)

    def portfolio_valuation(
        self,
        transactions: Sequence[Transaction],
        diagnostics: Optional[Diagnostics] = None,
    ) -> list[PortfolioSummary]:
        """Build a year-end snapshot for every year with trades or deposits.

        Each year is computed from the full history up to its cutoff.

        Args:
            transactions: Transactions in processing order
            diagnostics: Optional collector for skipped records

        Returns:
            Snapshots sorted by year ascending
        """
        summaries = []
        for year in self.extract_years(transactions):
            logger.debug("Valuing portfolio at end of %d", year)
            summaries.append(
                self.end_of_year_portfolio(transactions, year, diagnostics)
            )
        return summaries

    def valuation_report(
        self,
        transactions: Sequence[Transaction],
        diagnostics: Optional[Diagnostics] = None,
    ) -> PortfolioValuationReport:
        """Wrap the yearly snapshots into a report."""
        return PortfolioValuationReport(
            currency=self.base_currency,
            generated_at=datetime.now(),
            yearly_portfolios=tuple(
                self.portfolio_valuation(transactions, diagnostics)
            ),
        )

    def extract_years(self, transactions: Sequence[Transaction]) -> list[int]:
        """Return sorted years containing at least one trade or deposit."""
        return sorted(
            {
                actions.transaction_time(txn).year
                for txn in transactions
                if actions.is_trade(txn) or actions.is_deposit(txn)
            }
        )

    def end_of_year_portfolio(
        self,
        transactions: Sequence[Transaction],
        year: int,
        diagnostics: Optional[Diagnostics] = None,
    ) -> PortfolioSummary:
        """Calculate the portfolio as of Dec 31, 23:59:59 of ``year``.

        Positions are cumulative over every transaction up to the cutoff,
        processed in the given order. Deposits, dividends and interest are
        reported for ``year`` alone.

        Args:
            transactions: Transactions in processing order
            year: Calendar year of the snapshot
            diagnostics: Optional collector for skipped records

        Returns:
            PortfolioSummary for the year
        """
        diagnostics = diagnostics or Diagnostics()
        cutoff = year_end(year)

        positions: dict[str, PortfolioPosition] = {}
        last_prices: dict[str, LastPrice] = {}

        for txn in transactions:
            if actions.transaction_time(txn) > cutoff:
                continue
            if not actions.is_trade(txn):
                continue
            self.apply_trade(positions, last_prices, txn, diagnostics)

        final_positions = self.finalize_positions(positions, last_prices)
        deposits, dividends, interest = self.yearly_flows(transactions, year)

        total_invested = sum((p.total_cost for p in final_positions), ZERO)
        total_market_value = sum((p.market_value for p in final_positions), ZERO)
        total_gain_loss = total_market_value - total_invested

        return PortfolioSummary(
            year=year,
            as_of_date=cutoff,
            currency=self.base_currency,
            positions=tuple(final_positions),
            total_positions=len(final_positions),
            total_shares=sum((p.shares for p in final_positions), ZERO),
            total_invested=total_invested,
            total_market_value=total_market_value,
            total_unrealized_gain_loss=total_gain_loss,
            total_unrealized_gain_loss_percent=percentage_of(
                total_gain_loss, total_invested
            ),
            yearly_deposits=deposits,
            yearly_dividends=dividends,
            yearly_interest=interest,
        )

    def apply_trade(
        self,
        positions: dict[str, PortfolioPosition],
        last_prices: dict[str, LastPrice],
        txn: Transaction,
        diagnostics: Diagnostics,
    ) -> None:
        """Fold one buy or sell into the working position and last-price maps."""
        if txn.ticker is None:
            diagnostics.skip(SKIP_NO_TICKER)
            return

        if txn.price_per_share is not None and txn.price_per_share > 0:
            last_prices[txn.ticker] = LastPrice(
                price=self.normalizer.normalize(
                    txn.price_per_share,
                    txn.currency_price_per_share,
                    txn.exchange_rate,
                ),
                original_price=txn.price_per_share,
                currency=txn.currency_price_per_share,
                date=actions.transaction_time(txn),
            )

        if txn.isin is None:
            diagnostics.skip(SKIP_NO_ISIN)
            return

        position = positions.get(txn.ticker)
        if position is None:
            position = PortfolioPosition(
                ticker=txn.ticker,
                isin=txn.isin,
                name=txn.name or txn.ticker,
                currency=self.base_currency,
            )
            positions[txn.ticker] = position

        if txn.shares is None or txn.total is None:
            diagnostics.skip(SKIP_MISSING_SHARES_OR_TOTAL)
            return

        if actions.is_buy(txn):
            self.apply_buy(position, txn)
        else:
            self.apply_sell(position, txn, diagnostics)

    def apply_buy(self, position: PortfolioPosition, txn: Transaction) -> None:
        """Add shares and their base-currency cost to a position."""
        position.shares += txn.shares
        position.total_cost += self.normalizer.normalize(
            txn.total, txn.currency_total, txn.exchange_rate
        )
        position.transaction_count += 1

        purchased = actions.transaction_time(txn)
        if position.first_purchase is None or purchased < position.first_purchase:
            position.first_purchase = purchased
        if position.last_purchase is None or purchased > position.last_purchase:
            position.last_purchase = purchased

    def apply_sell(
        self,
        position: PortfolioPosition,
        txn: Transaction,
        diagnostics: Diagnostics,
    ) -> None:
        """Remove shares at the current average cost, flooring at zero."""
        if position.shares <= 0:
            diagnostics.skip(SKIP_SELL_WITHOUT_POSITION)
            return

        average_cost = position.total_cost / position.shares
        position.total_cost -= average_cost * txn.shares
        position.shares -= txn.shares
        position.transaction_count += 1

        if position.shares < 0:
            position.shares = ZERO
        if position.total_cost < 0:
            position.total_cost = ZERO

    def finalize_positions(
        self,
        positions: dict[str, PortfolioPosition],
        last_prices: dict[str, LastPrice],
    ) -> list[PortfolioPosition]:
        """Value open positions and order them by market value, largest first."""
        final_positions = []
        for ticker, position in positions.items():
            if position.shares <= MIN_POSITION_SHARES:
                continue

            position.average_cost = position.total_cost / position.shares
            last_price = last_prices.get(ticker)
            if last_price is not None:
                position.last_price = last_price.price
                position.last_price_original = last_price.original_price
                position.last_price_currency = last_price.currency
                position.last_price_date = last_price.date
                position.market_value = position.shares * last_price.price
            else:
                # No traded price known: value at cost
                position.last_price = position.average_cost
                position.market_value = position.total_cost

            position.unrealized_gain_loss = position.market_value - position.total_cost
            position.unrealized_gain_loss_percent = percentage_of(
                position.unrealized_gain_loss, position.total_cost
            )
            final_positions.append(position)

        final_positions.sort(key=lambda p: p.market_value, reverse=True)
        return final_positions

    def yearly_flows(
        self, transactions: Sequence[Transaction], year: int
    ) -> tuple[Decimal, Decimal, Decimal]:
        """Sum deposits, dividends and interest dated within ``year``."""
        deposits = ZERO
        dividends = ZERO
        interest = ZERO

        for txn in transactions:
            if actions.transaction_time(txn).year != year:
                continue
            if actions.is_deposit(txn):
                if txn.total is not None:
                    deposits += self.normalizer.normalize(
                        txn.total, txn.currency_total, txn.exchange_rate
                    )
            elif actions.is_dividend(txn):
                if txn.result is not None:
                    dividends += self.normalizer.normalize(
                        txn.result, txn.currency_result, txn.exchange_rate
                    )
            elif actions.is_interest(txn):
                if txn.result is not None:
                    interest += self.normalizer.normalize(
                        txn.result, txn.currency_result, txn.exchange_rate
                    )

        return deposits, dividends, interest
