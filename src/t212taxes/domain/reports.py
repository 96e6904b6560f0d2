"""Yearly and overall cash-flow report domain service."""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Optional, Sequence

from t212taxes.domain import actions
from t212taxes.domain.currency import CurrencyNormalizer
from t212taxes.domain.diagnostics import (
    Diagnostics,
    SKIP_DEPOSIT_WITHOUT_TOTAL,
    SKIP_NO_AMOUNT,
)
from t212taxes.domain.entities import (
    ZERO,
    OverallReport,
    Transaction,
    YearlyReport,
)

logger = logging.getLogger(__name__)

PERCENT_MULTIPLIER = Decimal("100")


def percentage_of(part: Decimal, whole: Decimal) -> Decimal:
    """Return ``part`` as a percentage of ``whole``, or 0 when ``whole`` is not positive."""
    if whole > 0:
        return part / whole * PERCENT_MULTIPLIER
    return ZERO


class ReportService:
    """Service for building yearly and all-time cash-flow summaries.

    Capital gains here are a quick heuristic: the positive ``result`` of each
    sell, with no cost basis. FIFO gains live in ``CapitalGainsService``.
    """

    def __init__(self, base_currency: str):
        """Initialize report service.

        Args:
            base_currency: Currency all figures are reported in
        """
        self.base_currency = base_currency
        self.normalizer = CurrencyNormalizer(base_currency)

    def yearly_reports(
        self,
        transactions: Sequence[Transaction],
        diagnostics: Optional[Diagnostics] = None,
    ) -> list[YearlyReport]:
        """Build one report per calendar year.

        Args:
            transactions: Transactions in any order
            diagnostics: Optional collector for skipped records

        Returns:
            Reports sorted by year ascending
        """
        diagnostics = diagnostics or Diagnostics()
        grouped = self.group_transactions_by_year(transactions)
        reports = [
            self.build_yearly_report(year, grouped[year], diagnostics)
            for year in sorted(grouped)
        ]
        logger.debug(
            "Built %d yearly reports from %d transactions",
            len(reports),
            len(transactions),
        )
        return reports

    def overall_report(self, yearly_reports: Sequence[YearlyReport]) -> OverallReport:
        """Roll yearly reports up into an all-time summary."""
        if not yearly_reports:
            return OverallReport(currency=self.base_currency)

        total_deposits = sum((r.total_deposits for r in yearly_reports), ZERO)
        total_gains = sum((r.total_gains for r in yearly_reports), ZERO)

        return OverallReport(
            currency=self.base_currency,
            total_deposits=total_deposits,
            total_transactions=sum(r.total_transactions for r in yearly_reports),
            total_capital_gains=sum((r.capital_gains for r in yearly_reports), ZERO),
            total_dividends=sum((r.dividends for r in yearly_reports), ZERO),
            total_interest=sum((r.interest for r in yearly_reports), ZERO),
            total_gains=total_gains,
            overall_percentage=percentage_of(total_gains, total_deposits),
            years=tuple(r.year for r in yearly_reports),
            yearly_reports=tuple(yearly_reports),
        )

    def group_transactions_by_year(
        self, transactions: Sequence[Transaction]
    ) -> dict[int, list[Transaction]]:
        """Group transactions by the calendar year of their timestamp."""
        yearly: dict[int, list[Transaction]] = defaultdict(list)
        for txn in transactions:
            yearly[actions.transaction_time(txn).year].append(txn)
        return dict(yearly)

    def build_yearly_report(
        self,
        year: int,
        transactions: Sequence[Transaction],
        diagnostics: Diagnostics,
    ) -> YearlyReport:
        """Aggregate the transactions of a single year."""
        deposits = ZERO
        capital_gains = ZERO
        dividends = ZERO
        interest = ZERO

        for txn in transactions:
            if actions.is_deposit(txn):
                if txn.total is None:
                    diagnostics.skip(SKIP_DEPOSIT_WITHOUT_TOTAL)
                    continue
                deposits += self.normalizer.normalize(
                    txn.total, txn.currency_total, txn.exchange_rate
                )
            elif actions.is_sell(txn):
                if txn.result is None:
                    continue
                amount = self.normalizer.normalize(
                    txn.result, txn.currency_result, txn.exchange_rate
                )
                # Losses are not netted in this heuristic
                if amount > 0:
                    capital_gains += amount
            elif actions.is_dividend(txn):
                amount = self.income_amount(txn)
                if amount is None:
                    diagnostics.skip(SKIP_NO_AMOUNT)
                    continue
                dividends += amount
            elif actions.is_interest(txn):
                amount = self.income_amount(txn)
                if amount is None:
                    diagnostics.skip(SKIP_NO_AMOUNT)
                    continue
                interest += amount

        total_gains = capital_gains + dividends + interest
        return YearlyReport(
            year=year,
            currency=self.base_currency,
            total_deposits=deposits,
            total_transactions=len(transactions),
            capital_gains=capital_gains,
            dividends=dividends,
            interest=interest,
            total_gains=total_gains,
            percentage_increase=percentage_of(total_gains, deposits),
        )

    def income_amount(self, txn: Transaction) -> Optional[Decimal]:
        """Normalized ``result`` of an income transaction, falling back to ``total``."""
        if txn.result is not None:
            return self.normalizer.normalize(
                txn.result, txn.currency_result, txn.exchange_rate
            )
        if txn.total is not None:
            return self.normalizer.normalize(
                txn.total, txn.currency_total, txn.exchange_rate
            )
        return None
