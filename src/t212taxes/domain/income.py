"""Dividend and interest income domain service."""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Sequence

from t212taxes.domain import actions
from t212taxes.domain.entities import (
    ZERO,
    DateRange,
    DividendPayer,
    DividendRecord,
    DividendSummary,
    IncomeReport,
    InterestRecord,
    InterestSummary,
    MonthlyIncome,
    Transaction,
)
from t212taxes.utils.date_parser import month_key

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
DAYS_PER_YEAR = 365

# Checked in order; the first keyword found wins
INTEREST_SOURCES = (
    ("cash", "Cash"),
    ("margin", "Margin"),
    ("account", "Account"),
)
INTEREST_PERIODS = (
    ("daily", "Daily"),
    ("weekly", "Weekly"),
    ("monthly", "Monthly"),
    ("quarterly", "Quarterly"),
    ("annual", "Annual"),
    ("yearly", "Annual"),
)


def classify_keyword(text: str, vocabulary: Sequence[tuple[str, str]]) -> str:
    """Return the label of the first keyword contained in ``text``."""
    lowered = text.lower()
    for keyword, label in vocabulary:
        if keyword in lowered:
            return label
    return UNKNOWN


def security_key(ticker: str, isin: str) -> str:
    """Key a security by ticker, then ISIN."""
    return ticker or isin or UNKNOWN


def date_range(transactions: Sequence[Transaction]) -> DateRange:
    """Return the earliest and latest timestamps of a collection."""
    if not transactions:
        return DateRange()
    times = [actions.transaction_time(txn) for txn in transactions]
    return DateRange(start=min(times), end=max(times))


class IncomeService:
    """Service for dividend and interest income reporting."""

    def __init__(self, base_currency: str):
        """Initialize income service.

        Args:
            base_currency: Currency income is reported in
        """
        self.base_currency = base_currency

    def income_report(self, transactions: Sequence[Transaction]) -> IncomeReport:
        """Build an income report from a transaction history.

        Args:
            transactions: Transactions in any order

        Returns:
            IncomeReport with dividend and interest summaries
        """
        if not transactions:
            return IncomeReport(
                dividends=DividendSummary(currency=self.base_currency),
                interest=InterestSummary(currency=self.base_currency),
                currency=self.base_currency,
            )

        dividend_records = self.extract_dividend_records(transactions)
        interest_records = self.extract_interest_records(transactions)
        logger.debug(
            "Extracted %d dividend and %d interest records",
            len(dividend_records),
            len(interest_records),
        )

        dividends = self.dividend_summary(dividend_records)
        interest = self.interest_summary(interest_records)

        return IncomeReport(
            dividends=dividends,
            interest=interest,
            currency=self.base_currency,
            total_income=dividends.net_dividends + interest.total_interest,
            date_range=date_range(transactions),
        )

    def extract_dividend_records(
        self, transactions: Sequence[Transaction]
    ) -> list[DividendRecord]:
        """Extract dividend payments, converted to the base currency when possible."""
        records = []
        for txn in transactions:
            if not actions.is_dividend(txn):
                continue

            amount = self._income_amount(txn)
            currency = self._income_currency(txn)
            exchange_rate = txn.exchange_rate if txn.exchange_rate is not None else ZERO
            withholding_tax = (
                txn.withholding_tax if txn.withholding_tax is not None else ZERO
            )
            net_amount = amount - withholding_tax

            if currency != self.base_currency and exchange_rate > 0:
                amount /= exchange_rate
                withholding_tax /= exchange_rate
                net_amount /= exchange_rate
                currency = self.base_currency

            records.append(
                DividendRecord(
                    date=actions.transaction_time(txn),
                    currency=currency,
                    amount=amount,
                    withholding_tax=withholding_tax,
                    net_amount=net_amount,
                    exchange_rate=exchange_rate,
                    ticker=txn.ticker or "",
                    isin=txn.isin or "",
                    name=txn.name or "",
                )
            )
        return records

    def extract_interest_records(
        self, transactions: Sequence[Transaction]
    ) -> list[InterestRecord]:
        """Extract interest payments with source and period guessed from notes."""
        records = []
        for txn in transactions:
            if not actions.is_interest(txn):
                continue

            amount = self._income_amount(txn)
            currency = self._income_currency(txn)
            exchange_rate = txn.exchange_rate if txn.exchange_rate is not None else ZERO
            if currency != self.base_currency and exchange_rate > 0:
                amount /= exchange_rate
                currency = self.base_currency

            source, period = self.interest_details(txn.notes or txn.action)
            records.append(
                InterestRecord(
                    date=actions.transaction_time(txn),
                    currency=currency,
                    amount=amount,
                    exchange_rate=exchange_rate,
                    notes=txn.notes or "",
                    source=source,
                    period=period,
                )
            )
        return records

    def interest_details(self, text: str) -> tuple[str, str]:
        """Guess (source, period) of an interest payment from free text."""
        return (
            classify_keyword(text, INTEREST_SOURCES),
            classify_keyword(text, INTEREST_PERIODS),
        )

    def dividend_summary(self, records: Sequence[DividendRecord]) -> DividendSummary:
        """Aggregate dividend records; breakdowns use net amounts."""
        total = ZERO
        withholding = ZERO
        net = ZERO
        yields = []
        by_security: dict[str, Decimal] = defaultdict(Decimal)
        by_year: dict[int, Decimal] = defaultdict(Decimal)
        by_month: dict[str, Decimal] = defaultdict(Decimal)

        for record in records:
            total += record.amount
            withholding += record.withholding_tax
            net += record.net_amount

            by_security[security_key(record.ticker, record.isin)] += record.net_amount
            by_year[record.date.year] += record.net_amount
            by_month[month_key(record.date)] += record.net_amount

            if record.dividend_yield != 0:
                yields.append(record.dividend_yield)

        return DividendSummary(
            currency=self.base_currency,
            total_dividends=total,
            total_withholding_tax=withholding,
            net_dividends=net,
            dividend_count=len(records),
            average_yield=_average(yields),
            by_security=dict(by_security),
            by_year=dict(by_year),
            by_month=dict(by_month),
        )

    def interest_summary(self, records: Sequence[InterestRecord]) -> InterestSummary:
        """Aggregate interest records."""
        total = ZERO
        rates = []
        by_source: dict[str, Decimal] = defaultdict(Decimal)
        by_year: dict[int, Decimal] = defaultdict(Decimal)
        by_month: dict[str, Decimal] = defaultdict(Decimal)

        for record in records:
            total += record.amount
            by_source[record.source or UNKNOWN] += record.amount
            by_year[record.date.year] += record.amount
            by_month[month_key(record.date)] += record.amount

            if record.interest_rate != 0:
                rates.append(record.interest_rate)

        return InterestSummary(
            currency=self.base_currency,
            total_interest=total,
            interest_count=len(records),
            average_rate=_average(rates),
            by_source=dict(by_source),
            by_year=dict(by_year),
            by_month=dict(by_month),
        )

    def top_dividend_payers(
        self, records: Sequence[DividendRecord], limit: int
    ) -> list[DividendPayer]:
        """Return securities ranked by summed net dividends.

        Args:
            records: Dividend records
            limit: Maximum number of payers; 0 or less returns all

        Returns:
            Payers sorted by amount descending
        """
        totals: dict[str, Decimal] = defaultdict(Decimal)
        for record in records:
            totals[security_key(record.ticker, record.isin)] += record.net_amount

        payers = [
            DividendPayer(security=security, amount=amount)
            for security, amount in totals.items()
        ]
        payers.sort(key=lambda p: p.amount, reverse=True)

        if 0 < limit < len(payers):
            return payers[:limit]
        return payers

    def monthly_income_breakdown(
        self,
        dividend_records: Sequence[DividendRecord],
        interest_records: Sequence[InterestRecord],
    ) -> dict[str, MonthlyIncome]:
        """Combine net dividends and interest per ``YYYY-MM`` month."""
        dividends: dict[str, Decimal] = defaultdict(Decimal)
        interest: dict[str, Decimal] = defaultdict(Decimal)
        for record in dividend_records:
            dividends[month_key(record.date)] += record.net_amount
        for record in interest_records:
            interest[month_key(record.date)] += record.amount

        breakdown = {}
        for month in sorted(set(dividends) | set(interest)):
            breakdown[month] = MonthlyIncome(
                month=month,
                dividends=dividends.get(month, ZERO),
                interest=interest.get(month, ZERO),
                total_income=dividends.get(month, ZERO) + interest.get(month, ZERO),
            )
        return breakdown

    def dividend_yield(
        self, dividend_amount: Decimal, share_price: Decimal, shares: Decimal
    ) -> Decimal:
        """Dividend as a percentage of the position value."""
        if share_price <= 0 or shares <= 0:
            return ZERO
        return dividend_amount / (share_price * shares) * 100

    def effective_interest_rate(
        self, interest_amount: Decimal, principal: Decimal, days: int
    ) -> Decimal:
        """Annualized interest rate in percent over a ``days``-long period."""
        if principal <= 0 or days <= 0:
            return ZERO
        annualized = interest_amount / days * DAYS_PER_YEAR
        return annualized / principal * 100

    def _income_amount(self, txn: Transaction) -> Decimal:
        if txn.result is not None:
            return txn.result
        if txn.total is not None:
            return txn.total
        return ZERO

    def _income_currency(self, txn: Transaction) -> str:
        return txn.currency_result or txn.currency_total or self.base_currency


def _average(values: Sequence[Decimal]) -> Decimal:
    if not values:
        return ZERO
    return sum(values, ZERO) / len(values)
