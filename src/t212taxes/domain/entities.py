"""Domain model entities for t212taxes.

These are pure data classes representing ledger records and the reports
derived from them. They carry no behaviour so that the calculators stay
independent of how records are read and how reports are rendered.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

ZERO = Decimal("0")


class TransactionType(str, Enum):
    """Known Trading 212 ledger actions."""

    MARKET_BUY = "Market buy"
    MARKET_SELL = "Market sell"
    LIMIT_BUY = "Limit buy"
    LIMIT_SELL = "Limit sell"
    STOP_BUY = "Stop buy"
    STOP_SELL = "Stop sell"
    DIVIDEND = "Dividend"
    INTEREST = "Interest"
    DEPOSIT = "Deposit"
    WITHDRAWAL = "Withdrawal"


@dataclass(frozen=True)
class Transaction:
    """Ledger transaction entity.

    ``action`` is kept as free text: exports add variants such as
    "Dividend (Ordinary)" that are matched heuristically rather than by enum.
    """

    action: str
    time: datetime
    isin: Optional[str] = None
    ticker: Optional[str] = None
    name: Optional[str] = None
    notes: Optional[str] = None
    id: Optional[str] = None
    shares: Optional[Decimal] = None
    price_per_share: Optional[Decimal] = None
    currency_price_per_share: Optional[str] = None
    exchange_rate: Optional[Decimal] = None
    result: Optional[Decimal] = None
    currency_result: Optional[str] = None
    total: Optional[Decimal] = None
    currency_total: Optional[str] = None
    withholding_tax: Optional[Decimal] = None
    currency_withholding_tax: Optional[str] = None
    charge_amount: Optional[Decimal] = None
    currency_charge_amount: Optional[str] = None
    deposit_fee: Optional[Decimal] = None
    currency_deposit_fee: Optional[str] = None
    currency_conversion_fee: Optional[Decimal] = None
    currency_currency_conversion_fee: Optional[str] = None


@dataclass(frozen=True)
class DateRange:
    """Inclusive time span covered by a set of transactions."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None


@dataclass(frozen=True)
class YearlyReport:
    """Cash-flow summary of one calendar year."""

    year: int
    currency: str
    total_deposits: Decimal = ZERO
    total_transactions: int = 0
    capital_gains: Decimal = ZERO
    dividends: Decimal = ZERO
    interest: Decimal = ZERO
    total_gains: Decimal = ZERO
    percentage_increase: Decimal = ZERO


@dataclass(frozen=True)
class OverallReport:
    """All-time roll-up of yearly reports."""

    currency: str
    total_deposits: Decimal = ZERO
    total_transactions: int = 0
    total_capital_gains: Decimal = ZERO
    total_dividends: Decimal = ZERO
    total_interest: Decimal = ZERO
    total_gains: Decimal = ZERO
    overall_percentage: Decimal = ZERO
    years: tuple[int, ...] = ()
    yearly_reports: tuple[YearlyReport, ...] = ()


@dataclass
class PurchaseLot:
    """Open purchase lot in a FIFO queue; ``shares`` shrinks as sells match it."""

    date: datetime
    shares: Decimal
    price_per_share: Decimal
    total_cost: Decimal


@dataclass
class PortfolioPosition:
    """Holding of one security, built up transaction by transaction."""

    ticker: str
    isin: str
    name: str
    currency: str
    shares: Decimal = ZERO
    average_cost: Decimal = ZERO
    total_cost: Decimal = ZERO
    last_price: Decimal = ZERO
    last_price_date: Optional[datetime] = None
    last_price_currency: Optional[str] = None
    last_price_original: Decimal = ZERO
    market_value: Decimal = ZERO
    unrealized_gain_loss: Decimal = ZERO
    unrealized_gain_loss_percent: Decimal = ZERO
    first_purchase: Optional[datetime] = None
    last_purchase: Optional[datetime] = None
    transaction_count: int = 0


@dataclass(frozen=True)
class LastPrice:
    """Most recently processed trade price of a security."""

    price: Decimal
    original_price: Decimal
    currency: Optional[str]
    date: datetime


@dataclass(frozen=True)
class PortfolioSummary:
    """Year-end portfolio snapshot plus that year's flows."""

    year: int
    as_of_date: datetime
    currency: str
    positions: tuple[PortfolioPosition, ...] = ()
    total_positions: int = 0
    total_shares: Decimal = ZERO
    total_invested: Decimal = ZERO
    total_market_value: Decimal = ZERO
    total_unrealized_gain_loss: Decimal = ZERO
    total_unrealized_gain_loss_percent: Decimal = ZERO
    yearly_deposits: Decimal = ZERO
    yearly_dividends: Decimal = ZERO
    yearly_interest: Decimal = ZERO


@dataclass(frozen=True)
class PortfolioValuationReport:
    """Year-end snapshots for every active year of a history."""

    currency: str
    generated_at: datetime
    yearly_portfolios: tuple[PortfolioSummary, ...] = ()
    data_source: str = "Trading 212 CSV Export"


@dataclass(frozen=True)
class DividendRecord:
    """Dividend payment normalized to the base currency where possible."""

    date: datetime
    currency: str
    amount: Decimal = ZERO
    withholding_tax: Decimal = ZERO
    net_amount: Decimal = ZERO
    exchange_rate: Decimal = ZERO
    ticker: str = ""
    isin: str = ""
    name: str = ""
    dividend_yield: Decimal = ZERO


@dataclass(frozen=True)
class InterestRecord:
    """Interest payment normalized to the base currency where possible."""

    date: datetime
    currency: str
    amount: Decimal = ZERO
    exchange_rate: Decimal = ZERO
    notes: str = ""
    source: str = ""
    period: str = ""
    interest_rate: Decimal = ZERO


@dataclass(frozen=True)
class DividendSummary:
    """Aggregated dividend figures."""

    currency: str
    total_dividends: Decimal = ZERO
    total_withholding_tax: Decimal = ZERO
    net_dividends: Decimal = ZERO
    dividend_count: int = 0
    average_yield: Decimal = ZERO
    by_security: dict[str, Decimal] = field(default_factory=dict)
    by_year: dict[int, Decimal] = field(default_factory=dict)
    by_month: dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class InterestSummary:
    """Aggregated interest figures."""

    currency: str
    total_interest: Decimal = ZERO
    interest_count: int = 0
    average_rate: Decimal = ZERO
    by_source: dict[str, Decimal] = field(default_factory=dict)
    by_year: dict[int, Decimal] = field(default_factory=dict)
    by_month: dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class IncomeReport:
    """Dividend and interest income over a transaction history."""

    dividends: DividendSummary
    interest: InterestSummary
    currency: str
    total_income: Decimal = ZERO
    date_range: DateRange = field(default_factory=DateRange)


@dataclass(frozen=True)
class DividendPayer:
    """Security with its summed net dividends."""

    security: str
    amount: Decimal


@dataclass(frozen=True)
class MonthlyIncome:
    """Dividend and interest income of one ``YYYY-MM`` month."""

    month: str
    dividends: Decimal = ZERO
    interest: Decimal = ZERO
    total_income: Decimal = ZERO


@dataclass(frozen=True)
class ProcessingSummary:
    """High-level statistics of a transaction collection."""

    total_transactions: int = 0
    unique_instruments: int = 0
    date_range: DateRange = field(default_factory=DateRange)
