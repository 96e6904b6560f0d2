"""Shared pytest fixtures for t212taxes tests."""

from datetime import datetime
from decimal import Decimal

import pytest

from t212taxes.domain.capital_gains import CapitalGainsService
from t212taxes.domain.entities import Transaction
from t212taxes.domain.income import IncomeService
from t212taxes.domain.portfolio import PortfolioService
from t212taxes.domain.reports import ReportService

DECIMAL_FIELDS = (
    "shares",
    "price_per_share",
    "exchange_rate",
    "result",
    "total",
    "withholding_tax",
)


def build_transaction(action: str, time: datetime, **fields) -> Transaction:
    """Build a Transaction, converting numeric fields to Decimal."""
    for name in DECIMAL_FIELDS:
        if fields.get(name) is not None:
            fields[name] = Decimal(str(fields[name]))
    return Transaction(action=action, time=time, **fields)


@pytest.fixture
def make_transaction():
    """Return a factory for Transaction entities."""
    return build_transaction


@pytest.fixture
def report_service():
    """Create a ReportService reporting in EUR."""
    return ReportService("EUR")


@pytest.fixture
def capital_gains_service():
    """Create a CapitalGainsService reporting in EUR."""
    return CapitalGainsService("EUR")


@pytest.fixture
def portfolio_service():
    """Create a PortfolioService reporting in EUR."""
    return PortfolioService("EUR")


@pytest.fixture
def income_service():
    """Create an IncomeService reporting in EUR."""
    return IncomeService("EUR")


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def ledger_records():
    """Export-style records covering trades, deposits and income."""
    return [
        {
            "Action": "Deposit",
            "Time": "2023-01-05 09:00:00",
            "Total": "2000.00",
            "Currency (Total)": "EUR",
        },
        {
            "Action": "Market buy",
            "Time": "2023-02-01 10:00:00",
            "ISIN": "US5949181045",
            "Ticker": "MSFT",
            "Name": "Microsoft",
            "No. of shares": "10",
            "Price / share": "100.00",
            "Currency (Price / share)": "EUR",
            "Total": "1000.00",
            "Currency (Total)": "EUR",
        },
        {
            "Action": "Dividend (Ordinary)",
            "Time": "2023-06-15 08:00:00",
            "ISIN": "US5949181045",
            "Ticker": "MSFT",
            "Result": "8.50",
            "Currency (Result)": "EUR",
            "Withholding tax": "1.50",
        },
        {
            "Action": "Market sell",
            "Time": "2024-03-01 10:00:00",
            "ISIN": "US5949181045",
            "Ticker": "MSFT",
            "Name": "Microsoft",
            "No. of shares": "4",
            "Price / share": "130.00",
            "Currency (Price / share)": "EUR",
            "Result": "120.00",
            "Currency (Result)": "EUR",
            "Total": "520.00",
            "Currency (Total)": "EUR",
        },
        {
            "Action": "Interest on cash",
            "Time": "2024-04-30 23:00:00",
            "Result": "3.25",
            "Currency (Result)": "EUR",
            "Notes": "Monthly interest on cash",
        },
    ]
