"""Classification of ledger actions."""

from datetime import datetime

from t212taxes.domain.entities import Transaction, TransactionType
from t212taxes.utils.date_parser import to_naive_utc

BUY_ACTIONS = frozenset(
    {
        TransactionType.MARKET_BUY.value,
        TransactionType.LIMIT_BUY.value,
        TransactionType.STOP_BUY.value,
    }
)
SELL_ACTIONS = frozenset(
    {
        TransactionType.MARKET_SELL.value,
        TransactionType.LIMIT_SELL.value,
        TransactionType.STOP_SELL.value,
    }
)
TRADE_ACTIONS = BUY_ACTIONS | SELL_ACTIONS

DIVIDEND_KEYWORD = "dividend"
INTEREST_KEYWORD = "interest"


def is_buy(txn: Transaction) -> bool:
    """Return True for market, limit and stop buys."""
    return txn.action in BUY_ACTIONS


def is_sell(txn: Transaction) -> bool:
    """Return True for market, limit and stop sells."""
    return txn.action in SELL_ACTIONS


def is_trade(txn: Transaction) -> bool:
    """Return True for any buy or sell order."""
    return txn.action in TRADE_ACTIONS


def is_deposit(txn: Transaction) -> bool:
    """Return True for cash deposits."""
    return txn.action == TransactionType.DEPOSIT.value


def is_dividend(txn: Transaction) -> bool:
    """Return True when the action text mentions a dividend.

    Substring matching tolerates export variants such as
    "Dividend (Ordinary)" or "Stock dividend paid".
    """
    return DIVIDEND_KEYWORD in txn.action.lower()


def is_interest(txn: Transaction) -> bool:
    """Return True when the action text mentions interest."""
    return INTEREST_KEYWORD in txn.action.lower()


def transaction_time(txn: Transaction) -> datetime:
    """Return the timestamp of a transaction as a naive UTC datetime."""
    return to_naive_utc(txn.time)
