"""Tests for FIFO capital gains service."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from t212taxes.domain.diagnostics import (
    Diagnostics,
    SKIP_MISSING_SHARES_OR_PRICE,
    SKIP_NO_TICKER,
)


def _trade(make_transaction, action, when, ticker, shares, price, **fields):
    return make_transaction(
        action,
        when,
        ticker=ticker,
        shares=shares,
        price_per_share=price,
        currency_price_per_share=fields.pop("currency", "EUR"),
        **fields,
    )


def test_no_transactions(capital_gains_service):
    assert capital_gains_service.capital_gains([]) == (Decimal("0"), Decimal("0"))


def test_sell_matches_oldest_lot_first(capital_gains_service, make_transaction):
    transactions = [
        _trade(make_transaction, "Market buy", datetime(2024, 1, 1), "MSFT", "10", "100"),
        _trade(make_transaction, "Market buy", datetime(2024, 2, 1), "MSFT", "10", "110"),
        _trade(make_transaction, "Market sell", datetime(2024, 3, 1), "MSFT", "10", "120"),
    ]

    gains, losses = capital_gains_service.capital_gains(transactions)

    assert gains == Decimal("200")
    assert losses == Decimal("0")


def test_sell_spanning_lots(capital_gains_service, make_transaction):
    transactions = [
        _trade(make_transaction, "Market buy", datetime(2024, 1, 1), "MSFT", "10", "100"),
        _trade(make_transaction, "Limit buy", datetime(2024, 2, 1), "MSFT", "10", "130"),
        _trade(make_transaction, "Market sell", datetime(2024, 3, 1), "MSFT", "15", "120"),
    ]

    gains, losses = capital_gains_service.capital_gains(transactions)

    # 10 x (120 - 100) from the first lot, 5 x (120 - 130) from the second
    assert gains == Decimal("200")
    assert losses == Decimal("50")


def test_gains_and_losses_are_not_netted(capital_gains_service, make_transaction):
    transactions = [
        _trade(make_transaction, "Market buy", datetime(2024, 1, 1), "AAPL", "5", "100"),
        _trade(make_transaction, "Market sell", datetime(2024, 2, 1), "AAPL", "5", "80"),
        _trade(make_transaction, "Market buy", datetime(2024, 1, 1), "TSLA", "2", "200"),
        _trade(make_transaction, "Stop sell", datetime(2024, 2, 1), "TSLA", "2", "250"),
    ]

    gains, losses = capital_gains_service.capital_gains(transactions)

    assert gains == Decimal("100")
    assert losses == Decimal("100")


def test_transactions_sorted_by_time_per_ticker(capital_gains_service, make_transaction):
    transactions = [
        _trade(make_transaction, "Market sell", datetime(2024, 3, 1), "MSFT", "10", "120"),
        _trade(make_transaction, "Market buy", datetime(2024, 2, 1), "MSFT", "10", "110"),
        _trade(make_transaction, "Market buy", datetime(2024, 1, 1), "MSFT", "10", "100"),
    ]

    gains, losses = capital_gains_service.capital_gains(transactions)

    assert gains == Decimal("200")
    assert losses == Decimal("0")


def test_exhausted_lots_are_skipped_by_later_sells(capital_gains_service, make_transaction):
    transactions = [
        _trade(make_transaction, "Market buy", datetime(2024, 1, 1), "MSFT", "10", "100"),
        _trade(make_transaction, "Market buy", datetime(2024, 2, 1), "MSFT", "10", "110"),
        _trade(make_transaction, "Market sell", datetime(2024, 3, 1), "MSFT", "10", "120"),
        _trade(make_transaction, "Market sell", datetime(2024, 4, 1), "MSFT", "10", "105"),
    ]

    gains, losses = capital_gains_service.capital_gains(transactions)

    assert gains == Decimal("200")
    assert losses == Decimal("50")


def test_oversell_excess_contributes_nothing(capital_gains_service, make_transaction):
    diagnostics = Diagnostics()
    transactions = [
        _trade(make_transaction, "Market buy", datetime(2024, 1, 1), "MSFT", "5", "100"),
        _trade(make_transaction, "Market sell", datetime(2024, 2, 1), "MSFT", "8", "120"),
    ]

    gains, losses = capital_gains_service.capital_gains(transactions, diagnostics)

    # Only the 5 recorded shares are matched; the other 3 are dropped
    assert gains == Decimal("100")
    assert losses == Decimal("0")
    assert diagnostics.oversold_shares == {"MSFT": Decimal("3")}


def test_sell_without_any_lot(capital_gains_service, make_transaction):
    transactions = [
        _trade(make_transaction, "Market sell", datetime(2024, 2, 1), "MSFT", "8", "120"),
    ]

    assert capital_gains_service.capital_gains(transactions) == (Decimal("0"), Decimal("0"))


def test_foreign_prices_normalized(capital_gains_service, make_transaction):
    transactions = [
        _trade(
            make_transaction,
            "Market buy",
            datetime(2024, 1, 1),
            "AAPL",
            "10",
            "110",
            currency="USD",
            exchange_rate="1.1",
        ),
        _trade(
            make_transaction,
            "Market sell",
            datetime(2024, 2, 1),
            "AAPL",
            "10",
            "132",
            currency="USD",
            exchange_rate="1.1",
        ),
    ]

    gains, losses = capital_gains_service.capital_gains(transactions)

    # 10 x (120 - 100) in EUR
    assert gains == Decimal("200")
    assert losses == Decimal("0")


def test_incomplete_trades_skipped(capital_gains_service, make_transaction):
    diagnostics = Diagnostics()
    transactions = [
        make_transaction("Market buy", datetime(2024, 1, 1), shares="10", price_per_share="100"),
        make_transaction("Market buy", datetime(2024, 1, 2), ticker="MSFT", shares="10"),
        _trade(make_transaction, "Market buy", datetime(2024, 1, 3), "MSFT", "10", "100"),
        make_transaction("Market sell", datetime(2024, 1, 4), ticker="MSFT", price_per_share="150"),
        _trade(make_transaction, "Market sell", datetime(2024, 1, 5), "MSFT", "10", "110"),
    ]

    gains, losses = capital_gains_service.capital_gains(transactions, diagnostics)

    assert gains == Decimal("100")
    assert losses == Decimal("0")
    assert diagnostics.skipped[SKIP_NO_TICKER] == 1
    assert diagnostics.skipped[SKIP_MISSING_SHARES_OR_PRICE] == 2
    assert diagnostics.oversold_shares == {}


def test_non_trades_ignored(capital_gains_service, make_transaction):
    transactions = [
        make_transaction("Deposit", datetime(2024, 1, 1), total="1000"),
        make_transaction("Dividend", datetime(2024, 1, 1), ticker="MSFT", result="10"),
    ]

    assert capital_gains_service.capital_gains(transactions) == (Decimal("0"), Decimal("0"))


def test_mixed_aware_and_naive_times(capital_gains_service, make_transaction):
    transactions = [
        _trade(make_transaction, "Market sell", datetime(2024, 2, 1), "MSFT", "10", "120"),
        _trade(
            make_transaction,
            "Market buy",
            datetime(2024, 1, 1, 10, tzinfo=timezone(timedelta(hours=2))),
            "MSFT",
            "10",
            "100",
        ),
    ]

    gains, losses = capital_gains_service.capital_gains(transactions)

    assert gains == Decimal("200")
    assert losses == Decimal("0")
