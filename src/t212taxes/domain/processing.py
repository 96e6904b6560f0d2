"""High-level statistics of a transaction collection."""

from typing import Sequence

from t212taxes.domain.entities import ProcessingSummary, Transaction
from t212taxes.domain.income import date_range


def summarize_transactions(transactions: Sequence[Transaction]) -> ProcessingSummary:
    """Count transactions and distinct instruments, and find the covered dates.

    Instruments are identified by ISIN, falling back to ticker.
    """
    instruments = {
        txn.isin or txn.ticker
        for txn in transactions
        if txn.isin or txn.ticker
    }
    return ProcessingSummary(
        total_transactions=len(transactions),
        unique_instruments=len(instruments),
        date_range=date_range(transactions),
    )
