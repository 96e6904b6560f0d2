"""Utility functions for t212taxes."""

from t212taxes.utils.date_parser import parse_timestamp, year_end
from t212taxes.utils.amount_parser import parse_amount, parse_optional_amount

__all__ = ["parse_timestamp", "year_end", "parse_amount", "parse_optional_amount"]
