"""Configuration for t212taxes."""

import os
from typing import Optional

from t212taxes.domain.errors import ValidationError, invalid_currency

DEFAULT_BASE_CURRENCY = "EUR"
BASE_CURRENCY_ENV_VAR = "T212_BASE_CURRENCY"


def get_base_currency(currency: Optional[str] = None) -> str:
    """Resolve the base currency.

    Args:
        currency: Explicit currency code. If None, checks the
            T212_BASE_CURRENCY environment variable, then defaults to EUR

    Returns:
        Upper-case three-letter currency code

    Raises:
        ValidationError: If the code is not three letters
    """
    if currency is None:
        # Check environment variable
        currency = os.environ.get(BASE_CURRENCY_ENV_VAR)

    if currency is None or not currency.strip():
        return DEFAULT_BASE_CURRENCY

    code = currency.strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValidationError(invalid_currency(currency))
    return code
