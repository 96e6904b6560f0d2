"""Conversion of foreign amounts into the base currency."""

from decimal import Decimal
from typing import Optional


class CurrencyNormalizer:
    """Convert amounts to a single base currency.

    Exchange rates follow the export convention: the rate is the number of
    foreign units per base unit, so conversion divides by it.
    """

    def __init__(self, base_currency: str):
        """Initialize the normalizer.

        Args:
            base_currency: ISO code every amount is converted into
        """
        self.base_currency = base_currency

    def normalize(
        self,
        amount: Decimal,
        currency: Optional[str] = None,
        exchange_rate: Optional[Decimal] = None,
    ) -> Decimal:
        """Convert an amount to the base currency.

        Amounts without a currency or already in the base currency are
        returned unchanged. A missing or zero rate falls back to 1:1.

        Args:
            amount: Amount to convert
            currency: Currency the amount is expressed in
            exchange_rate: Foreign units per base unit

        Returns:
            Amount in the base currency
        """
        if currency is None or currency == self.base_currency:
            return amount

        if exchange_rate is None or exchange_rate == 0:
            # 1:1 approximation; rates are not looked up
            return amount

        return amount / exchange_rate

    def is_base(self, currency: Optional[str]) -> bool:
        """Return True when the currency is absent or equal to the base currency."""
        return currency is None or currency == self.base_currency
