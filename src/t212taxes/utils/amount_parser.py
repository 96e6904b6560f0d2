"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
from typing import Optional
import re


def parse_amount(amount_str: str | int | float | Decimal) -> Decimal:
    """Parse an amount into a Decimal.

    Handles various formats:
    - "123.45"
    - "€123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Numbers are accepted as well; floats go through ``str`` so that 0.1
    becomes Decimal("0.1") rather than its binary expansion.

    Args:
        amount_str: Amount string or number

    Returns:
        Decimal amount

    Raises:
        ValueError: If the amount cannot be parsed
    """
    if isinstance(amount_str, bool):
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if isinstance(amount_str, Decimal):
        return amount_str
    if isinstance(amount_str, (int, float)):
        amount_str = str(amount_str)
    if not isinstance(amount_str, str):
        raise ValueError(f"Could not parse amount '{amount_str}': expected a number or string")

    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols
    amount_str = re.sub(r"[$€£¥]", "", amount_str)

    # Remove thousands separators
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e!r}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")
    return -amount if is_negative else amount


def parse_optional_amount(value: Optional[str | int | float | Decimal]) -> Optional[Decimal]:
    """Parse an amount, treating None and blank strings as absent."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return parse_amount(value)
