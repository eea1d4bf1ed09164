"""Parsing of user-entered satoshi amounts."""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

AmountInput = Union[str, int, float, Decimal, None]


def parse_amount(value: AmountInput) -> Optional[int]:
    """Parse a user-entered amount into whole satoshis.

    Accepts ints, decimals and numeric strings ("500", " 1e3 ", "500.0").
    Returns None for anything that is not a well-formed, finite,
    non-negative whole number (empty input, "abc", "-5", "1.5").
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value if value >= 0 else None

    text = str(value).strip()
    if not text:
        return None

    try:
        number = Decimal(text)
    except InvalidOperation:
        return None

    if not number.is_finite() or number < 0 or number != number.to_integral_value():
        return None
    return int(number)


def is_blank(value: AmountInput) -> bool:
    """True when no amount was entered at all."""
    return value is None or (isinstance(value, str) and not value.strip())


def format_sats(amount: Optional[int]) -> str:
    """Format an amount for display, e.g. ``1,000 sats``."""
    return f"{amount or 0:,} sats"
