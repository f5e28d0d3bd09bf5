"""
Money handling.

Amounts are integers in minor units (cents). Floats never enter the
ledger: a float that happens to be integral is still rejected, because
accepting it would hide rounding done by whoever produced it.
"""

from decimal import Decimal, InvalidOperation
from typing import Annotated

from pydantic import BeforeValidator

from banking_ledger.errors import InvalidAmountError

# Largest value a BIGINT line or balance can hold
MAX_AMOUNT = 2**63 - 1


def parse_amount(value) -> int:
    """
    Convert an incoming amount to non-negative integer minor units.

    Accepts int, integral Decimal, or a string of ASCII digits, up to
    MAX_AMOUNT.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(value, "booleans are not amounts")

    if isinstance(value, int):
        amount = value
    elif isinstance(value, Decimal):
        if not value.is_finite() or value != value.to_integral_value():
            raise InvalidAmountError(value, "must be a whole number of minor units")
        amount = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if not (text.isascii() and text.isdigit()):
            raise InvalidAmountError(value, "must be a string of digits")
        digits = text.lstrip("0") or "0"
        if len(digits) > len(str(MAX_AMOUNT)):
            raise InvalidAmountError(value, f"must not exceed {MAX_AMOUNT}")
        amount = int(digits)
    else:
        raise InvalidAmountError(value, "must be an integer")

    if amount < 0:
        raise InvalidAmountError(value, "must not be negative")
    if amount > MAX_AMOUNT:
        raise InvalidAmountError(value, f"must not exceed {MAX_AMOUNT}")
    return amount


def parse_positive_amount(value) -> int:
    """Like parse_amount, but zero is rejected too."""
    amount = parse_amount(value)
    if amount == 0:
        raise InvalidAmountError(value, "must be greater than zero")
    return amount


def format_minor_units(amount: int, exponent: int = 2) -> str:
    """Render minor units for display: 1050 -> '10.50'."""
    try:
        quantum = Decimal(1).scaleb(-exponent)
        return str((Decimal(amount) * quantum).quantize(quantum))
    except InvalidOperation as e:
        raise InvalidAmountError(amount, "cannot be formatted") from e


# Pydantic field types so request binding applies the same rules
Amount = Annotated[int, BeforeValidator(parse_amount)]
PositiveAmount = Annotated[int, BeforeValidator(parse_positive_amount)]
