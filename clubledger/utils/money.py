"""Decimal helpers for currency amounts."""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Largest value a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal("9999999999.99")


def to_money(value: Any) -> Decimal:
    """Coerce a number (or numeric string) to a Decimal rounded to cents.

    Floats go through ``str`` so 0.1 becomes Decimal("0.10") rather than its
    binary expansion. ``None`` is treated as zero, which is what SQL ``SUM``
    returns for an empty set.

    Raises:
        InvalidOperation: If the value is not numeric
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise InvalidOperation(f"Not a monetary value: {value!r}")
    if not isinstance(value, Decimal):
        value = Decimal(str(value).strip())
    if not value.is_finite():
        raise InvalidOperation(f"Not a finite monetary value: {value!r}")
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(value: Any) -> Decimal:
    """Parse an amount typed by staff without changing its value.

    Unlike ``to_money`` this never rounds: fractions of a cent, missing values
    and amounts too large to store are rejected.

    Raises:
        InvalidOperation: If the value is not an exact, storable amount
    """
    if value is None or isinstance(value, bool):
        raise InvalidOperation(f"Not a monetary value: {value!r}")
    amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    if not amount.is_finite():
        raise InvalidOperation(f"Not a finite monetary value: {value!r}")
    if amount != amount.quantize(CENT):
        raise InvalidOperation(f"More than two decimal places: {value!r}")
    if abs(amount) > MAX_AMOUNT:
        raise InvalidOperation(f"Amount too large: {value!r}")
    return amount.quantize(CENT)


def format_money(value: Decimal, symbol: str = "$") -> str:
    return f"{symbol}{to_money(value):.2f}"
