"""Decimal arithmetic for prices and order totals.

Prices are stored as floats on aggregates; every sum or product is done
on two-place decimals so order totals never pick up float drift.
"""

from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")


def to_amount(value) -> Decimal:
    """Convert a stored price (float, int, str or Decimal) into a two-place Decimal."""
    if isinstance(value, Decimal):
        return value.quantize(CENTS, rounding=ROUND_HALF_UP)
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def line_total(price, quantity: int) -> Decimal:
    return (to_amount(price) * quantity).quantize(CENTS, rounding=ROUND_HALF_UP)


def total_of(amounts) -> Decimal:
    return sum((to_amount(amount) for amount in amounts), ZERO)


def is_whole_cents(value) -> bool:
    """True when `value` is already a two-place amount, so rounding leaves it unchanged."""
    return to_amount(value) == Decimal(str(value))
