# storefront/utils/money.py
"""Money helpers.

Amounts are carried as integer cents inside the service and only become
two-place ``Decimal`` values at the HTTP boundary.
"""
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def to_cents(value) -> int:
    """Convert a decimal-ish amount ("9.99", 9.99, Decimal) to integer cents."""
    if isinstance(value, int):
        return value * 100
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    return int((amount / CENT).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    return Decimal(int(cents)).scaleb(-2)


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percent_of(cents: int, rate: Decimal) -> int:
    """``cents * rate`` rounded half-up to a whole cent."""
    return round_half_up(Decimal(cents) * rate)
