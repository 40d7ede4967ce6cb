"""Conversions between stored minor units (cents) and major units."""

from decimal import ROUND_HALF_UP, Decimal

CENTS_PER_UNIT = 100


def to_minor_units(amount: Decimal | int | float | str) -> int:
    """Convert a major-unit amount (e.g. dollars) to integer cents."""
    cents = Decimal(str(amount)) * CENTS_PER_UNIT
    return int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_major_units(cents: int | Decimal) -> Decimal:
    """Convert integer cents back to a major-unit Decimal with two places."""
    return (Decimal(int(cents)) / CENTS_PER_UNIT).quantize(Decimal("0.01"))


def format_currency(cents: int | Decimal | None) -> str:
    """Format cents as a US dollar string, e.g. ``157.95 -> "$157.95"``.

    >>> format_currency(123456)
    '$1,234.56'
    >>> format_currency(-100)
    '-$1.00'
    """
    amount = to_major_units(cents or 0)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"
