"""
Minor Unit Conversion

Presentation-side helpers between human-entered major-unit decimals and
the integer minor units the ledger stores. Conversion truncates toward
zero; it never rounds up.

Scaling is done on the integer coefficient of the Decimal, never through
Decimal arithmetic, so no amount is rounded by the decimal context.
"""

from decimal import Decimal, InvalidOperation
from typing import Union

MINOR_UNIT_DECIMALS = 8
MINOR_UNITS_PER_MAJOR = 10 ** MINOR_UNIT_DECIMALS


def to_minor_units(amount: Union[str, int, Decimal]) -> int:
    """
    Convert a major-unit amount to minor units.

    Args:
        amount: Major-unit value, e.g. "1.5" or Decimal("0.000000019")

    Returns:
        Integer minor units, truncated

    Raises:
        ValueError: If amount is not a finite, non-negative number
    """
    if isinstance(amount, float):
        raise ValueError("Float amounts are not accepted; pass a string or Decimal")
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount!r}")

    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")
    if value < 0:
        raise ValueError("Amount must not be negative")

    _, digits, exponent = value.as_tuple()
    coefficient = int("".join(map(str, digits)))
    shift = exponent + MINOR_UNIT_DECIMALS
    if shift >= 0:
        return coefficient * 10 ** shift
    return coefficient // 10 ** -shift


def to_major_units(minor: int) -> Decimal:
    """Exact major-unit value of a minor-unit amount"""
    return Decimal(f"{minor}E-{MINOR_UNIT_DECIMALS}")


def format_minor_units(minor: int, places: int = 2) -> str:
    """Render minor units for display, e.g. 150000000 -> "1.50" """
    scaled = abs(minor) * 10 ** places // MINOR_UNITS_PER_MAJOR
    whole, fraction = divmod(scaled, 10 ** places)
    sign = "-" if minor < 0 else ""
    if not places:
        return f"{sign}{whole:,}"
    return f"{sign}{whole:,}.{fraction:0{places}d}"


__all__ = [
    "MINOR_UNIT_DECIMALS",
    "MINOR_UNITS_PER_MAJOR",
    "to_minor_units",
    "to_major_units",
    "format_minor_units",
]
