"""Shared rounding policy for tax amounts.

Most tax documents only carry two decimal places, so every intermediate
amount is rounded to the cent, half away from zero, as well as the final
totals.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
ZERO = Decimal("0")

Number = Decimal | int | float | str


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal without picking up binary float noise.

    Floats go through ``repr`` so ``0.1`` becomes ``Decimal("0.1")`` rather than
    ``Decimal("0.1000000000000000055511151231257827...")``.

    Raises:
        TypeError: If the value is a bool or not numeric.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("Booleans are not valid amounts")
    if isinstance(value, float):
        return Decimal(repr(float(value)))
    if isinstance(value, (int, str)):
        return Decimal(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to Decimal")


def round_to_hundredths(value: Number) -> Decimal:
    """Round to two decimal places, half away from zero.

    Example:
        >>> round_to_hundredths(Decimal("1027.505"))
        Decimal('1027.51')
        >>> round_to_hundredths(Decimal("-0.125"))
        Decimal('-0.13')
    """
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
