"""Decimal arithmetic and the rounding policy used by every calculation

Monetary values are held at 2-decimal scale and rates at 4-decimal scale,
both rounded half-up. Line items round each derived amount on its own and
invoice totals are sums of those rounded amounts; a total can therefore
differ by a cent from rounding the raw sum once.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Union

Number = Union[Decimal, int, str, float]

CENT = Decimal("0.01")
RATE_QUANTUM = Decimal("0.0001")
ZERO = Decimal("0.00")


def to_decimal(value: Number) -> Decimal:
    """
    Convert value to a finite Decimal

    Raises:
        InvalidOperation: value is not a number, or is NaN or infinite
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        result = Decimal(str(value))
    else:
        try:
            result = Decimal(value)
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidOperation(f"Not a number: {value!r}") from None
    if not result.is_finite():
        raise InvalidOperation(f"Not a finite number: {value!r}")
    return result


def round2(value: Number) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def round4(value: Number) -> Decimal:
    return to_decimal(value).quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP)


def sum_money(values: Iterable[Decimal]) -> Decimal:
    """Sum already-rounded amounts without re-rounding the parts"""
    return round2(sum(values, ZERO))
