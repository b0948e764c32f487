"""Округление весов до 0.1 кг"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[int, float, Decimal]

ONE_DECIMAL = Decimal('0.1')


def to_decimal(value: Number) -> Decimal:
    """Float через str: 60.2 -> Decimal('60.2'), а не 60.2000000000000028..."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round1(value: Number) -> float:
    """Round half away from zero to one decimal: 0.25 -> 0.3, -0.25 -> -0.3"""
    return float(to_decimal(value).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))
