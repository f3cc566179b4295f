"""Fixed-precision money arithmetic.

Products and quotients run in a 7 significant digit context; final amounts
are rounded to cents with ROUND_HALF_DOWN. Percentages travel as floats in
the 0-100 range and are converted to fractions before touching money.
"""
from __future__ import annotations

from decimal import ROUND_HALF_DOWN, ROUND_HALF_EVEN, Context, Decimal
from typing import Union

MONEY_CONTEXT = Context(prec=7, rounding=ROUND_HALF_EVEN)
CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED_PERCENT = 100.0

Number = Union[Decimal, float, int]


def to_decimal(value: Number) -> Decimal:
    """Convert a float through its shortest text form, rounded to the money context."""
    if isinstance(value, Decimal):
        return MONEY_CONTEXT.plus(value)
    return MONEY_CONTEXT.create_decimal(repr(value))


def multiply(amount: Decimal, value: Number) -> Decimal:
    return MONEY_CONTEXT.multiply(amount, to_decimal(value))


def divide(amount: Decimal, value: Number) -> Decimal:
    return MONEY_CONTEXT.divide(amount, to_decimal(value))


def to_fraction(percentage: float) -> float:
    return percentage / HUNDRED_PERCENT


def round_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_DOWN)


def calculate_distribution(amount: Decimal, fraction: float) -> Decimal:
    """Share of ``amount`` for a 0-1 ``fraction``, rounded to cents."""
    product = MONEY_CONTEXT.multiply(amount, Decimal(repr(fraction)))
    return round_money(product)
