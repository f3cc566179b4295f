from __future__ import annotations
from decimal import Decimal
from typing import Dict

from common.decimal_math import CENT, ZERO

Distribution = Dict[str, Decimal]  # ticker -> amount rounded to cents


def distribution_total(distribution: Distribution) -> Decimal:
    return sum(distribution.values(), ZERO)


def check_conservation(distribution: Distribution, amount: Decimal) -> None:
    """Raise if the distributed total drifts from ``amount`` beyond a cent per ticker."""
    total = distribution_total(distribution)
    tolerance = CENT * max(len(distribution), 1)
    if abs(total - amount) > tolerance:
        raise ValueError(f"Distribution must sum to {amount}, got {total}")
