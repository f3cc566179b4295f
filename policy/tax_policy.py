from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Any

from common.decimal_math import multiply, to_decimal

TAX_ALLOWANCE_CAP = 2000.0
SAFETY_MARGIN_RATIO = 0.99

@dataclass(frozen=True)
class TaxPolicy:
    raw: Dict[str, Any]

    @property
    def _allowance(self) -> Dict[str, Any]:
        return self.raw.get("tax_allowance") or {}

    @property
    def allowance_cap(self) -> Decimal:
        return to_decimal(float(self._allowance.get("cap", TAX_ALLOWANCE_CAP)))

    @property
    def safety_margin_ratio(self) -> float:
        return float(self._allowance.get("safety_margin_ratio", SAFETY_MARGIN_RATIO))

    @property
    def safety_margin(self) -> Decimal:
        return multiply(self.allowance_cap, self.safety_margin_ratio)
