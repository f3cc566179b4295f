from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Mapping, Protocol, Set


class PriceLookup(Protocol):
    """Current market prices by ticker. Unknown tickers are left out of the result."""

    def get_quotes(self, tickers: Set[str]) -> Dict[str, Decimal]:
        ...


@dataclass(frozen=True)
class StaticPriceLookup:
    """Price lookup answering from a fixed mapping."""

    prices: Mapping[str, Decimal] = field(default_factory=dict)

    def get_quotes(self, tickers: Set[str]) -> Dict[str, Decimal]:
        return {t: self.prices[t] for t in tickers if t in self.prices}
