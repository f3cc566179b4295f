from __future__ import annotations
from dataclasses import dataclass

@dataclass(frozen=True)
class Asset:
    ticker: str
    weight: float = 0.0  # current allocation, percent
    target: float = 0.0  # desired allocation, percent
    from_ath: float = 0.0  # decline from all-time high, percent; 0 means unknown
    rating: int = 0
