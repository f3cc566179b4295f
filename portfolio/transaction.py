from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


class Direction(Enum):
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class Transaction:
    ticker: str
    shares: float
    direction: Direction
    price: Decimal  # trade price per share
    date: date


@dataclass(frozen=True)
class TickerShares:
    """Shares of one open lot recommended for sale."""

    ticker: str
    shares: float

    def __str__(self) -> str:
        return f"SELL {self.shares:g} {self.ticker}"
