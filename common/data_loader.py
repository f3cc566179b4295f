"""CSV inputs for the tax-allowance planner.

Transactions: ``ticker,shares,direction,price,date`` (one row per trade).
Prices: ``ticker,price``. Prices are parsed from their text so that
``Decimal`` keeps the exact value written in the file.
"""
from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import List

import pandas as pd

from market.quotes import StaticPriceLookup
from portfolio.transaction import Direction, Transaction

TRANSACTION_COLUMNS = ("ticker", "shares", "direction", "price", "date")
PRICE_COLUMNS = ("ticker", "price")


def _read_csv(path: str | Path, columns: tuple) -> pd.DataFrame:
    df = pd.read_csv(path, dtype={"ticker": str, "direction": str, "price": str})
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"{path}: missing column(s) {', '.join(missing)}")
    return df


def load_transactions_csv(path: str | Path) -> List[Transaction]:
    df = _read_csv(path, TRANSACTION_COLUMNS)
    df["date"] = pd.to_datetime(df["date"]).dt.date
    return [
        Transaction(
            ticker=row.ticker.strip(),
            shares=float(row.shares),
            direction=Direction(row.direction.strip().upper()),
            price=Decimal(row.price.strip()),
            date=row.date,
        )
        for row in df.itertuples(index=False)
    ]


def load_prices_csv(path: str | Path) -> StaticPriceLookup:
    df = _read_csv(path, PRICE_COLUMNS)
    return StaticPriceLookup(
        prices={row.ticker.strip(): Decimal(row.price.strip()) for row in df.itertuples(index=False)}
    )
