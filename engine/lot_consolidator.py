"""FIFO consolidation of a transaction history into open buy lots.

Sells consume the oldest open lots first. A sell larger than all open lots
leaves a carried amount that later buys pay off before opening a new lot.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import replace
from typing import Deque, Dict, List

from common.errors import TransactionHistoryError
from portfolio.transaction import Direction, Transaction

logger = logging.getLogger(__name__)


def _consume_lots(lots: Deque[Transaction], sold: float) -> float:
    """Take ``sold`` shares off the oldest lots; return what no lot covered."""
    while lots and sold > 0:
        oldest = lots[0]
        if oldest.shares > sold:
            lots[0] = replace(oldest, shares=oldest.shares - sold)
            return 0.0
        lots.popleft()
        sold -= oldest.shares
    return sold


def _open_lots(transactions: List[Transaction]) -> List[Transaction]:
    lots: Deque[Transaction] = deque()
    carried_sold = 0.0
    seen_buy = False

    for t in sorted(transactions, key=lambda t: t.date):
        if t.direction == Direction.BUY:
            seen_buy = True
            if carried_sold > 0:
                remaining = t.shares - carried_sold
                if remaining > 0:
                    lots.append(replace(t, shares=remaining))
                    carried_sold = 0.0
                else:
                    carried_sold -= t.shares
            else:
                lots.append(t)
        else:
            if not seen_buy:
                raise TransactionHistoryError(
                    f"SELL of {t.shares:g} {t.ticker} on {t.date} has no prior BUY"
                )
            carried_sold += _consume_lots(lots, t.shares)

    if carried_sold > 0:
        logger.debug("%s: %g sold shares not matched by any buy", transactions[0].ticker, carried_sold)
    return list(lots)


def consolidate_transaction_history(transactions: List[Transaction]) -> List[Transaction]:
    """Reduce BUY/SELL history to the BUY lots still held.

    Args:
        transactions: Unordered history, any number of tickers.

    Returns:
        Open BUY lots with their remaining shares, sorted by date.

    Raises:
        TransactionHistoryError: If a ticker is sold before it is ever bought.
    """
    by_ticker: Dict[str, List[Transaction]] = {}
    for t in transactions:
        by_ticker.setdefault(t.ticker, []).append(t)

    lots: List[Transaction] = []
    for ticker, history in by_ticker.items():
        open_lots = _open_lots(history)
        logger.debug("%s: %d transactions -> %d open lots", ticker, len(history), len(open_lots))
        lots.extend(open_lots)
    return sorted(lots, key=lambda t: t.date)
