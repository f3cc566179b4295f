"""Tax-allowance sell planning.

Walks the open lots oldest first and picks whole or partial lots whose
unrealized profit fills the yearly tax-free allowance without exceeding it.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from itertools import accumulate, islice, repeat, takewhile
from typing import Dict, List, Optional, Tuple

from common.decimal_math import ZERO, divide, multiply
from engine.lot_consolidator import consolidate_transaction_history
from market.quotes import PriceLookup
from policy.tax_policy import TaxPolicy
from portfolio.transaction import TickerShares, Transaction

logger = logging.getLogger(__name__)

SHARE_INCREMENT = 0.01


def _fractional_shares(
    profit: Decimal,
    profit_per_share: Decimal,
    cap: Decimal,
    safety_margin: Decimal,
) -> Optional[float]:
    """Shares of a lot that keep the realized profit under the cap.

    Steps through share counts 0.01 apart and keeps the last one whose profit,
    plus one more step, stays below the cap and whose profit stays below the
    safety margin. The result is that count plus one step, rounded up to 0.01.
    None when not even the first step fits.
    """
    step_profit = divide(profit_per_share, 100.0)

    def fits(shares: float) -> bool:
        total = profit + multiply(profit_per_share, shares)
        return total + step_profit < cap and total < safety_margin

    steps = accumulate(repeat(SHARE_INCREMENT), initial=0.0)

    # counts well inside the headroom always fit; only the last stretch is checked
    headroom = int((min(cap - step_profit, safety_margin) - profit) / profit_per_share * 100)
    known = max(headroom - headroom // 1000 - 2, 0)
    boundary = next(islice(steps, known - 1, None)) if known else None

    for shares in takewhile(fits, steps):
        boundary = shares
    if boundary is None:
        return None
    return math.ceil((boundary + SHARE_INCREMENT) * 100) / 100


def _lot_sale(
    lot: Transaction,
    current_prices: Dict[str, Decimal],
    profit: Decimal,
    pol: TaxPolicy,
) -> Optional[Tuple[TickerShares, Decimal]]:
    price = current_prices.get(lot.ticker, ZERO)
    lot_profit = multiply(price - lot.price, lot.shares)
    if lot_profit <= 0 or profit >= pol.safety_margin:
        return None

    new_profit = profit + lot_profit
    if new_profit <= pol.allowance_cap:
        return TickerShares(lot.ticker, lot.shares), new_profit

    profit_per_share = divide(lot_profit, lot.shares)
    shares = _fractional_shares(profit, profit_per_share, pol.allowance_cap, pol.safety_margin)
    if shares is None:
        logger.debug("%s: even %.2f shares would exceed the allowance", lot.ticker, SHARE_INCREMENT)
        return None
    logger.debug("%s: splitting lot of %g shares, selling %.2f", lot.ticker, lot.shares, shares)
    return TickerShares(lot.ticker, shares), profit + multiply(profit_per_share, shares)


@dataclass(frozen=True)
class SellPlan:
    """Sales filling the tax-free allowance and the profit they realize."""

    candidates: List[TickerShares]
    realized_profit: Decimal


def plan_sales(
    transactions: List[Transaction],
    price_lookup: PriceLookup,
    pol: Optional[TaxPolicy] = None,
) -> SellPlan:
    """Lots (or parts of lots) to sell to use up the tax-free allowance.

    Args:
        transactions: Full BUY/SELL history.
        price_lookup: Source of current prices; called once.
        pol: Allowance cap and safety margin. Defaults to a 2000 cap.

    Returns:
        SellPlan with shares to sell per open lot, in lot date order.
    """
    pol = pol or TaxPolicy({})
    current_prices = price_lookup.get_quotes({t.ticker for t in transactions})

    candidates: List[TickerShares] = []
    profit = ZERO
    for lot in consolidate_transaction_history(transactions):
        sale = _lot_sale(lot, current_prices, profit, pol)
        if sale is None:
            continue
        ticker_shares, profit = sale
        candidates.append(ticker_shares)

    logger.debug("Allowance used: %s of %s", profit, pol.allowance_cap)
    return SellPlan(candidates=candidates, realized_profit=profit)


def find_sell_candidates(
    transactions: List[Transaction],
    price_lookup: PriceLookup,
    pol: Optional[TaxPolicy] = None,
) -> List[TickerShares]:
    return plan_sales(transactions, price_lookup, pol).candidates
