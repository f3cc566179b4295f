from __future__ import annotations
from typing import List
from portfolio.allocation import Distribution
from portfolio.transaction import TickerShares

def explain_distribution(distribution: Distribution) -> List[str]:
    return [f"BUY ${amount:,.2f} {ticker}" for ticker, amount in distribution.items()]

def explain_sales(candidates: List[TickerShares]) -> List[str]:
    return [f"{c}  |  fills tax-free allowance" for c in candidates]
