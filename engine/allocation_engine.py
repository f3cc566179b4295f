"""Distribution strategies for a new investment.

Each strategy turns a request (amount, strategy, assets) into a mapping of
ticker to amount rounded to cents:
- TARGET: eligible assets share the amount in proportion to their targets
- WEIGHT: eligible assets are topped up towards their targets
- PORTFOLIO: over-target percentage is moved onto under-target assets
- RATING: every asset gets a share proportional to its rating
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from common.decimal_math import (
    HUNDRED_PERCENT,
    MONEY_CONTEXT,
    ZERO,
    calculate_distribution,
    multiply,
    round_money,
    to_fraction,
)
from common.errors import DegenerateStrategyInputError, NoEligibleAssetsError
from policy.eligibility_policy import filter_eligible, is_under_target
from policy.types import Strategy, Thresholds
from portfolio.allocation import Distribution
from portfolio.asset import Asset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DcaRequest:
    """A request to invest ``amount`` across ``assets``."""

    amount: Decimal
    assets: List[Asset]
    strategy: Strategy = field(default_factory=Strategy.default)
    portfolio_value: Optional[Decimal] = None  # current market value of the holdings

    @property
    def has_portfolio_value(self) -> bool:
        return self.portfolio_value is not None and self.portfolio_value > 0


def _eligible_assets(request: DcaRequest) -> List[Asset]:
    eligible = filter_eligible(request.assets, request.strategy.thresholds)
    logger.debug(
        "Eligible assets for %s: %s",
        request.strategy.type.value,
        [a.ticker for a in eligible],
    )
    if not eligible:
        raise NoEligibleAssetsError(
            f"No eligible assets for {request.strategy.type.value} strategy "
            f"among {[a.ticker for a in request.assets]}"
        )
    return eligible


def distribute_by_target(request: DcaRequest) -> Distribution:
    """Split the amount over eligible assets, scaling their targets up to 100%."""
    eligible = _eligible_assets(request)

    target_sum = sum(a.target for a in eligible)
    if target_sum <= 0:
        raise DegenerateStrategyInputError("Eligible assets have no target allocation")

    # percentage of excluded assets is spread over eligible ones
    target_left = HUNDRED_PERCENT - target_sum
    target_factor = target_left / (HUNDRED_PERCENT - target_left)

    return {
        a.ticker: calculate_distribution(
            request.amount, to_fraction(a.target + a.target * target_factor)
        )
        for a in eligible
    }


def distribute_by_rating(request: DcaRequest) -> Distribution:
    """Split the amount over all assets in proportion to their ratings."""
    rating_sum = float(sum(a.rating or 0 for a in request.assets))
    if rating_sum <= 0:
        raise DegenerateStrategyInputError("Total rating of assets must be positive")

    return {
        a.ticker: calculate_distribution(request.amount, (a.rating or 0) / rating_sum)
        for a in request.assets
    }


def calculate_target_by_portfolio(
    assets: List[Asset],
    thresholds: Thresholds,
) -> Dict[str, float]:
    """Adjusted target fraction (0-1) per ticker.

    The summed excess of over-target assets is shared equally among the
    under-target ones; over-target assets have their excess taken off their
    target.

    Raises:
        DegenerateStrategyInputError: If no asset is under target.
    """
    under = [a for a in assets if is_under_target(a, thresholds)]
    if not under:
        raise DegenerateStrategyInputError("No asset is under target; nothing to rebalance towards")

    over_share = sum(a.weight - a.target for a in assets if not is_under_target(a, thresholds))
    target_factor = over_share / len(under)

    adjusted: Dict[str, float] = {}
    for a in assets:
        if is_under_target(a, thresholds):
            adjusted_target = a.target + target_factor
        else:
            adjusted_target = a.target - (a.weight - a.target)
        adjusted[a.ticker] = to_fraction(adjusted_target)
    return adjusted


def distribute_by_portfolio(request: DcaRequest) -> Distribution:
    """Split the amount over all assets by their portfolio-adjusted targets."""
    adjusted = calculate_target_by_portfolio(request.assets, request.strategy.thresholds)
    return {
        ticker: calculate_distribution(request.amount, fraction)
        for ticker, fraction in adjusted.items()
    }


def _weight_gap(asset: Asset) -> float:
    return max(asset.target - asset.weight, 0.0)


def _gap_amounts(request: DcaRequest, underweight: List[Asset]) -> Tuple[Decimal, Dict[str, Decimal]]:
    """Money each under-weight asset needs to reach its target, and the total."""
    gaps = {
        a.ticker: multiply(request.portfolio_value, to_fraction(_weight_gap(a)))
        for a in underweight
    }
    return sum(gaps.values(), ZERO), gaps


def _adjusted_weight(portfolio_value: Decimal, funded: Decimal, weight: float) -> float:
    """Weight in percent after ``funded`` has been invested into the asset."""
    invested = multiply(portfolio_value, to_fraction(weight)) + funded
    return float(MONEY_CONTEXT.divide(invested, portfolio_value)) * HUNDRED_PERCENT


def _rebalance_portfolio_by_weight(
    request: DcaRequest,
    total_gap: Decimal,
    gaps: Dict[str, Decimal],
) -> Distribution:
    # every gap is funded; what is left follows the portfolio rule over all assets
    amount_left = request.amount - total_gap
    updated = [
        Asset(
            ticker=a.ticker,
            weight=_adjusted_weight(request.portfolio_value, gaps.get(a.ticker, ZERO), a.weight),
            target=a.target,
        )
        for a in request.assets
    ]
    adjusted = calculate_target_by_portfolio(updated, request.strategy.thresholds)
    return {
        ticker: round_money(multiply(amount_left, fraction) + gaps.get(ticker, ZERO))
        for ticker, fraction in adjusted.items()
    }


def _rebalance_under_weighted(request: DcaRequest, underweight: List[Asset]) -> Distribution:
    total_weight_gap = sum(_weight_gap(a) for a in underweight)
    return {
        a.ticker: calculate_distribution(request.amount, _weight_gap(a) / total_weight_gap)
        for a in underweight
    }


def distribute_by_weight(request: DcaRequest) -> Distribution:
    """Top up eligible assets towards their targets.

    With a known portfolio value, the money gap of every eligible asset is
    funded first when the amount covers all of them, and the remainder is
    spread over all assets by the portfolio rule. Otherwise the amount is
    split in proportion to each eligible asset's weight gap.

    Eligible assets at or above their target (within the tolerance) get
    nothing and are left out of the result.

    Raises:
        NoEligibleAssetsError: If no asset passes the filter.
        DegenerateStrategyInputError: If no eligible asset is below target.
    """
    underweight = [a for a in _eligible_assets(request) if _weight_gap(a) > 0]
    if not underweight:
        raise DegenerateStrategyInputError("Eligible assets have no weight gap to their targets")

    if request.has_portfolio_value:
        total_gap, gaps = _gap_amounts(request, underweight)
        if request.amount > total_gap:
            logger.debug("Amount %s covers total gap %s; rebalancing portfolio", request.amount, total_gap)
            return _rebalance_portfolio_by_weight(request, total_gap, gaps)

    logger.debug("Distributing %s over weight gaps of %d assets", request.amount, len(underweight))
    return _rebalance_under_weighted(request, underweight)
