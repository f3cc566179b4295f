"""Strategy dispatch for investment distribution.

Maps every supported strategy type to its distribution function. A type
without a registered function is rejected rather than served by a default.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Mapping

from common.errors import UnsupportedStrategyError
from engine.allocation_engine import (
    DcaRequest,
    distribute_by_portfolio,
    distribute_by_rating,
    distribute_by_target,
    distribute_by_weight,
)
from policy.types import StrategyType
from portfolio.allocation import Distribution

logger = logging.getLogger(__name__)

DistributionFn = Callable[[DcaRequest], Distribution]

STRATEGIES: Dict[StrategyType, DistributionFn] = {
    StrategyType.TARGET: distribute_by_target,
    StrategyType.WEIGHT: distribute_by_weight,
    StrategyType.PORTFOLIO: distribute_by_portfolio,
    StrategyType.RATING: distribute_by_rating,
}


def optimize(
    request: DcaRequest,
    strategies: Mapping[StrategyType, DistributionFn] = STRATEGIES,
) -> Distribution:
    """Distribute the request amount with the strategy it names.

    Args:
        request: Amount, strategy and assets to distribute over.
        strategies: Registry of strategy functions.

    Returns:
        Ticker to amount, rounded to cents.

    Raises:
        UnsupportedStrategyError: If the strategy type has no function.
        StrategyError: If the strategy cannot distribute the given assets.
    """
    strategy_type = request.strategy.type
    distribute = strategies.get(strategy_type)
    if distribute is None:
        raise UnsupportedStrategyError(f"Unsupported strategy type: {strategy_type}")

    logger.debug("Optimizing %s over %d assets with %s", request.amount, len(request.assets), strategy_type.value)
    return distribute(request)
