from __future__ import annotations


class StrategyError(Exception):
    """Error raised when an allocation strategy cannot produce a distribution."""

    pass


class NoEligibleAssetsError(StrategyError):
    """No asset passed the eligibility filter."""

    pass


class DegenerateStrategyInputError(StrategyError):
    """Strategy inputs would divide by zero (zero targets, gaps or ratings)."""

    pass


class UnsupportedStrategyError(StrategyError):
    """Strategy type is unknown or has no implementation."""

    pass


class TransactionHistoryError(Exception):
    """Transaction history cannot be consolidated into open lots."""

    pass
