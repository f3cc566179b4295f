"""Tests for policies, request building and CSV inputs."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from cli.main import build_request
from common.data_loader import load_prices_csv, load_transactions_csv
from policy.allocation_policy import AllocationPolicy, resolve_strategy
from policy.tax_policy import TaxPolicy
from policy.types import Strategy, StrategyType, Thresholds
from portfolio.transaction import Direction, Transaction


POLICY = {
    "strategy": {"type": "WEIGHT", "thresholds": {"from_ath": 10.0, "over_target": 0.1}},
    "tax_allowance": {"cap": 1000.0, "safety_margin_ratio": 0.9},
}


class TestAllocationPolicy:
    """Tests for default strategy resolution."""

    def test_empty_policy_uses_defaults(self):
        """Missing keys fall back to TARGET with default thresholds."""
        assert AllocationPolicy({}).default_strategy == Strategy.default()

    def test_policy_strategy(self):
        """Configured strategy and thresholds are read."""
        strategy = AllocationPolicy(POLICY).default_strategy

        assert strategy.type == StrategyType.WEIGHT
        assert strategy.thresholds == Thresholds(from_ath=10.0, over_target=0.1)

    def test_request_without_strategy_uses_policy(self):
        """A request that names no strategy takes the configured one."""
        assert resolve_strategy({}, AllocationPolicy(POLICY)) == AllocationPolicy(POLICY).default_strategy

    def test_request_type_keeps_policy_thresholds(self):
        """A request naming only a type keeps the configured thresholds."""
        strategy = resolve_strategy({"strategy": {"type": "PORTFOLIO"}}, AllocationPolicy(POLICY))

        assert strategy.type == StrategyType.PORTFOLIO
        assert strategy.thresholds == Thresholds(from_ath=10.0, over_target=0.1)

    def test_request_strategy_as_name(self):
        """A request may name its strategy with a bare string."""
        strategy = resolve_strategy({"strategy": "rating"}, AllocationPolicy(POLICY))

        assert strategy.type == StrategyType.RATING
        assert strategy.thresholds == Thresholds(from_ath=10.0, over_target=0.1)


class TestTaxPolicy:
    """Tests for allowance parameters."""

    def test_defaults(self):
        """Default cap is 2000 with a 99% safety margin."""
        pol = TaxPolicy({})

        assert pol.allowance_cap == Decimal("2000")
        assert pol.safety_margin == Decimal("1980")

    def test_configured_values(self):
        """Cap and margin ratio come from the policy."""
        pol = TaxPolicy(POLICY)

        assert pol.allowance_cap == Decimal("1000")
        assert pol.safety_margin == Decimal("900")


class TestBuildRequest:
    """Tests for building requests from loaded input."""

    def test_full_request(self):
        """All request fields are converted."""
        raw = {
            "amount": "1500.50",
            "portfolio_value": 20000,
            "strategy": {"type": "rating"},
            "assets": [
                {"ticker": "VTI", "weight": 60, "target": 70, "from_ath": 3.5, "rating": 4},
                {"ticker": "BND"},
            ],
        }

        request = build_request(raw, AllocationPolicy({}))

        assert request.amount == Decimal("1500.50")
        assert request.portfolio_value == Decimal("20000")
        assert request.strategy.type == StrategyType.RATING
        assert request.assets[0].from_ath == 3.5
        assert request.assets[0].rating == 4
        assert request.assets[1].weight == 0.0
        assert request.assets[1].rating == 0

    def test_portfolio_value_is_optional(self):
        """Without a portfolio value the request carries None."""
        request = build_request({"amount": 10, "assets": [{"ticker": "A"}]}, AllocationPolicy({}))

        assert request.portfolio_value is None
        assert not request.has_portfolio_value


class TestCsvInputs:
    """Tests for CSV loaders."""

    def test_load_transactions(self, tmp_path):
        """Rows become transactions with exact prices and dates."""
        path = tmp_path / "transactions.csv"
        path.write_text(
            "ticker,shares,direction,price,date\n"
            "AAPL,10,buy,100.10,2024-01-02\n"
            "AAPL,2.5,SELL,120.0,2024-02-01\n",
            encoding="utf-8",
        )

        transactions = load_transactions_csv(path)

        assert transactions == [
            Transaction("AAPL", 10.0, Direction.BUY, Decimal("100.10"), date(2024, 1, 2)),
            Transaction("AAPL", 2.5, Direction.SELL, Decimal("120.0"), date(2024, 2, 1)),
        ]

    def test_load_prices(self, tmp_path):
        """Prices load into a lookup that omits unknown tickers."""
        path = tmp_path / "prices.csv"
        path.write_text("ticker,price\nAAPL,130.25\nGOOG,220\n", encoding="utf-8")

        lookup = load_prices_csv(path)

        assert lookup.get_quotes({"AAPL", "MSFT"}) == {"AAPL": Decimal("130.25")}

    def test_missing_column(self, tmp_path):
        """A CSV without required columns is rejected."""
        path = tmp_path / "prices.csv"
        path.write_text("symbol,price\nAAPL,1\n", encoding="utf-8")

        with pytest.raises(ValueError, match="ticker"):
            load_prices_csv(path)
