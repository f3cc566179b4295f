"""Dollar-cost averaging CLI.

Provides commands for:
- optimize: Distribute a new investment across assets
- tax-allowance: Pick lots to sell within the tax-free allowance
"""
from __future__ import annotations

import argparse
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from common.config_loader import load_all, load_yaml
from common.data_loader import load_prices_csv, load_transactions_csv
from common.errors import StrategyError, TransactionHistoryError
from engine.allocation_engine import DcaRequest
from engine.explanation_engine import explain_distribution, explain_sales
from engine.strategy_engine import optimize
from engine.tax_allowance_engine import plan_sales
from policy.allocation_policy import AllocationPolicy, resolve_strategy
from policy.tax_policy import TaxPolicy
from portfolio.allocation import check_conservation
from portfolio.asset import Asset
from reporting.explainability import explainability_report


def build_assets(raw_assets: List[Dict[str, Any]]) -> List[Asset]:
    """Build assets from request input."""
    assets = []
    for a in raw_assets or []:
        assets.append(
            Asset(
                ticker=str(a["ticker"]),
                weight=float(a.get("weight", 0.0)),
                target=float(a.get("target", 0.0)),
                from_ath=float(a.get("from_ath") or 0.0),
                rating=int(a.get("rating") or 0),
            )
        )
    return assets


def build_request(raw: Dict[str, Any], pol: AllocationPolicy) -> DcaRequest:
    """Build an optimization request from loaded YAML/JSON input."""
    portfolio_value: Optional[Decimal] = None
    if raw.get("portfolio_value") is not None:
        portfolio_value = Decimal(str(raw["portfolio_value"]))

    return DcaRequest(
        amount=Decimal(str(raw["amount"])),
        assets=build_assets(raw.get("assets")),
        strategy=resolve_strategy(raw, pol),
        portfolio_value=portfolio_value,
    )


def cmd_optimize(args) -> int:
    """Handle optimize command: distribute a new investment."""
    cfg = load_all(args.config)
    try:
        request = build_request(load_yaml(args.request), AllocationPolicy(cfg.policy))
        distribution = optimize(request)
    except StrategyError as e:
        print(f"Error: {e}")
        return 1

    report = explainability_report(request, distribution)

    print(f"Investment Distribution: ${request.amount:,.2f} ({request.strategy.type.value})")
    print("=" * 50)

    print("\nSummary:")
    for k, v in report["summary"].items():
        if isinstance(v, Decimal):
            print(f"  {k}: ${v:,.2f}")
        else:
            print(f"  {k}: {v}")

    try:
        check_conservation(distribution, request.amount)
    except ValueError as e:
        print(f"\nWarning: {e}")

    print("\nDistribution:")
    for line in explain_distribution(distribution):
        print("  " + line)

    if args.explain and report["excluded"]:
        print("\nExcluded:")
        for ticker, reasons in report["excluded"].items():
            print(f"  {ticker}: {'; '.join(reasons) or 'no allocation'}")

    return 0


def cmd_tax_allowance(args) -> int:
    """Handle tax-allowance command: lots to sell within the allowance."""
    cfg = load_all(args.config)
    pol = TaxPolicy(cfg.policy)

    try:
        transactions = load_transactions_csv(args.transactions)
        price_lookup = load_prices_csv(args.prices)
        plan = plan_sales(transactions, price_lookup, pol)
    except (TransactionHistoryError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    print(f"Tax Allowance Sales (cap: ${pol.allowance_cap:,.2f})")
    print("=" * 50)
    print(f"\n  realized_profit: ${plan.realized_profit:,.2f}")
    print(f"  remaining: ${pol.allowance_cap - plan.realized_profit:,.2f}")

    if plan.candidates:
        print("\nSales:")
        for line in explain_sales(plan.candidates):
            print("  " + line)
    else:
        print("\nNo profitable lots to sell.")

    return 0


def main():
    """Main entry point."""
    p = argparse.ArgumentParser(
        prog="cli.main",
        description="DCA optimizer CLI: investment distribution and tax-allowance sales",
    )
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default="config/global_policy.yaml", help="Policy config file")

    # Optimize command
    opt = sub.add_parser(
        "optimize",
        parents=[common],
        help="Distribute a new investment across assets",
    )
    opt.add_argument("--request", required=True, help="YAML/JSON request file")
    opt.add_argument("--explain", action="store_true", help="Explain excluded assets")
    opt.set_defaults(func=cmd_optimize)

    # Tax allowance command
    tax = sub.add_parser(
        "tax-allowance",
        parents=[common],
        help="Pick lots to sell within the tax-free allowance",
    )
    tax.add_argument("--transactions", required=True, help="CSV with transaction history")
    tax.add_argument("--prices", required=True, help="CSV with current prices")
    tax.set_defaults(func=cmd_tax_allowance)

    args = p.parse_args()
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    raise SystemExit(args.func(args))


if __name__ == "__main__":
    main()
