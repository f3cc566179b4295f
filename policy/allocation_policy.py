from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Any

from policy.types import Strategy

@dataclass(frozen=True)
class AllocationPolicy:
    raw: Dict[str, Any]

    @property
    def strategy_raw(self) -> Dict[str, Any] | str:
        return self.raw.get("strategy") or {}

    @property
    def default_strategy(self) -> Strategy:
        return Strategy.from_raw(self.strategy_raw)

def resolve_strategy(raw_request: Dict[str, Any], pol: AllocationPolicy) -> Strategy:
    """Strategy named by a request, with unset fields taken from the policy default."""
    requested = raw_request.get("strategy")
    if not requested:
        return pol.default_strategy
    return Strategy.from_raw(requested, fallback=pol.default_strategy)
