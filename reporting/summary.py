from __future__ import annotations
from typing import Dict, Any
from engine.allocation_engine import DcaRequest
from portfolio.allocation import Distribution, distribution_total

def distribution_summary(request: DcaRequest, distribution: Distribution) -> Dict[str, Any]:
    return {
        "amount": request.amount,
        "strategy": request.strategy.type.value,
        "distributed": distribution_total(distribution),
        "num_assets": len(distribution),
    }
