from __future__ import annotations
from typing import Dict, Any
from engine.allocation_engine import DcaRequest
from policy.eligibility_policy import exclusion_reasons
from portfolio.allocation import Distribution
from reporting.summary import distribution_summary

def explainability_report(request: DcaRequest, distribution: Distribution) -> Dict[str, Any]:
    thresholds = request.strategy.thresholds
    return {
        "summary": distribution_summary(request, distribution),
        "distribution": dict(distribution),
        "excluded": {
            a.ticker: exclusion_reasons(a, thresholds)
            for a in request.assets
            if a.ticker not in distribution
        },
    }
