from __future__ import annotations
from typing import List

from policy.types import Thresholds
from portfolio.asset import Asset

def is_under_target(asset: Asset, thresholds: Thresholds) -> bool:
    return asset.weight <= asset.target + thresholds.over_target

def is_past_ath_threshold(asset: Asset, thresholds: Thresholds) -> bool:
    # unknown decline (or sitting exactly at the high) keeps the asset in
    if asset.from_ath == 0:
        return True
    return asset.from_ath >= thresholds.from_ath

def filter_eligible(assets: List[Asset], thresholds: Thresholds) -> List[Asset]:
    return [
        a for a in assets
        if is_under_target(a, thresholds) and is_past_ath_threshold(a, thresholds)
    ]

def exclusion_reasons(asset: Asset, thresholds: Thresholds) -> List[str]:
    reasons: List[str] = []
    if not is_under_target(asset, thresholds):
        reasons.append(
            f"Over target: weight {asset.weight:.2f}% > target {asset.target:.2f}%"
            f" + tolerance {thresholds.over_target:.2f}%"
        )
    if not is_past_ath_threshold(asset, thresholds):
        reasons.append(
            f"Too close to all-time high: {asset.from_ath:.2f}% < {thresholds.from_ath:.2f}%"
        )
    return reasons
