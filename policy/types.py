from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from common.errors import UnsupportedStrategyError

ATH_THRESHOLD = 5.0
OVER_TARGET_THRESHOLD = 0.0


class StrategyType(Enum):
    """Distribution strategies for a new investment."""

    TARGET = "TARGET"
    WEIGHT = "WEIGHT"
    PORTFOLIO = "PORTFOLIO"
    RATING = "RATING"

    @classmethod
    def parse(cls, name: str) -> "StrategyType":
        try:
            return cls(str(name).strip().upper())
        except ValueError:
            raise UnsupportedStrategyError(f"Unsupported strategy type: {name}") from None


@dataclass(frozen=True)
class Thresholds:
    from_ath: float = ATH_THRESHOLD  # minimum decline from all-time high, in percent
    over_target: float = OVER_TARGET_THRESHOLD  # tolerance added to target, in percent

    @classmethod
    def from_raw(cls, raw: Dict[str, Any] | None) -> "Thresholds":
        raw = raw or {}
        return cls(
            from_ath=float(raw.get("from_ath", ATH_THRESHOLD)),
            over_target=float(raw.get("over_target", OVER_TARGET_THRESHOLD)),
        )


@dataclass(frozen=True)
class Strategy:
    type: StrategyType = StrategyType.TARGET
    thresholds: Thresholds = field(default_factory=Thresholds)

    @classmethod
    def default(cls) -> "Strategy":
        return cls()

    @classmethod
    def from_raw(cls, raw: Dict[str, Any] | str, fallback: "Strategy" | None = None) -> "Strategy":
        """Build a strategy from request/config input, filling gaps from ``fallback``.

        A bare string is taken as the strategy type name.
        """
        fallback = fallback or cls.default()
        if isinstance(raw, str):
            raw = {"type": raw}
        elif not isinstance(raw, dict):
            raise UnsupportedStrategyError(f"Unsupported strategy: {raw!r}")
        type_name = raw.get("type")
        strategy_type = StrategyType.parse(type_name) if type_name else fallback.type
        if "thresholds" in raw:
            thresholds = Thresholds.from_raw(raw["thresholds"])
        else:
            thresholds = fallback.thresholds
        return cls(type=strategy_type, thresholds=thresholds)
