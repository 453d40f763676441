from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import math

from commercial_ratio.config.env import DashboardConfig, get_dashboard_config
from commercial_ratio.projection.errors import OutOfRangeError


class ScenarioMode(str, Enum):
    REVENUE_GROWTH = "revenue"  # hold S&M, grow revenue
    COST_REDUCTION = "cost"     # hold revenue growth, cut S&M


def parse_mode(value: str | ScenarioMode) -> ScenarioMode:
    if isinstance(value, ScenarioMode):
        return value
    try:
        return ScenarioMode(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in ScenarioMode)
        raise ValueError(f"mode must be one of: {allowed}") from None


@dataclass(frozen=True)
class ScenarioInput:
    target_ratio: float  # 0..2, 0.01 steps once clamped
    mode: ScenarioMode = ScenarioMode.REVENUE_GROWTH

    def __post_init__(self):
        # plain strings ("revenue", "cost") are coerced; unknown modes raise ValueError
        object.__setattr__(self, "mode", parse_mode(self.mode))


def default_scenario(cfg: DashboardConfig | None = None) -> ScenarioInput:
    cfg = cfg or get_dashboard_config()
    return ScenarioInput(target_ratio=clamp_ratio(cfg.default_ratio, cfg), mode=parse_mode(cfg.default_mode))


def clamp_ratio(value: float, cfg: DashboardConfig | None = None) -> float:
    """Clamp a user-supplied ratio into the slider range and snap it to the step.

    Non-finite values cannot be clamped meaningfully and raise OutOfRangeError.
    """
    cfg = cfg or get_dashboard_config()
    v = float(value)
    if not math.isfinite(v):
        raise OutOfRangeError(f"target ratio must be finite, got {value!r}")
    v = min(max(v, cfg.ratio_min), cfg.ratio_max)
    if cfg.ratio_step > 0:
        v = round(v / cfg.ratio_step) * cfg.ratio_step
    # snapping can push a hair past the bounds; round away float noise too
    return round(min(max(v, cfg.ratio_min), cfg.ratio_max), 10)


def in_range(value: float, cfg: DashboardConfig | None = None) -> bool:
    cfg = cfg or get_dashboard_config()
    return cfg.ratio_min <= value <= cfg.ratio_max
