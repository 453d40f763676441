from __future__ import annotations
from dataclasses import dataclass
import logging
import math

from commercial_ratio.projection.errors import BaselineError, DivisionByZeroError, EngineError, OutOfRangeError
from commercial_ratio.projection.scenario import ScenarioInput, ScenarioMode, in_range
from commercial_ratio.snapshot.financials import DerivedBaseline, FinancialSnapshot

logger = logging.getLogger(__name__)

# |ratio| below this is treated as zero in the cost-reduction scenario
ZERO_RATIO_EPS = 1e-9


@dataclass(frozen=True)
class ScenarioProjection:
    mode: ScenarioMode
    target_ratio: float
    new_revenue_growth: float
    additional_revenue: float
    new_sales_and_marketing: float
    cost_reduction: float
    market_cap_impact: float
    new_market_cap: float
    percentage_growth: float  # % of baseline market cap
    eps_impact: float         # $ per share

    @property
    def operating_delta(self) -> float:
        """The EBITDA-level delta driving the projection for the active mode."""
        if self.mode is ScenarioMode.REVENUE_GROWTH:
            return self.additional_revenue
        return self.cost_reduction


def compute_projection(
    snapshot: FinancialSnapshot, baseline: DerivedBaseline, scenario: ScenarioInput
) -> ScenarioProjection:
    """Project market cap and EPS impact of moving to scenario.target_ratio.

    Revenue growth: S&M held, revenue growth becomes ratio * S&M; the extra
    revenue is valued at the P/S multiple.
    Cost reduction: revenue growth held, S&M becomes growth / ratio; the saved
    spend is valued at the P/E multiple.

    Pure: identical inputs give identical outputs. Ratios outside the slider
    range are computed as asked (clamping is the caller's job) but logged.
    """
    ratio = float(scenario.target_ratio)
    if not math.isfinite(ratio):
        raise OutOfRangeError(f"target ratio must be finite, got {scenario.target_ratio!r}")
    if not in_range(ratio):
        logger.warning("target ratio %.4f outside slider range; caller did not clamp", ratio)
    if baseline.market_cap == 0:
        raise BaselineError("baseline market cap is zero")
    if snapshot.shares_outstanding == 0:
        raise BaselineError("shares outstanding is zero")

    s = snapshot
    if scenario.mode is ScenarioMode.REVENUE_GROWTH:
        new_growth = ratio * s.sales_and_marketing
        additional = new_growth - s.revenue_growth
        new_sm = s.sales_and_marketing
        reduction = 0.0
        delta = additional
        multiple = s.ps_ratio
    elif scenario.mode is ScenarioMode.COST_REDUCTION:
        if abs(ratio) < ZERO_RATIO_EPS:
            raise DivisionByZeroError("cost reduction is undefined at a target ratio of zero")
        new_sm = s.revenue_growth / ratio
        reduction = s.sales_and_marketing - new_sm
        new_growth = s.revenue_growth
        additional = 0.0
        delta = reduction
        multiple = s.pe_ratio
    else:
        raise EngineError(f"unknown scenario mode {scenario.mode!r}")

    impact = delta * multiple
    return ScenarioProjection(
        mode=scenario.mode,
        target_ratio=ratio,
        new_revenue_growth=float(new_growth),
        additional_revenue=float(additional),
        new_sales_and_marketing=float(new_sm),
        cost_reduction=float(reduction),
        market_cap_impact=float(impact),
        new_market_cap=float(baseline.market_cap + impact),
        percentage_growth=float(impact / baseline.market_cap * 100),
        eps_impact=float(delta / s.shares_outstanding),
    )
