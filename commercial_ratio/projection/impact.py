from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List

from commercial_ratio.projection.engine import ScenarioProjection
from commercial_ratio.projection.errors import BaselineError
from commercial_ratio.projection.scenario import ScenarioMode
from commercial_ratio.snapshot.financials import DerivedBaseline, FinancialSnapshot
from commercial_ratio.snapshot.kpi import safe_div


@dataclass(frozen=True)
class InvestorImpact:
    ebitda_impact: float
    new_ebitda: float
    ebitda_impact_pct: float
    eps_impact_pct: float  # relative to EBITDA per share
    projected_stock_price: float


def investor_impact(
    snapshot: FinancialSnapshot, baseline: DerivedBaseline, p: ScenarioProjection
) -> InvestorImpact:
    """Headline investor metrics for a projection.

    EBITDA is the denominator of both relative figures; a zero EBITDA raises
    BaselineError instead of returning inf.
    """
    if baseline.ebitda == 0:
        raise BaselineError("baseline EBITDA is zero")
    delta = p.operating_delta
    ebitda_per_share = baseline.ebitda / snapshot.shares_outstanding
    return InvestorImpact(
        ebitda_impact=delta,
        new_ebitda=baseline.ebitda + delta,
        ebitda_impact_pct=delta / baseline.ebitda * 100,
        eps_impact_pct=p.eps_impact / ebitda_per_share * 100,
        projected_stock_price=snapshot.stock_price * (1 + p.percentage_growth / 100),
    )


def spend_change_pct(snapshot: FinancialSnapshot, p: ScenarioProjection) -> float:
    """% change of the lever the scenario moves: S&M spend or revenue growth."""
    if p.mode is ScenarioMode.COST_REDUCTION:
        return safe_div(-p.cost_reduction, snapshot.sales_and_marketing) * 100
    return safe_div(p.additional_revenue, snapshot.revenue_growth) * 100


def pro_forma(
    snapshot: FinancialSnapshot, baseline: DerivedBaseline, p: ScenarioProjection
) -> List[Dict[str, Any]]:
    """Current vs projected P&L lines down to EBITDA.

    Revenue mode adds the extra revenue to revenue, gross profit and EBITDA;
    cost mode replaces S&M with the required spend and adds the saving to
    EBITDA. Cost of revenue and the other operating lines never move.
    """
    s = snapshot
    other_opex = s.research_and_development + s.general_and_admin + s.other_expenses
    gross = s.revenue - s.cost_of_revenue
    extra = p.additional_revenue
    lines = [
        ("Revenue", s.revenue, s.revenue + extra),
        ("Cost of Revenue", s.cost_of_revenue, s.cost_of_revenue),
        ("Gross Profit", gross, gross + extra),
        ("Sales & Marketing", s.sales_and_marketing, p.new_sales_and_marketing),
        ("Other OpEx", other_opex, other_opex),
        ("EBITDA", baseline.ebitda, baseline.ebitda + p.operating_delta),
    ]
    return [
        {"line": name, "current": cur, "projected": proj, "change": proj - cur}
        for name, cur, proj in lines
    ]
