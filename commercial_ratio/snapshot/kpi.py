from __future__ import annotations
from typing import Dict

from commercial_ratio.snapshot.financials import FinancialSnapshot


def safe_div(a: float, b: float) -> float:
    try:
        return float(a) / float(b) if b not in (0, None) else 0.0
    except (TypeError, ValueError):
        return 0.0


def current_ratio(s: FinancialSnapshot) -> float:
    """Commercial Ratio as reported: revenue growth / S&M expense."""
    return safe_div(s.revenue_growth, s.sales_and_marketing)


def compute_kpis(s: FinancialSnapshot) -> Dict[str, float]:
    return {
        "current_ratio": current_ratio(s),
        "yoy_growth_pct": safe_div(s.revenue_growth, s.revenue_prev_year) * 100,
        "sm_pct_revenue": safe_div(s.sales_and_marketing, s.revenue) * 100,
        "gross_profit": s.revenue - s.cost_of_revenue,
        "other_opex": s.research_and_development + s.general_and_admin + s.other_expenses,
    }
