from __future__ import annotations
from dataclasses import dataclass, fields

from commercial_ratio.projection.errors import BaselineError, SnapshotError


@dataclass(frozen=True)
class FinancialSnapshot:
    # Income statement, $M
    revenue: float
    revenue_prev_year: float
    revenue_growth: float  # revenue - revenue_prev_year, as reported
    cost_of_revenue: float
    sales_and_marketing: float
    research_and_development: float
    general_and_admin: float
    other_expenses: float

    # Market multiples
    ps_ratio: float  # price / sales
    pe_ratio: float  # price / earnings (estimated)

    shares_outstanding: float  # millions
    stock_price: float


# Baked-in snapshot the dashboard ships with; no ingestion.
DEFAULT_SNAPSHOT = FinancialSnapshot(
    revenue=426.96,
    revenue_prev_year=340.38,
    revenue_growth=86.58,
    cost_of_revenue=109.38,
    sales_and_marketing=169.19,
    research_and_development=80.79,
    general_and_admin=65.31,
    other_expenses=0.00,
    ps_ratio=6.31,
    pe_ratio=25.0,
    shares_outstanding=100,
    stock_price=26.90,
)

_SIGNED_FIELDS = {"revenue_growth"}


def validate_snapshot(s: FinancialSnapshot) -> None:
    for f in fields(s):
        if f.name in _SIGNED_FIELDS:
            continue
        if getattr(s, f.name) < 0:
            raise SnapshotError(f"{f.name} must be non-negative")
    if s.shares_outstanding <= 0:
        raise SnapshotError("shares outstanding must be positive")
    if s.stock_price <= 0:
        raise SnapshotError("stock price must be positive")


@dataclass(frozen=True)
class DerivedBaseline:
    total_expenses: float
    ebitda: float
    market_cap: float


def derive_baseline(s: FinancialSnapshot) -> DerivedBaseline:
    """Compute the figures every projection is measured against.

    total_expenses = S&M + R&D + G&A + other
    EBITDA = revenue - cost of revenue - total_expenses
    market cap = stock price * shares outstanding

    Market cap is the denominator of every percentage impact, so a zero value
    is rejected here rather than at projection time.
    """
    total_expenses = (
        s.sales_and_marketing
        + s.research_and_development
        + s.general_and_admin
        + s.other_expenses
    )
    ebitda = s.revenue - s.cost_of_revenue - total_expenses
    market_cap = s.stock_price * s.shares_outstanding
    if market_cap == 0:
        raise BaselineError("baseline market cap is zero")
    return DerivedBaseline(
        total_expenses=float(total_expenses),
        ebitda=float(ebitda),
        market_cap=float(market_cap),
    )
