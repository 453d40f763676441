from __future__ import annotations
from typing import Dict, Any, List

from commercial_ratio.benchmarks.zones import BENCHMARKS


def _money(v: float) -> str:
    sign = "-" if v < 0 else ""
    return f"{sign}${abs(v):,.2f}M"


def summary_md(summary: Dict[str, Any], pro_forma_rows: List[Dict[str, Any]] | None = None) -> str:
    """Render a dashboard summary (DashboardState.summary()) as Markdown."""
    kpis = summary.get("kpis", {})
    lines = [
        "# Commercial Ratio Summary",
        "",
        f"- Current CR: {kpis.get('current_ratio', 0.0):.2f}",
        f"- Target CR: {summary['target_ratio']:.2f}",
        f"- Scenario: {summary['mode']}",
        f"- Zone: {summary['zone']} ({summary['zone_description']})",
        f"- Industry position: {summary['quartile']} quartile",
    ]

    err = summary.get("error")
    if err:
        lines.append("\n## Projection")
        lines.append(f"- undefined: {err['message']}")
        return "\n".join(lines) + "\n"

    p, i = summary["projection"], summary["impact"]
    lines.append("\n## Investor Impact")
    lines.append(f"- Market cap impact: {_money(p['market_cap_impact'])} ({p['percentage_growth']:+.2f}%)")
    lines.append(f"- New market cap: {_money(p['new_market_cap'])}")
    lines.append(f"- EPS impact: {p['eps_impact']:+.4f} ({i['eps_impact_pct']:+.2f}%)")
    lines.append(f"- EBITDA impact: {_money(i['ebitda_impact'])} ({i['ebitda_impact_pct']:+.2f}%)")
    lines.append(f"- Projected stock price: ${i['projected_stock_price']:.2f}")

    lines.append("\n## Benchmarks")
    for b in BENCHMARKS:
        lines.append(f"- {b.label}: {b.ratio:.2f}")

    if pro_forma_rows:
        lines.append("\n## Pro Forma ($M)")
        lines.append("")
        lines.append("| Line | Current | Projected | Change |")
        lines.append("| --- | ---: | ---: | ---: |")
        for r in pro_forma_rows:
            lines.append(f"| {r['line']} | {r['current']:.2f} | {r['projected']:.2f} | {r['change']:+.2f} |")
    return "\n".join(lines) + "\n"
