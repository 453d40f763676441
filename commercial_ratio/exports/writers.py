from __future__ import annotations
from typing import List, Dict, Any, Iterable
import csv
import io

SCHEMAS = {
    "pro_forma": ["line", "current", "projected", "change"],
    "projection": [
        "mode", "target_ratio", "zone", "quartile", "new_revenue_growth", "additional_revenue",
        "new_sales_and_marketing", "cost_reduction", "market_cap_impact", "new_market_cap",
        "percentage_growth", "eps_impact", "ebitda_impact", "ebitda_impact_pct", "eps_impact_pct",
        "projected_stock_price",
    ],
}


def _fmt(v: Any) -> Any:
    return round(v, 4) if isinstance(v, float) else v


def write_csv(rows: Iterable[Dict[str, Any]], columns: List[str]) -> str:
    buf = io.StringIO()
    w = csv.DictWriter(buf, fieldnames=columns, extrasaction="ignore")
    w.writeheader()
    for r in rows:
        w.writerow({k: _fmt(r.get(k)) for k in columns})
    return buf.getvalue()


def write_pro_forma(rows: Iterable[Dict[str, Any]]) -> str:
    return write_csv(rows, SCHEMAS["pro_forma"])


def write_projection(rows: Iterable[Dict[str, Any]]) -> str:
    return write_csv(rows, SCHEMAS["projection"])
