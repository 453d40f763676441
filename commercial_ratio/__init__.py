"""Commercial Ratio analyzer: projection engine and dashboard host.

- snapshot/: static financial snapshot, derived baseline, KPIs
- projection/: scenario input, projection engine, investor impact
- benchmarks/: performance zones and industry quartiles
- dashboard/: host-owned state and session registry
- exports/, api/: CSV/Markdown exports and the Flask host
"""
