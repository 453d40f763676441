"""Static company snapshot: reported financials, derived baseline, KPIs."""
