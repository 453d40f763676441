from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

# Balanced band, inclusive on both ends
ZONE_LOWER = 0.75
ZONE_UPPER = 1.25


class Zone(str, Enum):
    UNSUSTAINABLE = "unsustainable"
    BALANCED = "balanced"
    UNDERINVESTING = "underinvesting"


ZONE_DESCRIPTIONS = {
    Zone.UNSUSTAINABLE: "High waste, inefficiency, reactive approach, and internal conflict. Long-term viability at risk.",
    Zone.BALANCED: "Optimized performance with proactive approach and minimal internal conflict. Sustainable growth.",
    Zone.UNDERINVESTING: "Missing market opportunities due to underinvestment. Growth potential not being fully realized.",
}


def classify_zone(ratio: float) -> Zone:
    if ratio < ZONE_LOWER:
        return Zone.UNSUSTAINABLE
    if ratio > ZONE_UPPER:
        return Zone.UNDERINVESTING
    return Zone.BALANCED


class Quartile(str, Enum):
    BOTTOM = "bottom"
    SECOND = "second"
    THIRD = "third"
    TOP = "top"


@dataclass(frozen=True)
class Benchmark:
    label: str
    ratio: float


# Industry CR breakpoints; each is the inclusive lower bound of the next band.
BENCHMARKS: Tuple[Benchmark, ...] = (
    Benchmark(label="Industry Bottom Quartile", ratio=0.40),
    Benchmark(label="Industry Median", ratio=0.85),
    Benchmark(label="Industry Top Quartile", ratio=1.20),
)

_BANDS = (Quartile.SECOND, Quartile.THIRD, Quartile.TOP)


def classify_quartile(ratio: float) -> Quartile:
    """Position a ratio against the industry breakpoints 0.40 / 0.85 / 1.20."""
    q = Quartile.BOTTOM
    for b, band in zip(BENCHMARKS, _BANDS):
        if ratio >= b.ratio:
            q = band
    return q
