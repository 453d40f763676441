from __future__ import annotations
from dataclasses import asdict, dataclass, replace
from typing import Any, Callable, Dict, Optional, TypeVar
import logging
import threading
import uuid

from commercial_ratio.benchmarks.zones import ZONE_DESCRIPTIONS, classify_quartile, classify_zone
from commercial_ratio.config.env import DashboardConfig, get_dashboard_config
from commercial_ratio.projection.engine import ScenarioProjection, compute_projection
from commercial_ratio.projection.errors import EngineError
from commercial_ratio.projection.impact import InvestorImpact, investor_impact, spend_change_pct
from commercial_ratio.projection.scenario import ScenarioInput, ScenarioMode, clamp_ratio, default_scenario, parse_mode
from commercial_ratio.snapshot.financials import (
    DEFAULT_SNAPSHOT,
    DerivedBaseline,
    FinancialSnapshot,
    derive_baseline,
    validate_snapshot,
)
from commercial_ratio.snapshot.kpi import compute_kpis

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class DashboardState:
    """Everything one dashboard instance renders from.

    The snapshot and baseline are fixed at construction. Each setter clamps its
    input and calls apply() directly; the latest projection overwrites the
    previous one. An engine error clears the projection and is kept in `error`
    so the host can show an undefined state.
    """

    snapshot: FinancialSnapshot
    baseline: DerivedBaseline
    scenario: ScenarioInput
    config: DashboardConfig
    projection: Optional[ScenarioProjection] = None
    impact: Optional[InvestorImpact] = None
    error: Optional[EngineError] = None

    @classmethod
    def create(
        cls,
        snapshot: FinancialSnapshot = DEFAULT_SNAPSHOT,
        scenario: ScenarioInput | None = None,
        config: DashboardConfig | None = None,
    ) -> "DashboardState":
        cfg = config or get_dashboard_config()
        validate_snapshot(snapshot)
        state = cls(
            snapshot=snapshot,
            baseline=derive_baseline(snapshot),
            scenario=scenario or default_scenario(cfg),
            config=cfg,
        )
        state.recompute()
        return state

    def set_target_ratio(self, value: float) -> None:
        self.apply(replace(self.scenario, target_ratio=clamp_ratio(value, self.config)))

    def set_mode(self, mode: str | ScenarioMode) -> None:
        self.apply(replace(self.scenario, mode=parse_mode(mode)))

    def recompute(self) -> None:
        self.apply(self.scenario)

    def apply(self, scenario: ScenarioInput) -> None:
        """Compute the projection for scenario, then swap input and result in together."""
        try:
            projection = compute_projection(self.snapshot, self.baseline, scenario)
            impact = investor_impact(self.snapshot, self.baseline, projection)
            error = None
        except EngineError as e:
            logger.info("projection undefined for %s: %s", scenario, e)
            projection, impact, error = None, None, e
        self.scenario, self.projection, self.impact, self.error = scenario, projection, impact, error

    def summary(self) -> Dict[str, Any]:
        ratio = self.scenario.target_ratio
        zone = classify_zone(ratio)
        out: Dict[str, Any] = {
            "target_ratio": ratio,
            "mode": self.scenario.mode.value,
            "zone": zone.value,
            "zone_description": ZONE_DESCRIPTIONS[zone],
            "quartile": classify_quartile(ratio).value,
            "kpis": compute_kpis(self.snapshot),
            "baseline": asdict(self.baseline),
            "projection": None,
            "impact": None,
            "error": None,
        }
        if self.error is not None:
            out["error"] = {"code": self.error.code, "message": str(self.error)}
            return out
        p = asdict(self.projection)
        p["mode"] = self.projection.mode.value
        p["spend_change_pct"] = spend_change_pct(self.snapshot, self.projection)
        out["projection"] = p
        out["impact"] = asdict(self.impact)
        return out


@dataclass
class Session:
    id: str
    state: DashboardState


class SessionRegistry:
    """In-memory dashboard sessions; nothing outlives the process.

    At most `max_sessions` are kept; creating one past the cap evicts the
    oldest. Reads that render a state go through read() so they never see a
    half-applied update.
    """

    def __init__(self, max_sessions: int = 1000):
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()
        self.max_sessions = max_sessions

    def create(self, state: DashboardState, max_sessions: int | None = None) -> Session:
        cap = self.max_sessions if max_sessions is None else max_sessions
        sid = f"s_{uuid.uuid4().hex[:8]}"
        session = Session(id=sid, state=state)
        with self._lock:
            # dicts keep insertion order, so the first key is the oldest session
            while cap > 0 and len(self._sessions) >= cap:
                oldest = next(iter(self._sessions))
                del self._sessions[oldest]
                logger.info("evicted session %s (cap %d)", oldest, cap)
            self._sessions[sid] = session
        return session

    def get(self, sid: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(sid)

    def read(self, sid: str, fn: Callable[[DashboardState], T]) -> Optional[T]:
        """Call fn(state) while holding the lock; None if the session is unknown."""
        with self._lock:
            s = self._sessions.get(sid)
            if not s:
                return None
            return fn(s.state)

    def summary(self, sid: str) -> Optional[Dict[str, Any]]:
        return self.read(sid, lambda st: {"session_id": sid, **st.summary()})

    def update(self, sid: str, target_ratio: float | None = None, mode: str | None = None) -> Optional[Session]:
        with self._lock:
            s = self._sessions.get(sid)
            if not s:
                return None
            # validate both before touching state so a bad mode leaves it untouched
            scenario = s.state.scenario
            if mode is not None:
                scenario = replace(scenario, mode=parse_mode(mode))
            if target_ratio is not None:
                scenario = replace(scenario, target_ratio=clamp_ratio(target_ratio, s.state.config))
            s.state.apply(scenario)
            return s

    def delete(self, sid: str) -> bool:
        with self._lock:
            return self._sessions.pop(sid, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()
