from __future__ import annotations
import os
from dataclasses import dataclass


@dataclass(frozen=True)
class DashboardConfig:
    ratio_min: float = 0.0
    ratio_max: float = 2.0
    ratio_step: float = 0.01  # slider resolution
    default_ratio: float = 0.51
    default_mode: str = "revenue"


def get_dashboard_config() -> DashboardConfig:
    return DashboardConfig(
        ratio_min=float(os.getenv("CR_RATIO_MIN", "0.0")),
        ratio_max=float(os.getenv("CR_RATIO_MAX", "2.0")),
        ratio_step=float(os.getenv("CR_RATIO_STEP", "0.01")),
        default_ratio=float(os.getenv("CR_DEFAULT_RATIO", "0.51")),
        default_mode=os.getenv("CR_DEFAULT_MODE", "revenue"),
    )


@dataclass(frozen=True)
class APIConfig:
    api_key: str | None = None
    rate_limit_n: int = 5
    rate_limit_window_sec: float = 1.0
    max_sessions: int = 1000  # oldest session is evicted past this; 0 disables the cap


def get_api_config() -> APIConfig:
    return APIConfig(
        api_key=os.getenv("API_KEY"),
        rate_limit_n=int(os.getenv("RATE_LIMIT_N", "5")),
        rate_limit_window_sec=float(os.getenv("RATE_LIMIT_WINDOW_SEC", "1.0")),
        max_sessions=int(os.getenv("MAX_SESSIONS", "1000")),
    )
