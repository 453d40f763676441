from __future__ import annotations


class EngineError(ValueError):
    """Base class for every error the projection engine surfaces to its caller."""

    code = "engine_error"


class DivisionByZeroError(EngineError):
    """Cost-reduction scenario requested with a zero target ratio."""

    code = "division_by_zero"


class BaselineError(EngineError):
    """Snapshot-derived denominator (market cap, EBITDA) is zero."""

    code = "baseline_division_by_zero"


class OutOfRangeError(EngineError):
    """Target ratio is not a finite number."""

    code = "out_of_range"


class SnapshotError(EngineError):
    """Static snapshot violates its non-negative / positive field constraints."""

    code = "invalid_snapshot"
