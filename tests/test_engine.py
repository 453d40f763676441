import math
import unittest
from dataclasses import replace

from commercial_ratio.projection.engine import compute_projection
from commercial_ratio.projection.errors import (
    BaselineError,
    DivisionByZeroError,
    EngineError,
    OutOfRangeError,
    SnapshotError,
)
from commercial_ratio.projection.scenario import ScenarioInput, ScenarioMode
from commercial_ratio.snapshot.financials import DEFAULT_SNAPSHOT, DerivedBaseline, derive_baseline

REV = ScenarioMode.REVENUE_GROWTH
COST = ScenarioMode.COST_REDUCTION


class TestProjectionEngine(unittest.TestCase):
    def setUp(self):
        self.snap = DEFAULT_SNAPSHOT
        self.base = derive_baseline(self.snap)

    def project(self, ratio, mode=REV):
        return compute_projection(self.snap, self.base, ScenarioInput(target_ratio=ratio, mode=mode))

    def test_revenue_growth_concrete(self):
        p = self.project(1.00)
        self.assertAlmostEqual(p.new_revenue_growth, 169.19, places=9)
        self.assertAlmostEqual(p.additional_revenue, 82.61, places=9)
        self.assertAlmostEqual(p.market_cap_impact, 521.27, delta=0.01)
        self.assertAlmostEqual(p.new_market_cap, 3211.27, delta=0.01)
        self.assertAlmostEqual(p.percentage_growth, 19.38, delta=0.01)
        self.assertAlmostEqual(p.eps_impact, 0.8261, places=9)
        # S&M untouched in revenue mode
        self.assertEqual(p.new_sales_and_marketing, self.snap.sales_and_marketing)
        self.assertEqual(p.cost_reduction, 0.0)

    def test_cost_reduction_concrete(self):
        p = self.project(1.00, COST)
        self.assertAlmostEqual(p.new_sales_and_marketing, 86.58, places=9)
        self.assertAlmostEqual(p.cost_reduction, 82.61, places=9)
        self.assertAlmostEqual(p.market_cap_impact, 82.61 * 25.0, places=6)
        self.assertAlmostEqual(p.new_market_cap, 2690.0 + 82.61 * 25.0, places=6)
        self.assertAlmostEqual(p.percentage_growth, 82.61 * 25.0 / 2690.0 * 100, places=6)
        self.assertAlmostEqual(p.eps_impact, 0.8261, places=9)
        self.assertEqual(p.new_revenue_growth, self.snap.revenue_growth)
        self.assertEqual(p.additional_revenue, 0.0)

    def test_below_current_ratio_is_negative(self):
        self.assertLess(self.project(0.30).additional_revenue, 0)
        p = self.project(0.50, COST)
        self.assertGreater(p.new_sales_and_marketing, self.snap.sales_and_marketing)
        self.assertLess(p.cost_reduction, 0)
        self.assertLess(p.market_cap_impact, 0)

    def test_new_growth_is_ratio_times_sm(self):
        for i in range(0, 201):
            r = i / 100
            p = self.project(r)
            self.assertAlmostEqual(p.new_revenue_growth, r * self.snap.sales_and_marketing, delta=1e-9)

    def test_idempotent(self):
        for mode in (REV, COST):
            self.assertEqual(self.project(1.37, mode), self.project(1.37, mode))

    def test_monotonic_in_ratio(self):
        ratios = [i / 100 for i in range(1, 201)]
        rev = [self.project(r).additional_revenue for r in ratios]
        cost = [self.project(r, COST).cost_reduction for r in ratios]
        for a, b in zip(rev, rev[1:]):
            self.assertLess(a, b)
        # required spend falls as the ratio rises, so the saving grows
        for a, b in zip(cost, cost[1:]):
            self.assertLess(a, b)

    def test_zero_ratio_cost_mode_raises(self):
        with self.assertRaises(DivisionByZeroError) as cm:
            self.project(0.0, COST)
        self.assertIsInstance(cm.exception, EngineError)
        self.assertEqual(cm.exception.code, "division_by_zero")
        with self.assertRaises(DivisionByZeroError):
            self.project(1e-12, COST)

    def test_zero_ratio_revenue_mode_is_defined(self):
        p = self.project(0.0)
        self.assertEqual(p.new_revenue_growth, 0.0)
        self.assertAlmostEqual(p.additional_revenue, -86.58, places=9)
        for v in (p.market_cap_impact, p.new_market_cap, p.percentage_growth, p.eps_impact):
            self.assertTrue(math.isfinite(v))

    def test_non_finite_ratio_rejected(self):
        for bad in (float("nan"), float("inf"), float("-inf")):
            with self.assertRaises(OutOfRangeError):
                self.project(bad)

    def test_out_of_range_ratio_is_logged(self):
        with self.assertLogs("commercial_ratio.projection.engine", level="WARNING") as logs:
            p = self.project(2.5)
        self.assertAlmostEqual(p.new_revenue_growth, 2.5 * self.snap.sales_and_marketing)
        self.assertTrue(any("outside slider range" in m for m in logs.output))

    def test_zero_market_cap_baseline(self):
        base = DerivedBaseline(total_expenses=self.base.total_expenses, ebitda=self.base.ebitda, market_cap=0.0)
        with self.assertRaises(BaselineError):
            compute_projection(self.snap, base, ScenarioInput(target_ratio=1.0))

    def test_multiples_drive_impact(self):
        snap = replace(self.snap, ps_ratio=10.0)
        base = derive_baseline(snap)
        p = compute_projection(snap, base, ScenarioInput(target_ratio=1.0))
        self.assertAlmostEqual(p.market_cap_impact, p.additional_revenue * 10.0)

    def test_operating_delta_follows_mode(self):
        self.assertEqual(self.project(1.2).operating_delta, self.project(1.2).additional_revenue)
        p = self.project(1.2, COST)
        self.assertEqual(p.operating_delta, p.cost_reduction)

    def test_plain_string_modes(self):
        p = compute_projection(self.snap, self.base, ScenarioInput(1.0, "revenue"))
        self.assertIs(p.mode, REV)
        self.assertAlmostEqual(p.new_revenue_growth, 169.19, places=9)
        self.assertAlmostEqual(p.market_cap_impact, 521.27, delta=0.01)
        c = compute_projection(self.snap, self.base, ScenarioInput(1.0, "cost"))
        self.assertIs(c.mode, COST)
        self.assertAlmostEqual(c.cost_reduction, 82.61, places=9)

    def test_unknown_mode_rejected(self):
        with self.assertRaises(ValueError):
            ScenarioInput(1.0, "margin")
        # a mode forced past construction still never falls into the cost branch
        s = ScenarioInput(1.0)
        object.__setattr__(s, "mode", "margin")
        with self.assertRaises(EngineError):
            compute_projection(self.snap, self.base, s)

    def test_error_classes_documented(self):
        errors = (DivisionByZeroError, BaselineError, OutOfRangeError, SnapshotError)
        for cls in errors:
            self.assertTrue(issubclass(cls, EngineError))
            self.assertTrue(cls.__doc__ and cls.__doc__.strip())
        self.assertEqual(len({cls.code for cls in errors}), len(errors))


if __name__ == "__main__":
    unittest.main()
