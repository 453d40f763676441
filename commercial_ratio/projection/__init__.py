"""Projection engine: maps (snapshot, baseline, scenario) to projected impact.

- scenario.py: ScenarioInput, ScenarioMode, ratio clamping
- engine.py: compute_projection
- impact.py: investor impact and pro-forma lines
- errors.py: EngineError hierarchy
"""
