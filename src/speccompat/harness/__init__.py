"""Drivers for the core: built-in scenarios and YAML plan files.

Submodules:
    scenarios  -- Scenario, run_scenarios, DEFAULT_SPECS
    plan       -- load_plan, parse_plan, apply_plan
"""

from speccompat.harness.plan import (
    Plan,
    PlanOutcome,
    PlanStep,
    apply_plan,
    load_plan,
    parse_plan,
)
from speccompat.harness.scenarios import (
    DEFAULT_SPECS,
    SCENARIOS,
    Scenario,
    ScenarioResult,
    get_scenario,
    run_scenario,
    run_scenarios,
)

__all__ = [
    "DEFAULT_SPECS",
    "Plan",
    "PlanOutcome",
    "PlanStep",
    "SCENARIOS",
    "Scenario",
    "ScenarioResult",
    "apply_plan",
    "get_scenario",
    "load_plan",
    "parse_plan",
    "run_scenario",
    "run_scenarios",
]
