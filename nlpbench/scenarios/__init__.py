"""Registered benchmark scenarios and the scenario runner."""

from .base import SCENARIOS, Scenario, get_scenario, register_scenario, run_scenario, run_scenarios
from .distance_to_sphere import SphereOffset
from .hs071 import Hs071Constraints, Hs071Objective
from .schittkowski import Problem27Constraint, Problem27Objective, Problem79Constraints, Problem79Objective

__all__ = [
    "Hs071Constraints",
    "Hs071Objective",
    "Problem27Constraint",
    "Problem27Objective",
    "Problem79Constraints",
    "Problem79Objective",
    "SCENARIOS",
    "Scenario",
    "SphereOffset",
    "get_scenario",
    "register_scenario",
    "run_scenario",
    "run_scenarios",
]
