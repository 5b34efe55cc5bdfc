"""
Benchmark scenarios and their runner.

A scenario bundles a problem builder with the literal values a solver run
must reproduce. Scenarios are independent: each run builds a fresh problem,
so nothing is shared between them except the :class:`SolverConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from ..core.backend import Backend, default_backend
from ..core.problem import Problem
from ..diagnostics.journal import OptimizationLogger
from ..logging import get_logger
from ..solvers.base import SolverConfig
from ..solvers.factory import create_solver
from ..validation.expected import ExpectedResult, Tolerances
from ..validation.validator import ValidationReport, validate_result

log = get_logger(__name__)

ProblemBuilder = Callable[[Backend], Problem]


@dataclass(frozen=True)
class Scenario:
    """
    Named benchmark problem with golden data.

    Attributes:
        label: Stable hierarchical name, e.g. ``"schittkowski/problem-27"``.
            Also names the journal directory.
        build: Callable returning a new :class:`Problem` for a backend.
        expected: Literal starting value, solution and optimum.
        tolerances: Relative tolerances for this scenario.
    """

    label: str
    build: ProblemBuilder
    expected: ExpectedResult
    tolerances: Tolerances

    def problem(self, backend: Optional[Backend] = None) -> Problem:
        return self.build(backend if backend is not None else default_backend())


SCENARIOS: Dict[str, Scenario] = {}


def register_scenario(scenario: Scenario) -> Scenario:
    """Add ``scenario`` to :data:`SCENARIOS`, replacing any previous entry."""
    SCENARIOS[scenario.label] = scenario
    return scenario


def get_scenario(label: str) -> Scenario:
    """
    Look up a registered scenario.

    Raises:
        KeyError: If no scenario is registered under ``label``.
    """
    try:
        return SCENARIOS[label]
    except KeyError:
        raise KeyError(
            f"Unknown scenario {label!r}. Available scenarios: {sorted(SCENARIOS)}"
        ) from None


def run_scenario(
    scenario: Scenario,
    config: SolverConfig,
    backend: Optional[Backend] = None,
) -> ValidationReport:
    """
    Build, solve and validate one scenario.

    The objective at the starting point is checked against ``expected.f0``
    before the solver runs. When ``config.log_dir`` is set, the run is
    journaled under ``<log_dir>/<solver>/<label>``.

    Raises:
        ValueError: If the problem cannot be assembled or the solver name is
            unknown.
        IndexError: If a function reports an invalid row index.
    """
    report = ValidationReport(scenario.label)
    problem = scenario.problem(backend)
    expected = scenario.expected
    tolerances = scenario.tolerances

    f0 = problem.objective(problem.starting_point)[0]
    report.check_close("f(x0)", f0, expected.f0, tolerances.f0)

    solver = create_solver(problem, config)
    log.info("Running scenario %s with solver %s", scenario.label, solver.name)
    if config.log_dir:
        with OptimizationLogger(solver, Path(config.log_dir) / solver.name / scenario.label):
            result = solver.minimum()
    else:
        result = solver.minimum()

    validate_result(result, expected, tolerances, report)
    log.info("%s", report)
    return report


def run_scenarios(
    scenarios: Iterable[Scenario],
    config: SolverConfig,
    backend: Optional[Backend] = None,
) -> List[ValidationReport]:
    """
    Run several scenarios independently and collect their reports.

    Construction errors abort only the scenario raising them; they are
    recorded as failures of that scenario's report.
    """
    reports: List[ValidationReport] = []
    for scenario in scenarios:
        try:
            report = run_scenario(scenario, config, backend)
        except (ValueError, IndexError) as exc:
            report = ValidationReport(scenario.label)
            report.fail(f"{type(exc).__name__}: {exc}")
        reports.append(report)
    return reports


__all__ = [
    "ProblemBuilder",
    "SCENARIOS",
    "Scenario",
    "get_scenario",
    "register_scenario",
    "run_scenario",
    "run_scenarios",
]
