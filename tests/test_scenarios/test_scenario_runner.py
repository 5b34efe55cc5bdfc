"""End-to-end scenario runs through the solver boundary."""

import numpy as np
import pytest

from nlpbench.core import DifferentiableFunction, NoSolution, Problem, SolverError
from nlpbench.diagnostics import JOURNAL_FILENAME
from nlpbench.scenarios import SCENARIOS, Scenario, get_scenario, run_scenario, run_scenarios
from nlpbench.solvers import Solver, SolverConfig, register_solver, unregister_solver
from nlpbench.validation import ExpectedResult, Tolerances


@pytest.mark.parametrize("label", sorted(SCENARIOS))
def test_scenario_converges(label, backend, solver_config) -> None:
    """Each scenario reaches its expected solution with the configured solver."""
    report = run_scenario(get_scenario(label), solver_config, backend)
    report.raise_if_failed()
    assert report.checks[0].name == "f(x0)"


def test_scenario_journal(tmp_path) -> None:
    config = SolverConfig(name="scipy-slsqp", log_dir=str(tmp_path))
    run_scenario(get_scenario("schittkowski/problem-27"), config)
    journal = tmp_path / "scipy-slsqp" / "schittkowski" / "problem-27" / JOURNAL_FILENAME
    assert journal.is_file()
    text = journal.read_text(encoding="utf-8")
    assert "0.01 (x₀ - 1)² + (x₁ - x₀²)²" in text
    assert "Iterations:" in text


class NoSolutionSolver(Solver):
    name = "never"

    def solve(self):
        return NoSolution()


class ErrorSolver(Solver):
    name = "broken"

    def solve(self):
        return SolverError("factorization failed")


@pytest.fixture
def failing_solvers():
    register_solver("never", lambda p, c: NoSolutionSolver(p, c))
    register_solver("broken", lambda p, c: ErrorSolver(p, c))
    yield
    unregister_solver("never")
    unregister_solver("broken")


@pytest.mark.parametrize("name,fragment", [("never", "no solution"), ("broken", "factorization failed")])
def test_failed_solver_is_a_failed_validation(failing_solvers, name, fragment) -> None:
    report = run_scenario(get_scenario("schittkowski/problem-79"), SolverConfig(name=name))
    assert not report.passed
    assert any(fragment in message for message in report.failures)
    with pytest.raises(AssertionError):
        report.raise_if_failed()


class Half(DifferentiableFunction):
    def __init__(self, backend=None):
        super().__init__(2, 1, "x₀ / 2", backend=backend)

    def impl_compute(self, result, x):
        result[0] = 0.5 * x[0]

    def impl_gradient(self, grad, x, function_id):
        self.backend.zero_fill(grad)
        grad[0] = 0.5


def build_bad_starting_point(backend):
    problem = Problem(Half(backend=backend))
    problem.set_starting_point(np.zeros(3))
    return problem


def test_construction_error_aborts_only_its_scenario(failing_solvers) -> None:
    bad = Scenario(
        "broken/starting-point",
        build_bad_starting_point,
        ExpectedResult(f0=0.0, x=[0.0, 0.0], fx=0.0),
        Tolerances(),
    )
    good = get_scenario("schittkowski/problem-79")
    reports = run_scenarios([bad, good, bad], SolverConfig(name="scipy-slsqp"))
    assert [r.label for r in reports] == [bad.label, good.label, bad.label]
    assert not reports[0].passed
    assert "ValueError" in reports[0].failures[0]
    assert reports[1].passed
    assert not reports[2].passed


def test_unknown_solver_is_recorded_per_scenario() -> None:
    reports = run_scenarios([get_scenario("distance-to-sphere")], SolverConfig(name="missing"))
    assert not reports[0].passed
    assert "Unsupported solver name" in reports[0].failures[0]


def test_scenarios_do_not_share_problems() -> None:
    scenario = get_scenario("hs071/nonscalar-constraints")
    first = scenario.problem()
    second = scenario.problem()
    assert first is not second
    assert first.objective is not second.objective
