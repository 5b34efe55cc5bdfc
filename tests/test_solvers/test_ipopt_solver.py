"""Tests for the IPOPT plugin. Skipped when cyipopt is not installed."""

import numpy as np
import pytest

cyipopt = pytest.importorskip("cyipopt")

from nlpbench.core import Solved  # noqa: E402
from nlpbench.scenarios import get_scenario, run_scenario  # noqa: E402
from nlpbench.solvers import IpoptSolver, SolverConfig, create_solver  # noqa: E402


def test_ipopt_solves_hs071(backend) -> None:
    scenario = get_scenario("hs071/nonscalar-constraints")
    solver = create_solver(scenario.problem(backend), SolverConfig(name="ipopt"))
    assert isinstance(solver, IpoptSolver)
    iterations = []
    solver.add_callback(lambda it, x, fx: iterations.append(it))
    result = solver.minimum()
    assert isinstance(result, Solved), str(result)
    np.testing.assert_allclose(result.x, scenario.expected.x, rtol=1e-4)
    assert iterations


@pytest.mark.parametrize(
    "label",
    ["distance-to-sphere", "schittkowski/problem-27", "schittkowski/problem-79"],
)
def test_ipopt_scenarios(label) -> None:
    report = run_scenario(get_scenario(label), SolverConfig(name="ipopt"))
    report.raise_if_failed()


def test_callbacks_report_accepted_iterates() -> None:
    scenario = get_scenario("hs071/nonscalar-constraints")
    solver = IpoptSolver(scenario.problem())
    seen = []
    solver.add_callback(lambda it, x, fx: seen.append(np.array(x)))
    result = solver.minimum()
    assert isinstance(result, Solved), str(result)
    # The last iteration reported is the point IPOPT returns
    np.testing.assert_allclose(seen[-1], result.x, rtol=1e-7)


class RecordingProblem(cyipopt.Problem):
    x_scaling = None

    def set_problem_scaling(self, obj_scaling=1.0, x_scaling=None, g_scaling=None):
        RecordingProblem.x_scaling = np.array(x_scaling)
        return super().set_problem_scaling(obj_scaling, x_scaling, g_scaling)


def test_variable_scales_are_forwarded(monkeypatch) -> None:
    scenario = get_scenario("hs071/nonscalar-constraints")
    problem = scenario.problem()
    problem.set_variable_scale(1, 2.0)
    solver = IpoptSolver(problem)
    monkeypatch.setattr(solver, "_cyipopt", type("cyipopt", (), {"Problem": RecordingProblem}))
    result = solver.minimum()
    assert isinstance(result, Solved), str(result)
    np.testing.assert_array_equal(RecordingProblem.x_scaling, [1.0, 2.0, 1.0, 1.0])
    np.testing.assert_allclose(result.x, scenario.expected.x, rtol=1e-4)
