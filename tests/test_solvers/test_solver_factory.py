"""Tests for solver creation by name and plugin loading."""

import textwrap

import pytest

from nlpbench.core import DifferentiableFunction, Problem, Solved
from nlpbench.solvers import (
    Solver,
    SolverConfig,
    SlsqpSolver,
    TrustConstrSolver,
    available_solvers,
    create_solver,
    register_solver,
    unregister_solver,
)
from nlpbench.solvers import factory


class Square(DifferentiableFunction):
    def __init__(self):
        super().__init__(1, 1, "x²")

    def impl_compute(self, result, x):
        result[0] = x[0] ** 2

    def impl_gradient(self, grad, x, function_id):
        grad[0] = 2.0 * x[0]


class EchoSolver(Solver):
    name = "echo"

    def solve(self):
        x = self.problem.starting_point
        return Solved(x, self.problem.objective(x))


@pytest.fixture
def problem():
    p = Problem(Square())
    p.set_starting_point([1.0])
    return p


def test_builtin_solvers(problem) -> None:
    assert isinstance(create_solver(problem, SolverConfig(name="scipy-slsqp")), SlsqpSolver)
    assert isinstance(
        create_solver(problem, SolverConfig(name="scipy-trust-constr")), TrustConstrSolver
    )


def test_names_are_case_insensitive(problem) -> None:
    assert isinstance(create_solver(problem, SolverConfig(name="SciPy-SLSQP")), SlsqpSolver)


def test_unknown_solver_raises(problem) -> None:
    with pytest.raises(ValueError, match="Unsupported solver name 'nope'"):
        create_solver(problem, SolverConfig(name="nope"))


def test_registered_solver_takes_precedence(problem) -> None:
    register_solver("scipy-slsqp", lambda p, c: EchoSolver(p, c))
    try:
        solver = create_solver(problem, SolverConfig(name="scipy-slsqp"))
        assert isinstance(solver, EchoSolver)
    finally:
        unregister_solver("scipy-slsqp")
    assert isinstance(create_solver(problem, SolverConfig(name="scipy-slsqp")), SlsqpSolver)


def test_register_requires_callable() -> None:
    with pytest.raises(TypeError):
        register_solver("broken", "not callable")


def test_factory_returning_non_solver_raises(problem) -> None:
    register_solver("bogus", lambda p, c: object())
    try:
        with pytest.raises(TypeError, match="expected a Solver"):
            create_solver(problem, SolverConfig(name="bogus"))
    finally:
        unregister_solver("bogus")


def test_plugin_file_on_plugin_path(problem, tmp_path) -> None:
    plugin = tmp_path / "nlpbench_plugin_my_solver.py"
    plugin.write_text(
        textwrap.dedent(
            """
            from nlpbench.core import Solved
            from nlpbench.solvers import Solver


            class MySolver(Solver):
                name = "my-solver"

                def solve(self):
                    x = self.problem.starting_point
                    return Solved(x, self.problem.objective(x))


            def create_solver(problem, config):
                return MySolver(problem, config)
            """
        )
    )
    config = SolverConfig(name="my-solver", plugin_path=(str(tmp_path / "missing"), str(tmp_path)))
    assert "my-solver" in available_solvers(config)
    solver = create_solver(problem, config)
    assert solver.name == "my-solver"
    assert isinstance(solver.minimum(), Solved)


def test_plugin_without_factory_raises(problem, tmp_path) -> None:
    (tmp_path / "nlpbench_plugin_empty.py").write_text("VALUE = 1\n")
    with pytest.raises(TypeError, match="create_solver"):
        create_solver(problem, SolverConfig(name="empty", plugin_path=(str(tmp_path),)))


def test_entry_point_solvers(problem, monkeypatch) -> None:
    class FakeEntryPoint:
        name = "Echo"

        def load(self):
            return lambda p, c: EchoSolver(p, c)

    def fake_entry_points(group):
        assert group == factory.ENTRY_POINT_GROUP
        return [FakeEntryPoint()]

    monkeypatch.setattr(factory.metadata, "entry_points", fake_entry_points)
    assert "echo" in available_solvers()
    assert isinstance(create_solver(problem, SolverConfig(name="echo")), EchoSolver)


def test_available_solvers_lists_builtins() -> None:
    names = available_solvers()
    assert {"scipy-slsqp", "scipy-trust-constr", "ipopt"} <= set(names)
    assert names == sorted(names)
