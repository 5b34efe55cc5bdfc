"""Tests for the optimization journal."""

from nlpbench.core import DifferentiableFunction, Problem, Solved
from nlpbench.diagnostics import JOURNAL_FILENAME, OptimizationLogger
from nlpbench.solvers import Solver


class Square(DifferentiableFunction):
    def __init__(self):
        super().__init__(1, 1, "x²")

    def impl_compute(self, result, x):
        result[0] = x[0] ** 2

    def impl_gradient(self, grad, x, function_id):
        grad[0] = 2.0 * x[0]


class HalvingSolver(Solver):
    name = "halving"

    def solve(self):
        x = self.problem.starting_point
        for _ in range(3):
            x = x / 2.0
            self.notify(x, self.problem.objective(x)[0])
        return Solved(x, self.problem.objective(x))


def make_solver():
    problem = Problem(Square())
    problem.set_starting_point([8.0])
    return HalvingSolver(problem)


def test_journal_written_on_exit(tmp_path) -> None:
    solver = make_solver()
    path = tmp_path / "halving" / "nested" / "scenario"
    with OptimizationLogger(solver, path) as logger:
        solver.minimum()
    journal = path / JOURNAL_FILENAME
    assert logger.journal_file == journal
    text = journal.read_text(encoding="utf-8")
    assert "Solver: halving" in text
    assert "Problem: minimize x²" in text
    assert "f(x)=16" in text
    assert "Result: Solved" in text
    assert len(logger.iterations) == 3


def test_close_is_idempotent(tmp_path) -> None:
    solver = make_solver()
    logger = OptimizationLogger(solver, tmp_path)
    solver.minimum()
    first = logger.close()
    solver.minimum()
    assert logger.close() == first
    # Iterations after close are not recorded
    assert len(logger.iterations) == 3
