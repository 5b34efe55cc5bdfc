"""
Hock-Schittkowski problem 71 with its two constraints given as one
vector-valued function.

Every function here provides exact Hessians, so solvers able to use second
derivatives get them through the problem.
"""

from __future__ import annotations

from typing import Any, Optional

from ..core.backend import Array, Backend
from ..core.function import TwiceDifferentiableFunction
from ..core.problem import Problem, make_interval, make_lower_interval
from ..validation.expected import ExpectedResult, Tolerances
from .base import Scenario, register_scenario

EXPECTED = ExpectedResult(
    f0=16.0,
    x=[1.0, 4.74299963, 3.82114998, 1.37940829],
    fx=17.0140173,
    x0=[1.0, 5.0, 5.0, 1.0],
)
TOLERANCES = Tolerances(f0=1e-6, x=1e-3, f=1e-3)


class Hs071Objective(TwiceDifferentiableFunction):
    """``x0 x3 (x0 + x1 + x2) + x2``"""

    def __init__(self, backend: Optional[Backend] = None) -> None:
        super().__init__(4, 1, "a * d * (a + b + c) + c", backend=backend)

    def impl_compute(self, result: Array, x: Array) -> None:
        result[0] = x[0] * x[3] * (x[0] + x[1] + x[2]) + x[2]

    def impl_gradient(self, grad: Any, x: Array, function_id: int) -> None:
        self.backend.zero_fill(grad)
        grad[0] = x[0] * x[3] + x[3] * (x[0] + x[1] + x[2])
        grad[1] = x[0] * x[3]
        grad[2] = x[0] * x[3] + 1.0
        grad[3] = x[0] * (x[0] + x[1] + x[2])

    def impl_hessian(self, hess: Any, x: Array, function_id: int) -> None:
        self.backend.zero_fill(hess)
        hess[0, 0] = 2.0 * x[3]
        hess[0, 1] = hess[1, 0] = x[3]
        hess[0, 2] = hess[2, 0] = x[3]
        hess[0, 3] = hess[3, 0] = 2.0 * x[0] + x[1] + x[2]
        hess[1, 3] = hess[3, 1] = x[0]
        hess[2, 3] = hess[3, 2] = x[0]


class Hs071Constraints(TwiceDifferentiableFunction):
    """Row 0: ``x0 x1 x2 x3``. Row 1: ``sum(x_i^2)``."""

    def __init__(self, backend: Optional[Backend] = None) -> None:
        super().__init__(
            4, 2, "a * b * c * d\na * a + b * b + c * c + d * d", backend=backend
        )

    def impl_compute(self, result: Array, x: Array) -> None:
        result[0] = x[0] * x[1] * x[2] * x[3]
        result[1] = x[0] ** 2 + x[1] ** 2 + x[2] ** 2 + x[3] ** 2

    def impl_gradient(self, grad: Any, x: Array, function_id: int) -> None:
        self.backend.zero_fill(grad)
        if function_id == 0:
            grad[0] = x[1] * x[2] * x[3]
            grad[1] = x[0] * x[2] * x[3]
            grad[2] = x[0] * x[1] * x[3]
            grad[3] = x[0] * x[1] * x[2]
        else:
            for i in range(4):
                grad[i] = 2.0 * x[i]

    def impl_hessian(self, hess: Any, x: Array, function_id: int) -> None:
        self.backend.zero_fill(hess)
        if function_id == 0:
            hess[0, 1] = hess[1, 0] = x[2] * x[3]
            hess[0, 2] = hess[2, 0] = x[1] * x[3]
            hess[0, 3] = hess[3, 0] = x[1] * x[2]
            hess[1, 2] = hess[2, 1] = x[0] * x[3]
            hess[1, 3] = hess[3, 1] = x[0] * x[2]
            hess[2, 3] = hess[3, 2] = x[0] * x[1]
        else:
            for i in range(4):
                hess[i, i] = 2.0


def build_problem(backend: Backend) -> Problem:
    problem = Problem(Hs071Objective(backend=backend))
    for i in range(problem.input_size):
        problem.set_variable_bounds(i, make_interval(1.0, 5.0))
    problem.add_constraint(
        Hs071Constraints(backend=backend),
        [make_lower_interval(25.0), make_interval(40.0, 40.0)],
        [1.0, 1.0],
    )
    problem.set_starting_point(EXPECTED.x0)
    return problem


SCENARIO = register_scenario(
    Scenario("hs071/nonscalar-constraints", build_problem, EXPECTED, TOLERANCES)
)

__all__ = ["EXPECTED", "SCENARIO", "Hs071Constraints", "Hs071Objective", "build_problem"]
