"""
Problems 27 and 79 of the Hock-Schittkowski test collection.

Both problems minimize a polynomial objective under equality constraints.
Gradients clear their container through the backend and then assign the
structurally non-zero entries only, so sparse instances store exactly the
sparsity pattern of each row.
"""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from ..core.backend import Array, Backend
from ..core.function import DifferentiableFunction
from ..core.problem import Problem, make_interval
from ..validation.expected import ExpectedResult, Tolerances
from .base import Scenario, register_scenario

SQRT2 = np.sqrt(2.0)


class Problem27Objective(DifferentiableFunction):
    """``0.01 (x0 - 1)^2 + (x1 - x0^2)^2``"""

    def __init__(self, backend: Optional[Backend] = None) -> None:
        super().__init__(3, 1, "0.01 (x₀ - 1)² + (x₁ - x₀²)²", backend=backend)

    def impl_compute(self, result: Array, x: Array) -> None:
        result[0] = 0.01 * (x[0] - 1.0) ** 2 + (x[1] - x[0] ** 2) ** 2

    def impl_gradient(self, grad: Any, x: Array, function_id: int) -> None:
        self.backend.zero_fill(grad)
        grad[0] = 4.0 * x[0] ** 3 - 4.0 * x[0] * x[1] + 0.02 * x[0] - 0.02
        grad[1] = -2.0 * x[0] ** 2 + 2.0 * x[1]


class Problem27Constraint(DifferentiableFunction):
    """``x0 + x2^2 + 1``"""

    def __init__(self, backend: Optional[Backend] = None) -> None:
        super().__init__(3, 1, "x₀ + x₂² + 1", backend=backend)

    def impl_compute(self, result: Array, x: Array) -> None:
        result[0] = x[0] + x[2] ** 2 + 1.0

    def impl_gradient(self, grad: Any, x: Array, function_id: int) -> None:
        self.backend.zero_fill(grad)
        grad[0] = 1.0
        grad[2] = 2.0 * x[2]


class Problem79Objective(DifferentiableFunction):
    def __init__(self, backend: Optional[Backend] = None) -> None:
        super().__init__(
            5,
            1,
            "(x₀ - 1)² + (x₀ - x₁)² + (x₁ - x₂)² + (x₂ - x₃)⁴ + (x₃ - x₄)⁴",
            backend=backend,
        )

    def impl_compute(self, result: Array, x: Array) -> None:
        result[0] = (
            (x[0] - 1.0) ** 2
            + (x[0] - x[1]) ** 2
            + (x[1] - x[2]) ** 2
            + (x[2] - x[3]) ** 4
            + (x[3] - x[4]) ** 4
        )

    def impl_gradient(self, grad: Any, x: Array, function_id: int) -> None:
        self.backend.zero_fill(grad)
        grad[0] = 2.0 * (x[0] - 1.0) + 2.0 * (x[0] - x[1])
        grad[1] = -2.0 * (x[0] - x[1]) + 2.0 * (x[1] - x[2])
        grad[2] = -2.0 * (x[1] - x[2]) + 4.0 * (x[2] - x[3]) ** 3
        grad[3] = -4.0 * (x[2] - x[3]) ** 3 + 4.0 * (x[3] - x[4]) ** 3
        grad[4] = -4.0 * (x[3] - x[4]) ** 3


class Problem79Constraints(DifferentiableFunction):
    """Three equality constraints of problem 79, one per output row."""

    def __init__(self, backend: Optional[Backend] = None) -> None:
        super().__init__(
            5,
            3,
            "x₀ + x₁² + x₂³ - 2 - 3√2, x₁ - x₂² + x₃ + 2 - 2√2, x₀x₄ - 2",
            backend=backend,
        )

    def impl_compute(self, result: Array, x: Array) -> None:
        result[0] = x[0] + x[1] ** 2 + x[2] ** 3 - 2.0 - 3.0 * SQRT2
        result[1] = x[1] - x[2] ** 2 + x[3] + 2.0 - 2.0 * SQRT2
        result[2] = x[0] * x[4] - 2.0

    def impl_gradient(self, grad: Any, x: Array, function_id: int) -> None:
        self.backend.zero_fill(grad)
        if function_id == 0:
            grad[0] = 1.0
            grad[1] = 2.0 * x[1]
            grad[2] = 3.0 * x[2] ** 2
        elif function_id == 1:
            grad[1] = 1.0
            grad[2] = -2.0 * x[2]
            grad[3] = 1.0
        else:
            grad[0] = x[4]
            grad[4] = x[0]


PROBLEM_27_EXPECTED = ExpectedResult(f0=4.01, x=[-1.0, 1.0, 0.0], fx=0.04, x0=[2.0, 2.0, 2.0])
# x[2] is expected at exactly 0 and is compared in absolute terms; the
# objective is flat in that direction so the tolerance is looser.
PROBLEM_27_TOLERANCES = Tolerances(f0=1e-4, x=1e-3, f=1e-4)

PROBLEM_79_EXPECTED = ExpectedResult(
    f0=1.0,
    x=[1.191127, 1.362603, 1.472818, 1.635017, 1.679081],
    fx=0.0787768209,
    x0=[2.0, 2.0, 2.0, 2.0, 2.0],
)
PROBLEM_79_TOLERANCES = Tolerances(f0=1e-4, x=1e-4, f=1e-4)


def build_problem_27(backend: Backend) -> Problem:
    problem = Problem(Problem27Objective(backend=backend))
    problem.add_constraint(Problem27Constraint(backend=backend), make_interval(0.0, 0.0))
    problem.set_starting_point(PROBLEM_27_EXPECTED.x0)
    return problem


def build_problem_79(backend: Backend) -> Problem:
    problem = Problem(Problem79Objective(backend=backend))
    constraints = Problem79Constraints(backend=backend)
    problem.add_constraint(
        constraints,
        [make_interval(0.0, 0.0) for _ in range(constraints.output_size)],
        [1.0] * constraints.output_size,
    )
    problem.set_starting_point(PROBLEM_79_EXPECTED.x0)
    return problem


PROBLEM_27 = register_scenario(
    Scenario("schittkowski/problem-27", build_problem_27, PROBLEM_27_EXPECTED, PROBLEM_27_TOLERANCES)
)
PROBLEM_79 = register_scenario(
    Scenario("schittkowski/problem-79", build_problem_79, PROBLEM_79_EXPECTED, PROBLEM_79_TOLERANCES)
)

__all__ = [
    "PROBLEM_27",
    "PROBLEM_79",
    "Problem27Constraint",
    "Problem27Objective",
    "Problem79Constraints",
    "Problem79Objective",
    "build_problem_27",
    "build_problem_79",
]
