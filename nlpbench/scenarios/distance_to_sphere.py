"""Closest point of the unit sphere to a point outside it."""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from ..core.backend import Array, Backend
from ..core.function import DifferentiableFunction
from ..core.problem import Problem
from ..core.sum_of_squares import SumOfSquares
from ..validation.expected import ExpectedResult, Tolerances
from .base import Scenario, register_scenario

EXPECTED = ExpectedResult(
    f0=4.8974713057829096,
    x=[-1.5, -1.2],
    fx=1.0,
    x0=[0.0, 0.0],
)
TOLERANCES = Tolerances(f0=1e-6, x=1e-2, f=1e-2)


def spherical_coordinates(theta: float, phi: float) -> Array:
    """Point of the unit sphere at longitude ``theta`` and latitude ``phi``."""
    return np.array(
        [np.cos(theta) * np.cos(phi), np.sin(theta) * np.cos(phi), np.sin(phi)]
    )


class SphereOffset(DifferentiableFunction):
    """
    Vector from a target point to the unit sphere point at ``(theta, phi)``.

    The target lies at twice the unit-sphere point of the expected angles, so
    the closest sphere point is at distance 1.
    """

    def __init__(self, target: Optional[Any] = None, backend: Optional[Backend] = None) -> None:
        super().__init__(2, 3, "vector between unit sphere and point (x,y,z)", backend=backend)
        if target is None:
            target = 2.0 * spherical_coordinates(*EXPECTED.x)
        self.target = np.asarray(target, dtype=float)
        if self.target.shape != (3,):
            raise ValueError(f"target must have shape (3,), got {self.target.shape}")

    def impl_compute(self, result: Array, x: Array) -> None:
        result[:] = spherical_coordinates(x[0], x[1]) - self.target

    def impl_gradient(self, grad: Any, x: Array, function_id: int) -> None:
        theta, phi = x
        self.backend.zero_fill(grad)
        if function_id == 0:
            grad[0] = -np.sin(theta) * np.cos(phi)
            grad[1] = -np.cos(theta) * np.sin(phi)
        elif function_id == 1:
            grad[0] = np.cos(theta) * np.cos(phi)
            grad[1] = -np.sin(theta) * np.sin(phi)
        else:
            grad[1] = np.cos(phi)


def build_problem(backend: Backend) -> Problem:
    objective = SumOfSquares(SphereOffset(backend=backend))
    problem = Problem(objective)
    problem.set_starting_point(EXPECTED.x0)
    return problem


SCENARIO = register_scenario(
    Scenario("distance-to-sphere", build_problem, EXPECTED, TOLERANCES)
)

__all__ = ["EXPECTED", "SCENARIO", "SphereOffset", "build_problem", "spherical_coordinates"]
