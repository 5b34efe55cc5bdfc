"""Sum of squared outputs of a differentiable function."""

from __future__ import annotations

from typing import Any

import numpy as np

from .backend import Array, to_dense
from .function import DifferentiableFunction


class SumOfSquares(DifferentiableFunction):
    """
    Scalar function ``g(x) = sum_i f_i(x)^2`` built on top of ``f``.

    The gradient is ``2 * sum_i f_i(x) * grad f_i(x)``. The wrapped function is
    shared read-only and the result uses its backend.
    """

    def __init__(self, function: DifferentiableFunction, name: str = "") -> None:
        if not isinstance(function, DifferentiableFunction):
            raise ValueError(
                "SumOfSquares requires a DifferentiableFunction, "
                f"got {type(function).__name__}"
            )
        super().__init__(
            function.input_size,
            1,
            name or f"sum of squares of ({function.name})",
            backend=function.backend,
        )
        self.function = function

    def impl_compute(self, result: Array, x: Array) -> None:
        values = self.function(x)
        result[0] = float(np.dot(values, values))

    def impl_gradient(self, grad: Any, x: Array, function_id: int) -> None:
        values = self.function(x)
        jac = to_dense(self.function.jacobian(x))
        grad[:] = 2.0 * (values @ jac)


__all__ = ["SumOfSquares"]
