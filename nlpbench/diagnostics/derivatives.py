"""Finite-difference approximations and analytic derivative checks.

Every approximation works on one output row of a :class:`Function`, the same
unit ``gradient(x, function_id)`` and ``hessian(x, function_id)`` return, so
analytic and approximate derivatives are compared row by row.
"""

from __future__ import annotations

import numpy as np

from ..core.backend import Array, to_dense
from ..core.function import DifferentiableFunction, Function, TwiceDifferentiableFunction


def _check_eps(eps: float) -> None:
    if eps <= 0:
        raise ValueError("eps must be positive")


def approx_gradient(
    function: Function, x: Array, function_id: int = 0, eps: float = 1e-6
) -> Array:
    """
    Central-difference gradient of output row ``function_id``.

    Parameters
    ----------
    function:
        Function to differentiate; only its values are used.
    x:
        Point where the gradient is approximated.
    function_id:
        Output row to differentiate.
    eps:
        Perturbation size.

    Returns
    -------
    ndarray of shape ``(n,)``.
    """
    _check_eps(eps)
    x = function.check_argument(x)
    row = function.check_function_id(function_id)
    step = np.zeros_like(x)
    grad = np.empty(function.input_size, dtype=float)
    for j in range(function.input_size):
        step[j] = eps
        grad[j] = (function(x + step)[row] - function(x - step)[row]) / (2.0 * eps)
        step[j] = 0.0
    return grad


def approx_jacobian(function: Function, x: Array, eps: float = 1e-6) -> Array:
    """Stack :func:`approx_gradient` over every output row, shape ``(m, n)``."""
    return np.vstack(
        [approx_gradient(function, x, i, eps=eps) for i in range(function.output_size)]
    )


def approx_hessian(
    function: Function, x: Array, function_id: int = 0, eps: float = 1e-4
) -> Array:
    """
    Second-order central-difference Hessian of output row ``function_id``.

    Entry ``(i, j)`` is
    ``[f(x+e_i+e_j) - f(x+e_i-e_j) - f(x-e_i+e_j) + f(x-e_i-e_j)] / (4 eps^2)``,
    which also covers the diagonal. Only the upper triangle is evaluated.
    """
    _check_eps(eps)
    x = function.check_argument(x)
    row = function.check_function_id(function_id)
    n = function.input_size
    basis = eps * np.eye(n)

    def f(point: Array) -> float:
        return float(function(point)[row])

    hess = np.empty((n, n), dtype=float)
    for i in range(n):
        for j in range(i, n):
            di, dj = basis[i], basis[j]
            hess[i, j] = hess[j, i] = (
                f(x + di + dj) - f(x + di - dj) - f(x - di + dj) + f(x - di - dj)
            ) / (4.0 * eps**2)
    return hess


def gradient_errors(
    function: DifferentiableFunction, x: Array, eps: float = 1e-6
) -> Array:
    """
    Return, per output row, the largest absolute deviation between the
    analytic gradient and its finite-difference approximation.
    """
    x = function.check_argument(x)
    errors = np.empty(function.output_size, dtype=float)
    for i in range(function.output_size):
        analytic = to_dense(function.gradient(x, i)).reshape(-1)
        errors[i] = np.max(np.abs(analytic - approx_gradient(function, x, i, eps=eps)))
    return errors


def hessian_errors(
    function: TwiceDifferentiableFunction, x: Array, eps: float = 1e-4
) -> Array:
    """Per-row largest deviation between analytic and approximate Hessians."""
    x = function.check_argument(x)
    errors = np.empty(function.output_size, dtype=float)
    for i in range(function.output_size):
        analytic = to_dense(function.hessian(x, i))
        errors[i] = np.max(np.abs(analytic - approx_hessian(function, x, i, eps=eps)))
    return errors


def check_gradient(
    function: DifferentiableFunction, x: Array, atol: float = 1e-5, eps: float = 1e-6
) -> bool:
    """Return True if every gradient row matches finite differences within ``atol``."""
    errors = gradient_errors(function, x, eps=eps)
    return bool(np.all(errors <= atol))


def assert_gradient(
    function: DifferentiableFunction, x: Array, atol: float = 1e-5, eps: float = 1e-6
) -> None:
    """
    Assert that the analytic gradient agrees with finite differences.

    Raises
    ------
    ValueError
        If any output row deviates by more than ``atol``.
    """
    errors = gradient_errors(function, x, eps=eps)
    if not np.all(errors <= atol):
        raise ValueError(
            f"Gradient of {function} does not match finite differences at "
            f"x={np.asarray(x).tolist()} within {atol}. Row errors: {errors.tolist()}"
        )


def check_hessian(
    function: TwiceDifferentiableFunction,
    x: Array,
    atol: float = 1e-4,
    eps: float = 1e-4,
) -> bool:
    """Return True if every Hessian row matches finite differences within ``atol``."""
    errors = hessian_errors(function, x, eps=eps)
    return bool(np.all(errors <= atol))


__all__ = [
    "approx_gradient",
    "approx_hessian",
    "approx_jacobian",
    "assert_gradient",
    "check_gradient",
    "check_hessian",
    "gradient_errors",
    "hessian_errors",
]
