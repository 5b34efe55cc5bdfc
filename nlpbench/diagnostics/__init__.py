"""Derivative checks and optimization journals."""

from .derivatives import (
    approx_gradient,
    approx_hessian,
    approx_jacobian,
    assert_gradient,
    check_gradient,
    check_hessian,
    gradient_errors,
    hessian_errors,
)
from .journal import JOURNAL_FILENAME, OptimizationLogger

__all__ = [
    "JOURNAL_FILENAME",
    "OptimizationLogger",
    "approx_gradient",
    "approx_hessian",
    "approx_jacobian",
    "assert_gradient",
    "check_gradient",
    "check_hessian",
    "gradient_errors",
    "hessian_errors",
]
