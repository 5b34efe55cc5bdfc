"""Core abstractions: backends, functions, problems and solver results."""

from .backend import DENSE, SPARSE, Backend, DenseBackend, SparseBackend, backend, default_backend, to_dense
from .function import DifferentiableFunction, Function, TwiceDifferentiableFunction, has_hessian
from .problem import (
    ConstraintEntry,
    Interval,
    Problem,
    make_infinite_interval,
    make_interval,
    make_lower_interval,
    make_upper_interval,
)
from .result import NoSolution, Result, Solved, SolvedWithWarnings, SolverError, has_solution
from .sum_of_squares import SumOfSquares

__all__ = [
    "Backend",
    "ConstraintEntry",
    "DENSE",
    "DenseBackend",
    "DifferentiableFunction",
    "Function",
    "Interval",
    "NoSolution",
    "Problem",
    "Result",
    "SPARSE",
    "Solved",
    "SolvedWithWarnings",
    "SolverError",
    "SparseBackend",
    "SumOfSquares",
    "TwiceDifferentiableFunction",
    "backend",
    "default_backend",
    "has_hessian",
    "has_solution",
    "make_infinite_interval",
    "make_interval",
    "make_lower_interval",
    "make_upper_interval",
    "to_dense",
]
