"""Solver invocation boundary and built-in solver plugins."""

from .base import DEFAULT_SOLVER, IterationCallback, Solver, SolverConfig
from .factory import available_solvers, create_solver, register_solver, unregister_solver
from .ipopt_solver import IpoptSolver
from .scipy_solver import ScipySolver, SlsqpSolver, TrustConstrSolver

__all__ = [
    "DEFAULT_SOLVER",
    "IpoptSolver",
    "IterationCallback",
    "ScipySolver",
    "SlsqpSolver",
    "Solver",
    "SolverConfig",
    "TrustConstrSolver",
    "available_solvers",
    "create_solver",
    "register_solver",
    "unregister_solver",
]
