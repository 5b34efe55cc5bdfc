"""
Solver plugins delegating to ``scipy.optimize.minimize``.

Two methods are exposed:

- ``scipy-slsqp``: Sequential Least Squares Programming. Interval constraints
  are split into scaled equality / inequality rows.
- ``scipy-trust-constr``: trust-region interior point. Constraints are passed
  as ``NonlinearConstraint`` objects; exact Hessians are forwarded when every
  function provides them, otherwise quasi-Newton ``BFGS`` approximations are
  used.

The problem is handed over as-is; these classes only translate data and
outcomes.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Callable, Dict, List

import numpy as np
from scipy import optimize, sparse

from ..core.backend import to_dense
from ..core.function import has_hessian
from ..core.problem import ConstraintEntry, Problem
from ..core.result import Result, Solved, SolvedWithWarnings, SolverError
from ..logging import get_logger
from .base import Solver, SolverConfig

log = get_logger(__name__)

# Constraint violation above which a successful run is downgraded to a warning
FEASIBILITY_TOL = 1e-6

# SLSQP exit modes: 8 "Positive directional derivative for linesearch",
# 9 "Iteration limit reached"
_SLSQP_WARNING_STATUSES = frozenset({8, 9})
# trust-constr statuses: 1 gtol, 2 xtol, 3 stopped by the convergence callback,
# 0 iteration limit, 4 stopped with a residual constraint violation
_TRUST_CONSTR_SUCCESS_STATUSES = frozenset({1, 2, 3})
_TRUST_CONSTR_WARNING_STATUSES = frozenset({0, 4})


def _dense_gradient(value: Any) -> np.ndarray:
    return to_dense(value).reshape(-1)


def _objective_callables(problem: Problem) -> tuple[Callable, Callable]:
    objective = problem.objective
    if objective.output_size != 1:
        raise ValueError(
            f"scipy solvers need a scalar objective, got {objective.output_size} outputs"
        )

    def fun(x: np.ndarray) -> float:
        return float(objective(x)[0])

    def jac(x: np.ndarray) -> np.ndarray:
        return _dense_gradient(objective.gradient(x, 0))

    return fun, jac


def _scipy_bounds(problem: Problem) -> optimize.Bounds | None:
    lower = problem.lower_bounds()
    upper = problem.upper_bounds()
    if np.all(np.isinf(lower)) and np.all(np.isinf(upper)):
        return None
    return optimize.Bounds(lower, upper)


def _slsqp_rows(entry: ConstraintEntry) -> List[Dict[str, Any]]:
    """Translate one interval constraint into old-style SLSQP dictionaries."""
    function = entry.function
    scales = np.asarray(entry.scales, dtype=float)
    lower = entry.lower
    upper = entry.upper
    rows: List[Dict[str, Any]] = []

    def make(kind: str, index: int, bound: float, sign: float) -> Dict[str, Any]:
        scale = scales[index]

        def fun(x: np.ndarray) -> float:
            return float(sign * scale * (function(x)[index] - bound))

        def jac(x: np.ndarray) -> np.ndarray:
            return sign * scale * _dense_gradient(function.gradient(x, index))

        return {"type": kind, "fun": fun, "jac": jac}

    for index in range(function.output_size):
        if lower[index] == upper[index]:
            rows.append(make("eq", index, lower[index], 1.0))
            continue
        if np.isfinite(lower[index]):
            rows.append(make("ineq", index, lower[index], 1.0))
        if np.isfinite(upper[index]):
            rows.append(make("ineq", index, upper[index], -1.0))
    return rows


def _nonlinear_constraint(entry: ConstraintEntry) -> optimize.NonlinearConstraint:
    function = entry.function
    scales = np.asarray(entry.scales, dtype=float)

    def fun(x: np.ndarray) -> np.ndarray:
        return scales * function(x)

    def jac(x: np.ndarray) -> Any:
        jacobian = function.jacobian(x)
        if sparse.issparse(jacobian):
            return sparse.csr_array(sparse.diags_array(scales) @ jacobian)
        return scales[:, None] * jacobian

    kwargs: Dict[str, Any] = {"jac": jac}
    if has_hessian(function):

        def hess(x: np.ndarray, v: np.ndarray) -> np.ndarray:
            total = np.zeros((function.input_size, function.input_size))
            for index, weight in enumerate(v * scales):
                if weight != 0.0:
                    total += weight * to_dense(function.hessian(x, index))
            return total

        kwargs["hess"] = hess
    else:
        kwargs["hess"] = optimize.BFGS()

    return optimize.NonlinearConstraint(
        fun, scales * entry.lower, scales * entry.upper, **kwargs
    )


class ScipySolver(Solver):
    """Base adapter around ``scipy.optimize.minimize``."""

    name = "scipy"
    method = ""
    success_statuses: frozenset = frozenset({0})
    warning_statuses: frozenset = frozenset()

    @abstractmethod
    def minimize_kwargs(self) -> Dict[str, Any]:
        """Return the method-specific keyword arguments for ``minimize``."""

    def converged(self, state: Any = None) -> bool:
        """Return True to stop the run from the iteration callback."""
        return False

    def _outcome(self, res: optimize.OptimizeResult) -> Result:
        problem = self.problem
        x = np.asarray(res.x, dtype=float)
        if not np.all(np.isfinite(x)):
            return SolverError(f"{self.method} returned a non-finite point: {res.message}")
        value = problem.objective(x)
        constraints = problem.constraint_values(x)
        iterations = int(getattr(res, "nit", 0) or 0)
        violation = problem.constraint_violation(x)
        if res.status in self.success_statuses:
            if violation > FEASIBILITY_TOL:
                return SolvedWithWarnings(
                    x,
                    value,
                    constraints,
                    iterations,
                    warnings=(f"constraint violation {violation:.3e} at solution",),
                )
            return Solved(x, value, constraints, iterations)
        if res.status in self.warning_statuses:
            return SolvedWithWarnings(
                x, value, constraints, iterations, warnings=(str(res.message),)
            )
        return SolverError(f"{self.method} failed (status {res.status}): {res.message}")

    def solve(self) -> Result:
        problem = self.problem
        fun, jac = _objective_callables(problem)
        x0 = problem.starting_point

        def callback(xk: np.ndarray, *args: Any) -> bool:
            self.notify(xk, fun(xk))
            return self.converged(*args)

        kwargs = self.minimize_kwargs()
        log.debug("Calling scipy.optimize.minimize(method=%s)", self.method)
        res = optimize.minimize(
            fun,
            x0,
            jac=jac,
            method=self.method,
            bounds=_scipy_bounds(problem),
            callback=callback,
            **kwargs,
        )
        return self._outcome(res)


class SlsqpSolver(ScipySolver):
    """``scipy-slsqp`` plugin."""

    name = "scipy-slsqp"
    method = "SLSQP"
    warning_statuses = _SLSQP_WARNING_STATUSES

    def minimize_kwargs(self) -> Dict[str, Any]:
        constraints: List[Dict[str, Any]] = []
        for entry in self.problem.constraints:
            constraints.extend(_slsqp_rows(entry))
        options = {"maxiter": 500, "ftol": 1e-10}
        options.update(self.options)
        return {"constraints": constraints, "options": options}


class TrustConstrSolver(ScipySolver):
    """
    ``scipy-trust-constr`` plugin.

    scipy measures ``gtol`` on the Lagrangian of the current barrier
    subproblem, so with bounds or inequality constraints its own test can
    stop while the barrier parameter is still large and the point is off by
    the duality gap. The ``gtol`` option is therefore checked in the
    iteration callback, together with ``barrier_tol``, and scipy's own
    ``gtol`` test is switched off.
    """

    name = "scipy-trust-constr"
    method = "trust-constr"
    success_statuses = _TRUST_CONSTR_SUCCESS_STATUSES
    warning_statuses = _TRUST_CONSTR_WARNING_STATUSES

    def run_options(self) -> Dict[str, Any]:
        options = {"maxiter": 2000, "gtol": 1e-8, "xtol": 1e-12, "barrier_tol": 1e-8}
        options.update(self.options)
        return options

    def converged(self, state: Any = None) -> bool:
        if state is None:
            return False
        options = self.run_options()
        # Problems without inequalities never enter the barrier method
        barrier = getattr(state, "barrier_parameter", 0.0)
        return bool(
            state.optimality < options["gtol"]
            and state.constr_violation < options["gtol"]
            and barrier < options["barrier_tol"]
        )

    def minimize_kwargs(self) -> Dict[str, Any]:
        objective = self.problem.objective
        constraints = [_nonlinear_constraint(entry) for entry in self.problem.constraints]
        kwargs: Dict[str, Any] = {"constraints": constraints}
        if has_hessian(objective):
            kwargs["hess"] = lambda x: to_dense(objective.hessian(x, 0))
        else:
            kwargs["hess"] = optimize.BFGS()
        options = self.run_options()
        options["gtol"] = 0.0
        kwargs["options"] = options
        return kwargs


def create_slsqp_solver(problem: Problem, config: SolverConfig) -> Solver:
    return SlsqpSolver(problem, config)


def create_trust_constr_solver(problem: Problem, config: SolverConfig) -> Solver:
    return TrustConstrSolver(problem, config)


__all__ = [
    "FEASIBILITY_TOL",
    "ScipySolver",
    "SlsqpSolver",
    "TrustConstrSolver",
    "create_slsqp_solver",
    "create_trust_constr_solver",
]
