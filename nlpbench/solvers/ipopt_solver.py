"""
IPOPT solver plugin based on ``cyipopt``.

``cyipopt`` is an optional dependency (``pip install nlpbench[ipopt]``). The
adapter exposes the objective, its gradient, the stacked and scaled constraint
rows with a dense Jacobian structure, and the exact Lagrangian Hessian when
every function provides second derivatives. Otherwise IPOPT runs with its
limited-memory Hessian approximation.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import numpy as np

from ..core.backend import to_dense
from ..core.function import has_hessian
from ..core.problem import Problem
from ..core.result import Result, Solved, SolvedWithWarnings, SolverError
from ..logging import get_logger
from .base import Solver, SolverConfig

log = get_logger(__name__)

# IPOPT treats bounds beyond +-1e19 as infinite
_IPOPT_INFINITY = 2e19

_SOLVED = 0
# Solved_To_Acceptable_Level, Maximum_Iterations_Exceeded
_WARNING_STATUSES = frozenset({1, -1})


def _finite(values: np.ndarray) -> np.ndarray:
    return np.clip(np.asarray(values, dtype=float), -_IPOPT_INFINITY, _IPOPT_INFINITY)


class _IpoptAdapter:
    """Callback object in the layout ``cyipopt.Problem`` expects."""

    def __init__(self, solver: "IpoptSolver") -> None:
        self.solver = solver
        self.problem = solver.problem
        self.n = self.problem.input_size
        self.scales = np.concatenate(
            [np.asarray(entry.scales, dtype=float) for entry in self.problem.constraints]
            or [np.zeros(0)]
        )
        self.m = self.scales.size
        self.nlp: Any = None
        self.exact_hessian = has_hessian(self.problem.objective) and all(
            has_hessian(entry.function) for entry in self.problem.constraints
        )
        self._lower_tri = np.tril_indices(self.n)

    def objective(self, x: np.ndarray) -> float:
        return float(self.problem.objective(x)[0])

    def gradient(self, x: np.ndarray) -> np.ndarray:
        return to_dense(self.problem.objective.gradient(x, 0)).reshape(-1)

    def constraints(self, x: np.ndarray) -> np.ndarray:
        return self.scales * self.problem.constraint_values(x)

    def jacobianstructure(self) -> tuple[np.ndarray, np.ndarray]:
        rows, cols = np.indices((self.m, self.n))
        return rows.reshape(-1), cols.reshape(-1)

    def jacobian(self, x: np.ndarray) -> np.ndarray:
        if self.m == 0:
            return np.zeros(0)
        blocks = [to_dense(entry.function.jacobian(x)) for entry in self.problem.constraints]
        return (self.scales[:, None] * np.vstack(blocks)).reshape(-1)

    def hessianstructure(self) -> tuple[np.ndarray, np.ndarray]:
        return self._lower_tri

    def hessian(self, x: np.ndarray, lagrange: np.ndarray, obj_factor: float) -> np.ndarray:
        total = obj_factor * to_dense(self.problem.objective.hessian(x, 0))
        weights = np.asarray(lagrange, dtype=float) * self.scales
        offset = 0
        for entry in self.problem.constraints:
            function = entry.function
            for index in range(function.output_size):
                weight = weights[offset + index]
                if weight != 0.0:
                    total = total + weight * to_dense(function.hessian(x, index))
            offset += function.output_size
        return total[self._lower_tri]

    def intermediate(self, alg_mod, iter_count, obj_value, *args: Any) -> bool:
        # The accepted iterate, not the last trial point the objective saw
        iterate = self.nlp.get_current_iterate(scaled=False)
        self.solver.notify(np.array(iterate["x"], dtype=float), obj_value)
        return True


class IpoptSolver(Solver):
    """``ipopt`` plugin."""

    name = "ipopt"

    def __init__(self, problem: Problem, config: Optional[SolverConfig] = None) -> None:
        try:
            import cyipopt
        except ImportError as exc:
            raise RuntimeError(
                "The ipopt solver requires cyipopt. Install it with "
                "'pip install nlpbench[ipopt]'."
            ) from exc
        super().__init__(problem, config)
        if problem.objective.output_size != 1:
            raise ValueError(
                f"ipopt needs a scalar objective, got {problem.objective.output_size} outputs"
            )
        self._cyipopt = cyipopt

    def solve(self) -> Result:
        problem = self.problem
        adapter = _IpoptAdapter(self)
        lower = np.concatenate(
            [entry.lower for entry in problem.constraints] or [np.zeros(0)]
        )
        upper = np.concatenate(
            [entry.upper for entry in problem.constraints] or [np.zeros(0)]
        )
        nlp = self._cyipopt.Problem(
            n=adapter.n,
            m=adapter.m,
            problem_obj=adapter,
            lb=_finite(problem.lower_bounds()),
            ub=_finite(problem.upper_bounds()),
            cl=_finite(adapter.scales * lower),
            cu=_finite(adapter.scales * upper),
        )
        adapter.nlp = nlp
        options: Dict[str, Any] = {"print_level": 0, "tol": 1e-10}
        x_scaling = np.asarray(problem.argument_scales, dtype=float)
        if np.any(x_scaling != 1.0):
            nlp.set_problem_scaling(obj_scaling=1.0, x_scaling=x_scaling)
            options["nlp_scaling_method"] = "user-scaling"
        if not adapter.exact_hessian:
            options["hessian_approximation"] = "limited-memory"
        options.update(self.options)
        for key, value in options.items():
            nlp.add_option(key, value)

        x, info = nlp.solve(problem.starting_point)
        status = int(info["status"])
        message = info.get("status_msg", b"")
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")
        log.debug("IPOPT exited with status %d: %s", status, message)

        x = np.asarray(x, dtype=float)
        if status == _SOLVED or status in _WARNING_STATUSES:
            value = problem.objective(x)
            constraints = problem.constraint_values(x)
            if status == _SOLVED:
                return Solved(x, value, constraints, self._iteration)
            return SolvedWithWarnings(
                x, value, constraints, self._iteration, warnings=(message,)
            )
        return SolverError(f"IPOPT failed (status {status}): {message}")


def create_ipopt_solver(problem: Problem, config: SolverConfig) -> Solver:
    return IpoptSolver(problem, config)


__all__ = ["IpoptSolver", "create_ipopt_solver"]
