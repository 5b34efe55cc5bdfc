"""Solver invocation boundary: configuration and the common solver interface."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional

import numpy as np

from ..core.problem import Problem
from ..core.result import NoSolution, Result, SolverError
from ..logging import get_logger

log = get_logger(__name__)

DEFAULT_SOLVER = "scipy-slsqp"

_SOLVER_ENV_VAR = "NLPBENCH_SOLVER"
_PLUGIN_PATH_ENV_VAR = "NLPBENCH_PLUGIN_PATH"
_LOG_DIR_ENV_VAR = "NLPBENCH_LOG_DIR"

IterationCallback = Callable[[int, Optional[np.ndarray], float], None]


@dataclass(frozen=True)
class SolverConfig:
    """
    Process-wide solver selection, built once and passed explicitly.

    Args:
        name: Solver name, resolved case-insensitively by
            :func:`~nlpbench.solvers.factory.create_solver`.
        plugin_path: Directories searched for ``nlpbench_plugin_<name>.py``
            modules.
        options: Solver options forwarded verbatim to the underlying library.
        log_dir: Root directory for optimization journals. ``None`` disables
            journals.
    """

    name: str = DEFAULT_SOLVER
    plugin_path: tuple[str, ...] = ()
    options: Mapping[str, Any] = field(default_factory=dict)
    log_dir: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name or not str(self.name).strip():
            raise ValueError("Solver name must be a non-empty string.")
        object.__setattr__(self, "name", str(self.name).strip())
        object.__setattr__(self, "plugin_path", tuple(str(p) for p in self.plugin_path))
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    @classmethod
    def from_env(cls, **overrides: Any) -> "SolverConfig":
        """
        Build a configuration from environment variables.

        ``NLPBENCH_SOLVER`` selects the solver (default ``scipy-slsqp``),
        ``NLPBENCH_PLUGIN_PATH`` lists plugin directories separated by
        ``os.pathsep`` and ``NLPBENCH_LOG_DIR`` enables journals. Keyword
        arguments take precedence over the environment.
        """
        plugin_path = tuple(
            p for p in os.environ.get(_PLUGIN_PATH_ENV_VAR, "").split(os.pathsep) if p
        )
        values: dict[str, Any] = {
            "name": os.environ.get(_SOLVER_ENV_VAR, DEFAULT_SOLVER),
            "plugin_path": plugin_path,
            "log_dir": os.environ.get(_LOG_DIR_ENV_VAR) or None,
        }
        values.update(overrides)
        return cls(**values)


class Solver(ABC):
    """
    Base class for solver plugins.

    A solver is bound to one problem. :meth:`minimum` runs :meth:`solve` and
    stores the outcome; :attr:`result` is :class:`NoSolution` until then.
    Subclasses only translate the problem for their library and the library's
    outcome back into a Result variant; they never modify the problem.
    """

    name: str = "solver"

    def __init__(self, problem: Problem, config: Optional[SolverConfig] = None) -> None:
        if not isinstance(problem, Problem):
            raise ValueError(f"expected a Problem, got {type(problem).__name__}")
        if problem.starting_point is None:
            raise ValueError("the problem has no starting point")
        self.problem = problem
        self.config = config if config is not None else SolverConfig(name=self.name)
        self._result: Result = NoSolution()
        self._callbacks: List[IterationCallback] = []
        self._iteration = 0

    @property
    def result(self) -> Result:
        return self._result

    @property
    def options(self) -> Mapping[str, Any]:
        return self.config.options

    def add_callback(self, callback: IterationCallback) -> None:
        """Register ``callback(iteration, x, fx)`` called once per iteration."""
        self._callbacks.append(callback)

    def notify(self, x: Optional[np.ndarray], fx: float) -> None:
        """Forward the current iterate to every registered callback."""
        self._iteration += 1
        point = None if x is None else np.array(x, dtype=float)
        for callback in self._callbacks:
            callback(self._iteration, point, float(fx))

    def minimum(self) -> Result:
        """Run the solver and return its outcome."""
        self._iteration = 0
        log.debug("Running solver %s on %s", self.name, self.problem.objective)
        try:
            result = self.solve()
        except (ArithmeticError, ValueError, np.linalg.LinAlgError) as exc:
            log.warning("Solver %s raised %s: %s", self.name, type(exc).__name__, exc)
            result = SolverError(f"{type(exc).__name__}: {exc}")
        self._result = result
        log.info("Solver %s finished: %s", self.name, result)
        return result

    @abstractmethod
    def solve(self) -> Result:
        """Solve :attr:`problem` and return a Result variant."""

    def __str__(self) -> str:
        lines = [f"Solver: {self.name}"]
        if self.options:
            lines.append(f"Options: {dict(self.options)}")
        lines.append(self.problem.describe())
        lines.append(f"Result: {self._result}")
        return "\n".join(lines)


__all__ = ["DEFAULT_SOLVER", "IterationCallback", "Solver", "SolverConfig"]
