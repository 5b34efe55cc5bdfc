"""
Outcome of a solver invocation.

A solver returns exactly one of the following frozen dataclasses:

- :class:`Solved`: converged point
- :class:`SolvedWithWarnings`: a point was produced but the solver flagged it
  (iteration limit, acceptable-level convergence, residual infeasibility)
- :class:`NoSolution`: the solver has not produced anything yet
- :class:`SolverError`: the solver failed; ``message`` carries the diagnostic
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

import numpy as np


def _frozen_array(values) -> np.ndarray:
    arr = np.array(values, dtype=float).reshape(-1)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Solved:
    """
    Converged solver outcome.

    Attributes:
        x: Solution vector of length ``n``.
        value: Objective output at ``x`` (length of the objective output).
        constraints: Stacked constraint outputs at ``x``.
        iterations: Number of solver iterations, when reported.
    """

    x: np.ndarray
    value: np.ndarray
    constraints: np.ndarray = field(default_factory=lambda: np.zeros(0))
    iterations: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", _frozen_array(self.x))
        object.__setattr__(self, "value", _frozen_array(self.value))
        object.__setattr__(self, "constraints", _frozen_array(self.constraints))

    def __str__(self) -> str:
        return (
            f"{type(self).__name__}(x={self.x.tolist()}, value={self.value.tolist()}, "
            f"iterations={self.iterations})"
        )


@dataclass(frozen=True, eq=False)
class SolvedWithWarnings(Solved):
    """Solver outcome carrying a point together with solver warnings."""

    warnings: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "warnings", tuple(str(w) for w in self.warnings))

    def __str__(self) -> str:
        base = super().__str__()
        return f"{base} warnings={list(self.warnings)}"


@dataclass(frozen=True)
class NoSolution:
    """No result is available."""

    def __str__(self) -> str:
        return "NoSolution()"


@dataclass(frozen=True)
class SolverError:
    """Solver failure with a diagnostic message."""

    message: str

    def __str__(self) -> str:
        return f"SolverError({self.message})"


Result = Union[Solved, SolvedWithWarnings, NoSolution, SolverError]


def has_solution(result: Result) -> bool:
    """Return True for the variants carrying a solution vector."""
    return isinstance(result, Solved)


__all__ = [
    "NoSolution",
    "Result",
    "Solved",
    "SolvedWithWarnings",
    "SolverError",
    "has_solution",
]
