"""
Constrained optimization problems.

A :class:`Problem` bundles an objective with interval constraints, variable
bounds and a starting point::

    minimize    f(x)
    subject to  lo_k <= g_k(x) <= hi_k   for every constraint row k
                lb_i <= x_i <= ub_i

Intervals are closed; ``-inf`` / ``inf`` mark an unbounded side and
``make_interval(a, a)`` expresses an equality. Problems hold data only and are
read-only from a solver's point of view.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence, Union

import numpy as np

from .backend import Array
from .function import DifferentiableFunction


@dataclass(frozen=True)
class Interval:
    """Closed interval ``[lower, upper]``; either side may be infinite."""

    lower: float = -np.inf
    upper: float = np.inf

    def __post_init__(self) -> None:
        lower = float(self.lower)
        upper = float(self.upper)
        if np.isnan(lower) or np.isnan(upper):
            raise ValueError("interval bounds must not be NaN")
        if lower > upper:
            raise ValueError(f"interval lower bound {lower} exceeds upper bound {upper}")
        object.__setattr__(self, "lower", lower)
        object.__setattr__(self, "upper", upper)

    @property
    def is_equality(self) -> bool:
        return self.lower == self.upper

    @property
    def is_bounded(self) -> bool:
        return np.isfinite(self.lower) or np.isfinite(self.upper)

    def distance(self, value: float) -> float:
        """Return how far ``value`` lies outside the interval (0 inside)."""
        if value < self.lower:
            return float(self.lower - value)
        if value > self.upper:
            return float(value - self.upper)
        return 0.0

    def contains(self, value: float, tol: float = 0.0) -> bool:
        return self.distance(value) <= tol

    def __str__(self) -> str:
        return f"[{self.lower}, {self.upper}]"


def make_interval(lower: float, upper: float) -> Interval:
    return Interval(lower, upper)


def make_lower_interval(lower: float) -> Interval:
    """Interval ``[lower, +inf)``."""
    return Interval(lower, np.inf)


def make_upper_interval(upper: float) -> Interval:
    """Interval ``(-inf, upper]``."""
    return Interval(-np.inf, upper)


def make_infinite_interval() -> Interval:
    return Interval(-np.inf, np.inf)


@dataclass(frozen=True)
class ConstraintEntry:
    """A constraint function with one interval and one scale per output row."""

    function: DifferentiableFunction
    intervals: tuple[Interval, ...]
    scales: tuple[float, ...]

    def __post_init__(self) -> None:
        m = self.function.output_size
        if len(self.intervals) != m:
            raise ValueError(
                f"constraint {self.function.name!r} has {m} outputs but "
                f"{len(self.intervals)} intervals were given"
            )
        if len(self.scales) != m:
            raise ValueError(
                f"constraint {self.function.name!r} has {m} outputs but "
                f"{len(self.scales)} scales were given"
            )
        for scale in self.scales:
            if not np.isfinite(scale) or scale <= 0.0:
                raise ValueError(f"constraint scales must be positive, got {scale}")

    @property
    def lower(self) -> Array:
        return np.array([interval.lower for interval in self.intervals], dtype=float)

    @property
    def upper(self) -> Array:
        return np.array([interval.upper for interval in self.intervals], dtype=float)


IntervalsLike = Union[Interval, Sequence[Interval]]


class Problem:
    """
    Objective, constraints, variable bounds and starting point.

    Args:
        objective: Function to minimize. Solvers expect a scalar output.
    """

    def __init__(self, objective: DifferentiableFunction) -> None:
        if not isinstance(objective, DifferentiableFunction):
            raise ValueError(
                "the objective must be a DifferentiableFunction, "
                f"got {type(objective).__name__}"
            )
        self._objective = objective
        n = objective.input_size
        self._constraints: list[ConstraintEntry] = []
        self._argument_bounds = [make_infinite_interval() for _ in range(n)]
        self._argument_scales = [1.0] * n
        self._starting_point: Optional[Array] = None

    @property
    def objective(self) -> DifferentiableFunction:
        return self._objective

    @property
    def input_size(self) -> int:
        return self._objective.input_size

    @property
    def backend(self):
        return self._objective.backend

    @property
    def constraints(self) -> tuple[ConstraintEntry, ...]:
        return tuple(self._constraints)

    @property
    def constraint_size(self) -> int:
        """Total number of constraint rows."""
        return sum(entry.function.output_size for entry in self._constraints)

    @property
    def argument_bounds(self) -> tuple[Interval, ...]:
        return tuple(self._argument_bounds)

    @property
    def argument_scales(self) -> tuple[float, ...]:
        return tuple(self._argument_scales)

    @property
    def starting_point(self) -> Optional[Array]:
        if self._starting_point is None:
            return None
        return self._starting_point.copy()

    def add_constraint(
        self,
        function: DifferentiableFunction,
        intervals: Optional[IntervalsLike] = None,
        scales: Optional[Iterable[float]] = None,
    ) -> ConstraintEntry:
        """
        Append a constraint ``intervals[k] contains function(x)[k]``.

        Args:
            function: Constraint function on the same variables as the objective.
            intervals: One interval per output row. A single ``Interval`` is
                accepted for scalar functions; ``None`` means unbounded.
            scales: Positive scale factor per output row (default 1.0).

        Raises:
            ValueError: If dimensions, backends or counts disagree.
        """
        if not isinstance(function, DifferentiableFunction):
            raise ValueError(
                "constraints must be DifferentiableFunction instances, "
                f"got {type(function).__name__}"
            )
        if function.input_size != self.input_size:
            raise ValueError(
                f"constraint {function.name!r} takes {function.input_size} "
                f"variables, objective takes {self.input_size}"
            )
        if function.backend is not self.backend:
            raise ValueError(
                f"constraint {function.name!r} uses the {function.backend.name} "
                f"backend, objective uses {self.backend.name}"
            )
        m = function.output_size
        if intervals is None:
            interval_tuple = tuple(make_infinite_interval() for _ in range(m))
        elif isinstance(intervals, Interval):
            interval_tuple = (intervals,)
        else:
            interval_tuple = tuple(intervals)
        if scales is None:
            scale_tuple = tuple(1.0 for _ in range(m))
        else:
            scale_tuple = tuple(float(scale) for scale in scales)
        entry = ConstraintEntry(function, interval_tuple, scale_tuple)
        self._constraints.append(entry)
        return entry

    def _check_index(self, index: int) -> int:
        if not 0 <= index < self.input_size:
            raise IndexError(
                f"variable index {index} out of range [0, {self.input_size})"
            )
        return int(index)

    def set_variable_bounds(self, index: int, interval: Interval) -> None:
        """Restrict variable ``index`` to ``interval``."""
        if not isinstance(interval, Interval):
            raise ValueError(f"expected an Interval, got {type(interval).__name__}")
        self._argument_bounds[self._check_index(index)] = interval

    def set_variable_scale(self, index: int, scale: float) -> None:
        scale = float(scale)
        if not np.isfinite(scale) or scale <= 0.0:
            raise ValueError(f"variable scales must be positive, got {scale}")
        self._argument_scales[self._check_index(index)] = scale

    def set_starting_point(self, x: Any) -> None:
        """
        Set the point the solver starts from.

        Raises:
            ValueError: If ``x`` does not have ``input_size`` entries.
        """
        arr = np.asarray(x, dtype=float)
        if arr.ndim != 1 or arr.shape[0] != self.input_size:
            raise ValueError(
                f"starting point must have shape ({self.input_size},), got {arr.shape}"
            )
        self._starting_point = arr.copy()

    def lower_bounds(self) -> Array:
        return np.array([b.lower for b in self._argument_bounds], dtype=float)

    def upper_bounds(self) -> Array:
        return np.array([b.upper for b in self._argument_bounds], dtype=float)

    def constraint_values(self, x: Any) -> Array:
        """Return the stacked outputs of every constraint at ``x``."""
        arr = self._objective.check_argument(x)
        if not self._constraints:
            return np.zeros(0, dtype=float)
        return np.concatenate([entry.function(arr) for entry in self._constraints])

    def constraint_violation(self, x: Any) -> float:
        """Largest distance of a variable or constraint row outside its interval."""
        arr = self._objective.check_argument(x)
        worst = 0.0
        for value, interval in zip(arr, self._argument_bounds):
            worst = max(worst, interval.distance(value))
        for entry in self._constraints:
            for value, interval in zip(entry.function(arr), entry.intervals):
                worst = max(worst, interval.distance(value))
        return worst

    def describe(self) -> str:
        """Return a multi-line human-readable summary."""
        lines = [f"Problem: minimize {self._objective}"]
        if self._constraints:
            lines.append("Constraints:")
            for entry in self._constraints:
                bounds = ", ".join(str(interval) for interval in entry.intervals)
                scales = ", ".join(f"{scale:g}" for scale in entry.scales)
                lines.append(f"  {entry.function} in {bounds} (scales: {scales})")
        bounded = [
            f"x[{i}] in {interval}"
            for i, interval in enumerate(self._argument_bounds)
            if interval.is_bounded
        ]
        if bounded:
            lines.append("Argument bounds: " + ", ".join(bounded))
        if self._starting_point is not None:
            lines.append(f"Starting point: {self._starting_point.tolist()}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.describe()


__all__ = [
    "ConstraintEntry",
    "Interval",
    "Problem",
    "make_infinite_interval",
    "make_interval",
    "make_lower_interval",
    "make_upper_interval",
]
