"""Golden data and tolerances attached to a benchmark scenario."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np


def _vector(values: Any) -> np.ndarray:
    arr = np.array(values, dtype=float).reshape(-1)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class ExpectedResult:
    """
    Literal values a solver run is checked against.

    Attributes:
        f0: Objective value at the starting point.
        x: Expected solution vector.
        fx: Expected optimal objective value.
        x0: Starting point, when the scenario records it alongside the
            expected values.
    """

    f0: float
    x: np.ndarray
    fx: float
    x0: Optional[np.ndarray] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "f0", float(self.f0))
        object.__setattr__(self, "fx", float(self.fx))
        object.__setattr__(self, "x", _vector(self.x))
        if self.x0 is not None:
            object.__setattr__(self, "x0", _vector(self.x0))


@dataclass(frozen=True)
class Tolerances:
    """Relative tolerances for the starting value, the solution and the optimum."""

    f0: float = 1e-6
    x: float = 1e-4
    f: float = 1e-4

    def __post_init__(self) -> None:
        for label in ("f0", "x", "f"):
            value = getattr(self, label)
            if not value > 0.0:
                raise ValueError(f"tolerance {label} must be positive, got {value}")


__all__ = ["ExpectedResult", "Tolerances"]
