"""On-disk journal of one solver run."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np

from ..logging import get_logger
from ..solvers.base import Solver

log = get_logger(__name__)

JOURNAL_FILENAME = "journal.log"


class OptimizationLogger:
    """
    Record the iterates of a solver and write them to ``<path>/journal.log``.

    The logger registers a callback on the solver when it is created. The
    journal (problem description, one line per iteration and the final
    result) is written by :meth:`close`, which also runs when leaving a
    ``with`` block.

    Parameters
    ----------
    solver : Solver
        Solver whose iterations are recorded.
    path : str or Path
        Output directory. Missing directories are created.

    Example
    -------
    >>> with OptimizationLogger(solver, "/tmp/nlpbench/scipy-slsqp/problem"):
    ...     solver.minimum()
    """

    def __init__(self, solver: Solver, path: Union[str, Path]) -> None:
        self.solver = solver
        self.path = Path(path)
        self.iterations: List[Tuple[int, Optional[np.ndarray], float]] = []
        self._closed = False
        solver.add_callback(self._record)

    @property
    def journal_file(self) -> Path:
        return self.path / JOURNAL_FILENAME

    def _record(self, iteration: int, x: Optional[np.ndarray], fx: float) -> None:
        if not self._closed:
            self.iterations.append((iteration, x, fx))

    def render(self) -> str:
        lines = [str(self.solver), "", "Iterations:"]
        for iteration, x, fx in self.iterations:
            point = "-" if x is None else np.array2string(x, precision=10, separator=", ")
            lines.append(f"  {iteration:5d}  f(x)={fx:.12g}  x={point}")
        lines.append("")
        lines.append(f"Result: {self.solver.result}")
        return "\n".join(lines) + "\n"

    def close(self) -> Path:
        """Write the journal and stop recording. Returns the journal path."""
        if not self._closed:
            self.path.mkdir(parents=True, exist_ok=True)
            self.journal_file.write_text(self.render(), encoding="utf-8")
            self._closed = True
            log.debug("Wrote optimization journal %s", self.journal_file)
        return self.journal_file

    def __enter__(self) -> "OptimizationLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["JOURNAL_FILENAME", "OptimizationLogger"]
