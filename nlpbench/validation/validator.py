"""
Check solver results against expected values.

Comparisons use relative differences. An expected value of exactly zero has
no meaningful relative difference, so it is compared in absolute terms
instead (``|actual| <= tol``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from ..core.result import NoSolution, Result, Solved, SolvedWithWarnings, SolverError
from ..logging import get_logger
from .expected import ExpectedResult, Tolerances

log = get_logger(__name__)


def relative_difference(actual: float, expected: float) -> float:
    """Return ``|actual - expected| / |expected|`` (``inf`` if expected is 0)."""
    actual = float(actual)
    expected = float(expected)
    if expected == 0.0:
        return 0.0 if actual == 0.0 else float("inf")
    return abs(actual - expected) / abs(expected)


def is_close_or_small(actual: float, expected: float, tol: float) -> bool:
    """Absolute check against ``tol`` when ``expected`` is zero, relative otherwise."""
    if not np.isfinite(actual):
        return False
    if float(expected) == 0.0:
        return abs(float(actual)) <= tol
    return relative_difference(actual, expected) <= tol


@dataclass(frozen=True)
class Check:
    """One numeric comparison."""

    name: str
    actual: float
    expected: float
    tolerance: float
    passed: bool

    def __str__(self) -> str:
        status = "ok" if self.passed else "FAILED"
        return (
            f"{self.name}: actual={self.actual!r} expected={self.expected!r} "
            f"tol={self.tolerance:g} [{status}]"
        )


@dataclass
class ValidationReport:
    """Accumulated checks and failures for one scenario run."""

    label: str
    checks: List[Check] = field(default_factory=list)
    failures: List[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.failures

    def check_close(self, name: str, actual: float, expected: float, tol: float) -> bool:
        passed = is_close_or_small(actual, expected, tol)
        check = Check(name, float(actual), float(expected), float(tol), passed)
        self.checks.append(check)
        if not passed:
            self.fail(str(check))
        return passed

    def fail(self, message: str) -> None:
        log.warning("[%s] %s", self.label, message)
        self.failures.append(message)

    def raise_if_failed(self) -> None:
        """
        Raise if any check failed.

        Raises:
            AssertionError: Listing every failure with actual and expected values.
        """
        if self.failures:
            details = "\n  ".join(self.failures)
            raise AssertionError(f"Validation of {self.label!r} failed:\n  {details}")

    def __str__(self) -> str:
        status = "passed" if self.passed else f"{len(self.failures)} failure(s)"
        lines = [f"{self.label}: {status} ({len(self.checks)} checks)"]
        lines.extend(f"  {message}" for message in self.failures)
        return "\n".join(lines)


def validate_result(
    result: Result,
    expected: ExpectedResult,
    tolerances: Tolerances,
    report: Optional[ValidationReport] = None,
) -> ValidationReport:
    """
    Compare ``result`` with ``expected``.

    ``Solved`` and ``SolvedWithWarnings`` are checked component by component
    and on the objective value. ``NoSolution`` and ``SolverError`` are
    recorded as failures carrying their diagnostic.

    Raises:
        TypeError: If ``result`` is not a Result variant.
    """
    if report is None:
        report = ValidationReport("result")

    if isinstance(result, Solved):
        if isinstance(result, SolvedWithWarnings):
            for warning in result.warnings:
                log.warning("[%s] solver warning: %s", report.label, warning)
        if result.x.shape != expected.x.shape:
            report.fail(
                f"solution has size {result.x.size}, expected {expected.x.size}"
            )
        else:
            for i, (actual, target) in enumerate(zip(result.x, expected.x)):
                report.check_close(f"x[{i}]", actual, target, tolerances.x)
        if result.value.size == 0:
            report.fail("result carries no objective value")
        else:
            report.check_close("f(x)", result.value[0], expected.fx, tolerances.f)
    elif isinstance(result, NoSolution):
        report.fail("a solution should have been found: solver returned no solution")
    elif isinstance(result, SolverError):
        report.fail(f"a solution should have been found: {result.message}")
    else:
        raise TypeError(f"unexpected result type {type(result).__name__}")
    return report


__all__ = [
    "Check",
    "ValidationReport",
    "is_close_or_small",
    "relative_difference",
    "validate_result",
]
