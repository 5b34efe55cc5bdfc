"""Tests for the result validator."""

import logging

import numpy as np
import pytest

from nlpbench.core import NoSolution, Solved, SolvedWithWarnings, SolverError
from nlpbench.validation import (
    ExpectedResult,
    Tolerances,
    ValidationReport,
    is_close_or_small,
    relative_difference,
    validate_result,
)

EXPECTED = ExpectedResult(f0=4.01, x=[-1.0, 1.0, 0.0], fx=0.04)
TOLERANCES = Tolerances(f0=1e-4, x=1e-4, f=1e-4)


def test_relative_difference() -> None:
    assert relative_difference(1.01, 1.0) == pytest.approx(0.01)
    assert relative_difference(-2.2, -2.0) == pytest.approx(0.1)
    assert relative_difference(0.0, 0.0) == 0.0
    assert relative_difference(1e-9, 0.0) == float("inf")


def test_is_close_or_small() -> None:
    assert is_close_or_small(1.00005, 1.0, 1e-4)
    assert not is_close_or_small(1.0002, 1.0, 1e-4)
    # Zero expectations compare absolutely
    assert is_close_or_small(5e-5, 0.0, 1e-4)
    assert not is_close_or_small(2e-4, 0.0, 1e-4)
    assert not is_close_or_small(np.nan, 1.0, 1e-4)


def test_solved_within_tolerance_passes() -> None:
    result = Solved([-1.00001, 1.00001, 1e-6], [0.040001])
    report = validate_result(result, EXPECTED, TOLERANCES, ValidationReport("p27"))
    assert report.passed
    assert [check.name for check in report.checks] == ["x[0]", "x[1]", "x[2]", "f(x)"]
    report.raise_if_failed()


def test_tolerance_violation_reports_actual_and_expected() -> None:
    result = Solved([-1.1, 1.0, 0.0], [0.04])
    report = validate_result(result, EXPECTED, TOLERANCES, ValidationReport("p27"))
    assert not report.passed
    assert len(report.failures) == 1
    assert "x[0]" in report.failures[0]
    with pytest.raises(AssertionError, match=r"actual=-1\.1 expected=-1\.0"):
        report.raise_if_failed()


def test_objective_violation_fails() -> None:
    report = validate_result(Solved([-1.0, 1.0, 0.0], [0.05]), EXPECTED, TOLERANCES)
    assert not report.passed
    assert "f(x)" in report.failures[0]


def test_solved_with_warnings_is_validated() -> None:
    result = SolvedWithWarnings([-1.0, 1.0, 0.0], [0.04], warnings=("iteration limit",))
    report = validate_result(result, EXPECTED, TOLERANCES)
    assert report.passed


def test_size_mismatch_fails() -> None:
    report = validate_result(Solved([-1.0, 1.0], [0.04]), EXPECTED, TOLERANCES)
    assert not report.passed
    assert "size" in report.failures[0]


@pytest.mark.parametrize(
    "result,fragment",
    [
        (NoSolution(), "no solution"),
        (SolverError("Singular matrix"), "Singular matrix"),
    ],
)
def test_missing_solution_is_a_failure(result, fragment) -> None:
    """NoSolution and SolverError never count as success."""
    report = validate_result(result, EXPECTED, TOLERANCES, ValidationReport("scenario"))
    assert not report.passed
    assert report.checks == []
    assert fragment in report.failures[0]
    with pytest.raises(AssertionError, match=fragment):
        report.raise_if_failed()


def test_unknown_result_type_raises() -> None:
    with pytest.raises(TypeError):
        validate_result("solved", EXPECTED, TOLERANCES)


def test_report_accumulates() -> None:
    report = ValidationReport("scenario")
    assert report.check_close("f(x0)", 4.01, 4.01, 1e-6)
    validate_result(NoSolution(), EXPECTED, TOLERANCES, report)
    assert len(report.checks) == 1
    assert len(report.failures) == 1
    assert "scenario: 1 failure(s)" in str(report)


def test_failures_are_logged() -> None:
    import io
    import sys

    from nlpbench.logging import configure_logging, get_logger

    # Make sure the validator logger exists before reconfiguring handlers
    get_logger("nlpbench.validation.validator")
    stream = io.StringIO()
    configure_logging(level=logging.WARNING, stream=stream)
    try:
        validate_result(SolverError("diverged"), EXPECTED, TOLERANCES, ValidationReport("p27"))
        assert "diverged" in stream.getvalue()
        assert "[p27]" in stream.getvalue()
    finally:
        configure_logging(level=logging.WARNING, stream=sys.__stderr__)
