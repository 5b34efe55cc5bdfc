"""Tests for the Result variants."""

import dataclasses

import numpy as np
import pytest

from nlpbench.core import NoSolution, Solved, SolvedWithWarnings, SolverError, has_solution


def test_solved_arrays_are_read_only() -> None:
    x = np.array([1.0, 2.0])
    result = Solved(x, [3.0])
    x[0] = 100.0
    assert result.x[0] == 1.0
    with pytest.raises(ValueError):
        result.x[0] = 5.0
    assert result.constraints.shape == (0,)
    assert result.iterations == 0


def test_variants_are_frozen() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        SolverError("boom").message = "other"
    with pytest.raises(dataclasses.FrozenInstanceError):
        Solved([1.0], [1.0]).iterations = 3


def test_solved_with_warnings() -> None:
    result = SolvedWithWarnings([1.0], [2.0], warnings=["iteration limit"])
    assert isinstance(result, Solved)
    assert result.warnings == ("iteration limit",)
    assert "iteration limit" in str(result)


def test_has_solution() -> None:
    assert has_solution(Solved([1.0], [1.0]))
    assert has_solution(SolvedWithWarnings([1.0], [1.0]))
    assert not has_solution(NoSolution())
    assert not has_solution(SolverError("failed"))


def test_string_forms() -> None:
    assert str(NoSolution()) == "NoSolution()"
    assert "failed" in str(SolverError("failed"))
    assert "x=[1.0]" in str(Solved([1.0], [2.0]))
