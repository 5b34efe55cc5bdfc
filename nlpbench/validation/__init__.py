"""Expected results and the result validator."""

from .expected import ExpectedResult, Tolerances
from .validator import Check, ValidationReport, is_close_or_small, relative_difference, validate_result

__all__ = [
    "Check",
    "ExpectedResult",
    "Tolerances",
    "ValidationReport",
    "is_close_or_small",
    "relative_difference",
    "validate_result",
]
