"""nlpbench - differentiable functions and expected-result validation for constrained NLP solvers."""

__version__ = "0.1.0"

# Core abstractions
from .core import (
    DENSE,
    SPARSE,
    Backend,
    ConstraintEntry,
    DifferentiableFunction,
    Function,
    Interval,
    NoSolution,
    Problem,
    Result,
    Solved,
    SolvedWithWarnings,
    SolverError,
    SumOfSquares,
    TwiceDifferentiableFunction,
    backend,
    default_backend,
    has_hessian,
    has_solution,
    make_infinite_interval,
    make_interval,
    make_lower_interval,
    make_upper_interval,
    to_dense,
)

# Diagnostics
from .diagnostics import (
    OptimizationLogger,
    approx_gradient,
    approx_hessian,
    approx_jacobian,
    assert_gradient,
    check_gradient,
    check_hessian,
)

# Logging
from .logging import configure_logging, get_logger, set_log_level

# Scenarios
from .scenarios import SCENARIOS, Scenario, get_scenario, register_scenario, run_scenario, run_scenarios

# Solver boundary
from .solvers import (
    DEFAULT_SOLVER,
    Solver,
    SolverConfig,
    available_solvers,
    create_solver,
    register_solver,
)

# Validation
from .validation import (
    ExpectedResult,
    Tolerances,
    ValidationReport,
    is_close_or_small,
    relative_difference,
    validate_result,
)

__all__ = [
    "__version__",
    # Core
    "Backend",
    "ConstraintEntry",
    "DENSE",
    "DifferentiableFunction",
    "Function",
    "Interval",
    "NoSolution",
    "Problem",
    "Result",
    "SPARSE",
    "Solved",
    "SolvedWithWarnings",
    "SolverError",
    "SumOfSquares",
    "TwiceDifferentiableFunction",
    "backend",
    "default_backend",
    "has_hessian",
    "has_solution",
    "make_infinite_interval",
    "make_interval",
    "make_lower_interval",
    "make_upper_interval",
    "to_dense",
    # Diagnostics
    "OptimizationLogger",
    "approx_gradient",
    "approx_hessian",
    "approx_jacobian",
    "assert_gradient",
    "check_gradient",
    "check_hessian",
    # Logging
    "configure_logging",
    "get_logger",
    "set_log_level",
    # Scenarios
    "SCENARIOS",
    "Scenario",
    "get_scenario",
    "register_scenario",
    "run_scenario",
    "run_scenarios",
    # Solvers
    "DEFAULT_SOLVER",
    "Solver",
    "SolverConfig",
    "available_solvers",
    "create_solver",
    "register_solver",
    # Validation
    "ExpectedResult",
    "Tolerances",
    "ValidationReport",
    "is_close_or_small",
    "relative_difference",
    "validate_result",
]
