"""
Example: define a differentiable function and benchmark it

Defines the Rosenbrock function with an analytic gradient, checks the
gradient against finite differences, wraps it in a constrained problem
and validates the solver result with an ad-hoc expected result.
"""

import numpy as np

from nlpbench import (
    DifferentiableFunction,
    ExpectedResult,
    Problem,
    SolverConfig,
    Tolerances,
    ValidationReport,
    check_gradient,
    create_solver,
    make_upper_interval,
    validate_result,
)


class Rosenbrock(DifferentiableFunction):
    def __init__(self, backend=None):
        super().__init__(2, 1, "(1 - x)² + 100 (y - x²)²", backend=backend)

    def impl_compute(self, result, x):
        result[0] = (1.0 - x[0]) ** 2 + 100.0 * (x[1] - x[0] ** 2) ** 2

    def impl_gradient(self, grad, x, function_id):
        grad[0] = -2.0 * (1.0 - x[0]) - 400.0 * x[0] * (x[1] - x[0] ** 2)
        grad[1] = 200.0 * (x[1] - x[0] ** 2)


class DiskConstraint(DifferentiableFunction):
    def __init__(self, backend=None):
        super().__init__(2, 1, "x² + y²", backend=backend)

    def impl_compute(self, result, x):
        result[0] = x[0] ** 2 + x[1] ** 2

    def impl_gradient(self, grad, x, function_id):
        grad[0] = 2.0 * x[0]
        grad[1] = 2.0 * x[1]


def main():
    objective = Rosenbrock()
    x0 = np.array([-1.2, 1.0])
    print(f"Objective: {objective}")
    print(f"Gradient matches finite differences: {check_gradient(objective, x0)}")

    problem = Problem(objective)
    problem.add_constraint(DiskConstraint(), make_upper_interval(2.0))
    problem.set_starting_point(x0)
    print(problem)

    solver = create_solver(problem, SolverConfig(name="scipy-slsqp"))
    result = solver.minimum()
    print(f"Result: {result}")

    report = validate_result(
        result,
        ExpectedResult(f0=24.2, x=[1.0, 1.0], fx=0.0),
        Tolerances(x=1e-3, f=1e-6),
        ValidationReport("rosenbrock"),
    )
    print(report)


if __name__ == "__main__":
    main()
