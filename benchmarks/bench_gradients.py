"""Benchmark gradient and Jacobian evaluation on the dense and sparse backends."""

import time
from typing import Dict

import numpy as np

from nlpbench import DENSE, SPARSE, Backend
from nlpbench.scenarios import Hs071Constraints, Problem79Constraints, SphereOffset


def benchmark_jacobian(function_cls, backend: Backend, x: np.ndarray, n_runs: int = 2000) -> Dict[str, float]:
    """Time ``jacobian`` and ``value`` of one function on one backend.

    Args:
        function_cls: Function class taking a ``backend`` keyword.
        backend: Backend to build the function with.
        x: Evaluation point.
        n_runs: Number of timed evaluations.

    Returns:
        Dictionary with mean times in microseconds.
    """
    function = function_cls(backend=backend)

    # Warmup
    for _ in range(10):
        function.jacobian(x)

    start = time.perf_counter()
    for _ in range(n_runs):
        function.value(x)
    value_time = (time.perf_counter() - start) / n_runs

    start = time.perf_counter()
    for _ in range(n_runs):
        function.jacobian(x)
    jacobian_time = (time.perf_counter() - start) / n_runs

    return {
        "function": function_cls.__name__,
        "backend": backend.name,
        "value_us": value_time * 1e6,
        "jacobian_us": jacobian_time * 1e6,
    }


def main():
    """Run gradient benchmarks."""
    print("=" * 60)
    print("Jacobian Evaluation Benchmarks")
    print("=" * 60)

    cases = [
        (SphereOffset, np.array([0.3, -0.4])),
        (Problem79Constraints, np.full(5, 2.0)),
        (Hs071Constraints, np.array([1.0, 5.0, 5.0, 1.0])),
    ]

    for function_cls, x in cases:
        for backend in (DENSE, SPARSE):
            r = benchmark_jacobian(function_cls, backend, x)
            print(
                f"{r['function']:>22} {r['backend']:>6}: "
                f"value {r['value_us']:8.2f} us, jacobian {r['jacobian_us']:8.2f} us"
            )


if __name__ == "__main__":
    main()
