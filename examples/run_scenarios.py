"""
Example: validate a solver against the built-in benchmark scenarios

Every registered scenario is built with the dense and the sparse backend,
solved with the solver selected by NLPBENCH_SOLVER (SLSQP by default) and
checked against its expected solution.
"""

import sys

from nlpbench import DENSE, SCENARIOS, SPARSE, SolverConfig, run_scenarios


def main() -> int:
    config = SolverConfig.from_env()
    print(f"Solver: {config.name}")
    failed = 0
    for backend in (DENSE, SPARSE):
        print("=" * 60)
        print(f"Backend: {backend.name}")
        print("=" * 60)
        for report in run_scenarios(SCENARIOS.values(), config, backend):
            print(report)
            failed += 0 if report.passed else 1
    print()
    print("All scenarios passed" if failed == 0 else f"{failed} scenario run(s) failed")
    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
