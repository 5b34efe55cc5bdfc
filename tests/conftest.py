"""Pytest configuration and shared fixtures for nlpbench tests.

This module provides:
- A deterministic numpy RNG for sampling evaluation points
- The session solver configuration, built once from the environment
- A backend fixture running a test once per backend
"""

import os

import numpy as np
import pytest

from nlpbench.core import DENSE, SPARSE, Backend
from nlpbench.solvers import SolverConfig


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.
    
    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    This ensures tests are reproducible while allowing override for debugging.
    
    Returns:
        A seeded numpy.random.Generator instance.
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(scope="session")
def solver_config() -> SolverConfig:
    """Solver configuration shared by every scenario test.

    Built once per session from NLPBENCH_SOLVER, NLPBENCH_PLUGIN_PATH and
    NLPBENCH_LOG_DIR. Tests never mutate it.
    """
    return SolverConfig.from_env()


@pytest.fixture(params=[DENSE, SPARSE], ids=["dense", "sparse"])
def backend(request) -> Backend:
    """Run the requesting test once with each backend."""
    return request.param
