"""Smoke tests for example scripts.

These tests ensure that the example scripts run their main execution paths
without raising exceptions.
"""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

# Determine the repo root
ROOT = Path(__file__).resolve().parents[1]


def _run(script: Path) -> subprocess.CompletedProcess:
    assert script.exists(), f"Example script not found: {script}"
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(ROOT), env.get("PYTHONPATH")]))
    env.pop("NLPBENCH_SOLVER", None)
    return subprocess.run(
        [sys.executable, str(script)],
        capture_output=True,
        text=True,
        check=False,
        timeout=120,
        env=env,
    )


def test_run_scenarios_example_runs() -> None:
    """Test that examples/run_scenarios.py validates every scenario."""
    result = _run(ROOT / "examples" / "run_scenarios.py")

    assert result.returncode == 0, (
        f"Example script failed with return code {result.returncode}.\n"
        f"STDOUT:\n{result.stdout}\n"
        f"STDERR:\n{result.stderr}"
    )
    assert "All scenarios passed" in result.stdout


def test_custom_function_example_runs() -> None:
    """Test that examples/custom_function.py runs successfully."""
    result = _run(ROOT / "examples" / "custom_function.py")

    assert result.returncode == 0, (
        f"Example script failed with return code {result.returncode}.\n"
        f"STDOUT:\n{result.stdout}\n"
        f"STDERR:\n{result.stderr}"
    )
    assert "Gradient matches finite differences: True" in result.stdout
