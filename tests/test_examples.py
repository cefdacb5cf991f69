"""Smoke tests for example scripts.

These tests ensure that the example scripts run their main execution paths
without raising exceptions.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def test_minimize_demo_runs() -> None:
    """Test that examples/minimize_demo.py runs successfully."""
    script = ROOT / "examples" / "minimize_demo.py"
    assert script.exists(), f"Example script not found: {script}"

    result = subprocess.run(
        [sys.executable, str(script)],
        capture_output=True,
        text=True,
        check=False,
        timeout=60,
    )

    assert result.returncode == 0, (
        f"Example script failed with return code {result.returncode}.\n"
        f"STDOUT:\n{result.stdout}\n"
        f"STDERR:\n{result.stderr}"
    )
    assert result.stdout.count("Computed minimum") == 5
    for method in ("gradient_descent[armijo]", "heavy_ball[", "nesterov[", "adam[dynamic]"):
        assert method in result.stdout


def test_example_run_file_is_valid() -> None:
    from descent.io import load_run_file

    spec = load_run_file(str(ROOT / "examples" / "data.json"))
    assert len(spec.solvers) == 4
    assert spec.problem.grad is not None
