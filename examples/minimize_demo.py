"""
Example: Minimizing a run-file objective with every solver

Loads ``data.json`` (or the run file given on the command line), runs the
configured solvers on its objective and prints the minimum each one found.
A second section minimizes the same function with a torch autograd gradient
and compares the finite-difference and autograd Hessians at the solution.
"""

import sys
from pathlib import Path

import numpy as np
import torch

from descent import (
    GradientDescentConfig,
    Problem,
    autograd_gradient,
    autograd_hessian,
    hessian,
    load_run_file,
    print_result,
    run,
    run_all,
    torch_objective,
)

HERE = Path(__file__).resolve().parent


def example_run_file(path: Path):
    """Example: every solver listed in a JSON run file."""
    print("=" * 60)
    print(f"Example 1: Solvers from {path.name}")
    print("=" * 60)

    spec = load_run_file(str(path))
    results = run_all(spec.solvers, spec.problem, spec.x0, n_jobs=-1)
    for result in results:
        print_result(result)


def example_autograd():
    """Example: exact gradient from torch instead of an expression."""
    print("=" * 60)
    print("Example 2: Autograd gradient and Hessian")
    print("=" * 60)

    def quartic(x: torch.Tensor) -> torch.Tensor:
        return 4 * x[0] ** 4 + 2 * x[1] ** 2 + 2 * x[0] * x[1] + 2 * x[0]

    problem = Problem(fun=torch_objective(quartic), grad=autograd_gradient(quartic), dim=2)
    result = run(GradientDescentConfig(minimum_step=1e-4), problem, np.zeros(2))
    print_result(result)

    exact = autograd_hessian(quartic)(result.x)
    approx = hessian(problem.fun, h=1e-3)(result.x)
    print(f"Autograd Hessian:\n{exact}")
    print(f"Finite-difference Hessian:\n{approx}")
    print(f"Max abs difference: {np.max(np.abs(exact - approx)):.2e}")
    print()


if __name__ == "__main__":
    run_file = Path(sys.argv[1]) if len(sys.argv) > 1 else HERE / "data.json"
    example_run_file(run_file)
    example_autograd()
