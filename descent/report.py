"""Human-readable and plotted views of solver results."""

from __future__ import annotations

import sys
from typing import IO, Any, Callable, Dict, Optional, Sequence

import numpy as np

from descent.optimize import OptimizeResult

try:
    from matplotlib import pyplot as plt
    from matplotlib.axes import Axes
    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False
    if False:
        from matplotlib.axes import Axes


def _format_point(x: np.ndarray) -> str:
    return "(" + ",".join(f"{value:g}" for value in np.asarray(x, dtype=float)) + ")"


def result_summary(result: OptimizeResult) -> Dict[str, Any]:
    """
    Collect the fields of a result into a plain dictionary.

    Parameters
    ----------
    result:
        Result returned by any solver.

    Returns
    -------
    Dict[str, Any]
        Keys ``method``, ``status``, ``success``, ``nit``, ``x`` (list),
        ``fun``, ``grad_norm``, ``nfev`` and ``njev``.
    """
    return {
        "method": result.method,
        "status": result.status.name,
        "success": result.success,
        "nit": result.nit,
        "x": [float(v) for v in result.x],
        "fun": float(result.fun),
        "grad_norm": float(result.grad_norm),
        "nfev": result.nfev,
        "njev": result.njev,
    }


def print_result(result: OptimizeResult, file: Optional[IO[str]] = None) -> None:
    """
    Print the computed minimum, the objective and the gradient norm there.

    Uses print() on purpose; use result_summary() for programmatic access.

    Parameters
    ----------
    result:
        Result to report.
    file:
        File-like object to write to. If None, writes to sys.stdout.
    """
    if file is None:
        file = sys.stdout

    point = _format_point(result.x)
    if result.method:
        print(result.method, file=file)
    print(result.message, file=file)
    print(f"Computed minimum: {point}", file=file)
    print(f"f {point} = {result.fun:g}", file=file)
    print(f"|| grad_f {point} || = {result.grad_norm:g}", file=file)
    print(file=file)


def plot_convergence(
    results: Sequence[OptimizeResult],
    fun: Callable[[np.ndarray], float],
    ax: Optional["Axes"] = None,
    log_scale: bool = False,
) -> "Axes":
    """
    Plot the objective value along each result's recorded iterates.

    Parameters
    ----------
    results:
        Results produced with ``history=True``.
    fun:
        Objective to evaluate on the iterates.
    ax:
        Axes to draw on. If None, a new figure is created.
    log_scale:
        Use a logarithmic y axis; values are shifted to be positive first.

    Returns
    -------
    Axes
        The axes drawn on.

    Raises
    ------
    RuntimeError
        If matplotlib is not installed.
    ValueError
        If a result carries no history.
    """
    if not HAS_MATPLOTLIB:
        raise RuntimeError(
            "matplotlib required for plotting; install with pip install matplotlib"
        )
    for result in results:
        if not result.history:
            raise ValueError(
                f"Result '{result.method}' has no history; run the solver with history=True"
            )

    if ax is None:
        _, ax = plt.subplots(figsize=(6, 4))

    curves = [np.array([fun(x) for x in result.history]) for result in results]
    if log_scale:
        floor = min(curve.min() for curve in curves)
        curves = [curve - floor + 1e-16 for curve in curves]
        ax.set_yscale("log")

    for result, curve in zip(results, curves):
        ax.plot(np.arange(len(curve)), curve, label=result.method or "solver")

    ax.set_xlabel("Iteration", fontsize=11)
    ax.set_ylabel("f(x)", fontsize=11)
    ax.grid(True, alpha=0.3)
    ax.legend()
    return ax


__all__ = ["HAS_MATPLOTLIB", "plot_convergence", "print_result", "result_summary"]
