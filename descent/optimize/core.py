"""Problem/result containers and the convergence loop shared by all solvers.

Every solver in this package is a thin configuration layer around
:func:`descent_loop`. The loop owns the iteration counter and the two
stopping tests; a solver only supplies an ``advance`` callable that turns the
current point and its gradient into the next point plus a step-length metric:

* residual test: ``||grad f(x)|| < tolerance_r`` -> ``CONVERGED_RESIDUAL``
* step test: ``metric < tolerance_s`` -> ``CONVERGED_STEP``
* ``max_iterations`` passes without either -> ``EXHAUSTED_ITERATIONS``
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

import numpy as np

from descent.finite_diff import DifferenceType, Gradient, Objective
from descent.finite_diff import gradient as fd_gradient
from descent.logging import get_logger
from descent.vector_ops import norm

Array = np.ndarray
Advance = Callable[[Array, Array, float, int], "Step"]
Callback = Callable[[Array, int, float], None]

logger = get_logger(__name__)


class Status(Enum):
    """Terminal state of a solver run."""

    CONVERGED_RESIDUAL = "converged_residual"
    CONVERGED_STEP = "converged_step"
    EXHAUSTED_ITERATIONS = "exhausted_iterations"


_MESSAGES = {
    Status.CONVERGED_RESIDUAL: "Converged in {nit} iterations thanks to residual criterion.",
    Status.CONVERGED_STEP: "Converged in {nit} iterations thanks to step size criterion.",
    Status.EXHAUSTED_ITERATIONS: "Not converged (max_iterations = {nit}).",
}


@dataclass(frozen=True)
class Problem:
    """Objective plus the gradient provider used by the solvers.

    When ``grad`` is omitted a finite-difference gradient is built from
    ``fun`` with scheme ``difference`` and step ``h``. ``dim``, if given, is
    checked against the starting point before any iteration runs.
    """

    fun: Objective
    grad: Optional[Gradient] = None
    dim: Optional[int] = None
    difference: DifferenceType = DifferenceType.CENTERED
    h: float = 1e-2

    def gradient(self) -> Gradient:
        if self.grad is not None:
            return self.grad
        return fd_gradient(self.fun, self.h, self.difference)


@dataclass
class Step:
    """Outcome of one position update."""

    x: Array
    step_length: float
    alpha: float


@dataclass
class OptimizeResult:
    """Result object returned by every solver.

    Attributes:
        x: Final iterate.
        status: Which stopping test fired, if any.
        nit: Iteration index at which the loop stopped (``max_iterations``
            when exhausted).
        fun: Objective value at ``x``.
        grad_norm: Gradient norm at ``x``.
        message: Human-readable form of ``status``.
        method: Label of the solver and its policies.
        nfev: Objective evaluations made by the loop and step-size rule.
        njev: Gradient-provider evaluations.
        history: Iterates, starting with ``x0``, when recording was requested.
    """

    x: Array
    status: Status
    nit: int
    fun: float
    grad_norm: float
    message: str
    method: str = ""
    nfev: int = 0
    njev: int = 0
    history: List[Array] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status is not Status.EXHAUSTED_ITERATIONS


class CountingObjective:
    """Wrap a callable and count how often it is evaluated."""

    def __init__(self, fn: Callable) -> None:
        self.fn = fn
        self.calls = 0

    def __call__(self, x: Array):
        self.calls += 1
        return self.fn(x)


def instrument(problem: Problem) -> tuple[CountingObjective, CountingObjective]:
    """Return counting wrappers for the objective and the gradient provider.

    A finite-difference gradient is built on top of the counting objective,
    so its evaluations show up in ``nfev``.
    """
    fun = CountingObjective(problem.fun)
    if problem.grad is not None:
        grad = CountingObjective(problem.grad)
    else:
        grad = CountingObjective(fd_gradient(fun, problem.h, problem.difference))
    return fun, grad


def as_start_point(x0, dim: Optional[int] = None) -> Array:
    """Validate and copy a starting point into a 1D float array."""
    x = np.array(x0, dtype=float)
    if x.ndim != 1 or x.size == 0:
        raise ValueError(f"x0 must be a non-empty 1D vector, got shape {x.shape}")
    if dim is not None and x.size != dim:
        raise ValueError(
            f"x0 has dimension {x.size} but the problem expects dimension {dim}"
        )
    return x


def check_tunables(initial_step: float, max_iterations: int) -> None:
    if not initial_step > 0:
        raise ValueError(f"initial_step must be positive, got {initial_step}")
    if max_iterations < 0:
        raise ValueError(f"max_iterations must be non-negative, got {max_iterations}")


def evaluate_gradient(grad_f: Gradient, x: Array) -> Array:
    """Evaluate ``grad_f`` at ``x`` as a flat float vector of the same dimension."""
    grad = np.asarray(grad_f(x), dtype=float).reshape(-1)
    if grad.size != x.size:
        raise ValueError(
            f"gradient has {grad.size} components but x has dimension {x.size}"
        )
    return grad


def descent_loop(
    fun: Objective,
    grad_f: Gradient,
    x0: Array,
    advance: Advance,
    *,
    tolerance_r: float,
    tolerance_s: float,
    max_iterations: int,
    method: str,
    callback: Optional[Callback] = None,
    history: bool = False,
) -> OptimizeResult:
    """Run the shared iterate / test / update cycle.

    Parameters
    ----------
    fun, grad_f:
        Objective and gradient provider. Evaluation counts are read from
        them when they are :class:`CountingObjective` instances.
    x0:
        Validated starting point; it is not modified.
    advance:
        ``advance(x, grad, residual, iteration) -> Step``. Receives the raw
        gradient at ``x`` and returns the next point with its step metric.
    """
    x = x0.copy()
    hist: list[Array] = [x.copy()] if history else []
    status = Status.EXHAUSTED_ITERATIONS
    iteration = 0

    while iteration < max_iterations:
        grad = evaluate_gradient(grad_f, x)
        residual = norm(grad)
        # an exact stationary point is converged even with tolerance_r = 0
        if residual < tolerance_r or residual == 0.0:
            status = Status.CONVERGED_RESIDUAL
            break

        step = advance(x, grad, residual, iteration)
        x = step.x
        if history:
            hist.append(x.copy())
        if callback is not None:
            callback(x.copy(), iteration, step.alpha)

        if step.step_length < tolerance_s:
            status = Status.CONVERGED_STEP
            break
        iteration += 1

    message = _MESSAGES[status].format(nit=iteration)
    if status is Status.EXHAUSTED_ITERATIONS:
        logger.warning("%s: %s", method, message)
    else:
        logger.info("%s: %s", method, message)

    final_grad = evaluate_gradient(grad_f, x)
    value = float(fun(x))
    return OptimizeResult(
        x=x,
        status=status,
        nit=iteration,
        fun=value,
        grad_norm=norm(final_grad),
        message=message,
        method=method,
        nfev=getattr(fun, "calls", 0),
        njev=getattr(grad_f, "calls", 0),
        history=hist,
    )


__all__ = [
    "Advance",
    "Array",
    "Callback",
    "CountingObjective",
    "OptimizeResult",
    "Problem",
    "Status",
    "Step",
    "as_start_point",
    "check_tunables",
    "descent_loop",
    "evaluate_gradient",
    "instrument",
]
