"""Plain gradient descent with a selectable step-size policy."""

from __future__ import annotations

from typing import Optional

import numpy as np

from descent.logging import get_logger
from descent.vector_ops import norm, normalize

from .core import (
    Callback,
    OptimizeResult,
    Problem,
    Step,
    as_start_point,
    check_tunables,
    descent_loop,
    instrument,
)
from .step_size import StepSizeRule, StepSizeSchedule, armijo_backtracking

logger = get_logger(__name__)


def gradient_descent(
    problem: Problem,
    x0: np.ndarray,
    rule: StepSizeRule | str = StepSizeRule.ARMIJO,
    tolerance_r: float = 1e-6,
    tolerance_s: float = 1e-6,
    initial_step: float = 1.0,
    max_iterations: int = 1000,
    minimum_step: float = 1e-2,
    mu: float = 0.2,
    sigma: float = 0.1,
    callback: Optional[Callback] = None,
    history: bool = False,
) -> OptimizeResult:
    """Minimize ``problem.fun`` with ``x <- x - alpha * grad``.

    The exponential and inverse decay rules step along the normalized
    gradient. The Armijo rule backtracks from ``initial_step`` on every
    iteration using the raw gradient, and the constant rule is the classic
    fixed learning-rate update on the raw gradient.

    Parameters
    ----------
    problem:
        Objective and optional analytic gradient.
    x0:
        Starting point.
    rule:
        Step-size policy, as a :class:`StepSizeRule` or its name.
    tolerance_r, tolerance_s:
        Residual and step-length thresholds.
    sigma:
        Sufficient-decrease constant of the Armijo rule.
    """
    rule = StepSizeRule.parse(rule)
    check_tunables(initial_step, max_iterations)
    x_start = as_start_point(x0, problem.dim)
    fun, grad_f = instrument(problem)
    method = f"gradient_descent[{rule.value}]"
    logger.debug(
        "%s: x0=%s tolerance_r=%g tolerance_s=%g initial_step=%g max_iterations=%d "
        "minimum_step=%g mu=%g sigma=%g",
        method, x_start, tolerance_r, tolerance_s, initial_step, max_iterations,
        minimum_step, mu, sigma,
    )

    schedule = None
    if rule is not StepSizeRule.ARMIJO:
        schedule = StepSizeSchedule(rule, initial_step, minimum_step, mu)
    alpha = float(initial_step)

    def advance(x: np.ndarray, grad: np.ndarray, residual: float, iteration: int) -> Step:
        nonlocal alpha
        if rule is StepSizeRule.ARMIJO:
            alpha = armijo_backtracking(fun, x, grad, initial_step, minimum_step, sigma)
        else:
            if rule is not StepSizeRule.CONSTANT:
                grad = normalize(grad)
            alpha = schedule.update(alpha, iteration, residual)
        x_new = x - alpha * grad
        return Step(x=x_new, step_length=norm(x_new - x), alpha=alpha)

    return descent_loop(
        fun,
        grad_f,
        x_start,
        advance,
        tolerance_r=tolerance_r,
        tolerance_s=tolerance_s,
        max_iterations=max_iterations,
        method=method,
        callback=callback,
        history=history,
    )


__all__ = ["gradient_descent"]
