"""Nesterov accelerated descent with a lookahead point."""

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
    evaluate_gradient,
    instrument,
)
from .momentum import MomentumStrategy, nesterov_lookahead
from .step_size import StepSizeRule, StepSizeSchedule

logger = get_logger(__name__)


def nesterov(
    problem: Problem,
    x0: np.ndarray,
    rule: StepSizeRule | str = StepSizeRule.EXPONENTIAL,
    strategy: MomentumStrategy | str = MomentumStrategy.CONSTANT,
    tolerance_r: float = 1e-6,
    tolerance_s: float = 1e-6,
    initial_step: float = 1.0,
    max_iterations: int = 1000,
    minimum_step: float = 1e-2,
    mu: float = 0.2,
    eta: float = 0.9,
    callback: Optional[Callback] = None,
    history: bool = False,
) -> OptimizeResult:
    """Nesterov descent: step from the lookahead ``y``, then extrapolate.

    Each iteration uses two gradients. The one at ``x`` drives the residual
    test and the inverse decay rule; the normalized one at ``y`` gives the
    update ``x <- y - alpha g_y/||g_y||``. The lookahead is then
    ``y <- x + c (x - x_prev)`` with ``c`` chosen by ``strategy``, and the
    step test is applied to ``||x - x_prev||``.
    """
    rule = StepSizeRule.parse(rule)
    strategy = MomentumStrategy.parse(strategy)
    if rule is StepSizeRule.ARMIJO:
        raise ValueError("nesterov supports the exponential, inverse and constant rules only")
    check_tunables(initial_step, max_iterations)
    x_start = as_start_point(x0, problem.dim)
    fun, grad_f = instrument(problem)
    method = f"nesterov[{rule.value}, {strategy.value}]"
    logger.debug(
        "%s: x0=%s tolerance_r=%g tolerance_s=%g initial_step=%g max_iterations=%d "
        "minimum_step=%g mu=%g eta=%g",
        method, x_start, tolerance_r, tolerance_s, initial_step, max_iterations,
        minimum_step, mu, eta,
    )

    schedule = StepSizeSchedule(rule, initial_step, minimum_step, mu)
    alpha = float(initial_step)
    y = x_start.copy()

    def advance(x: np.ndarray, grad: np.ndarray, residual: float, iteration: int) -> Step:
        nonlocal alpha, y
        grad_y = normalize(evaluate_gradient(grad_f, y))
        alpha = schedule.update(alpha, iteration, residual)
        x_new = y - alpha * grad_y
        y = nesterov_lookahead(x_new, x, alpha, eta, strategy)
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


__all__ = ["nesterov"]
