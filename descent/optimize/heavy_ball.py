"""Heavy-ball (Polyak momentum) descent."""

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
from .momentum import MomentumStrategy, heavy_ball_velocity
from .step_size import StepSizeRule, StepSizeSchedule

logger = get_logger(__name__)


def heavy_ball(
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
    """Momentum descent ``d <- c d - alpha g/||g||``, ``x <- x + d``.

    ``c`` is ``eta`` for the constant strategy; the dynamic strategy uses
    ``1 - alpha`` while ``alpha < 1``. The step test is applied to ``||d||``.
    Only the decay rules (exponential, inverse, constant) are available.
    """
    rule = StepSizeRule.parse(rule)
    strategy = MomentumStrategy.parse(strategy)
    if rule is StepSizeRule.ARMIJO:
        raise ValueError("heavy ball supports the exponential, inverse and constant rules only")
    check_tunables(initial_step, max_iterations)
    x_start = as_start_point(x0, problem.dim)
    fun, grad_f = instrument(problem)
    method = f"heavy_ball[{rule.value}, {strategy.value}]"
    logger.debug(
        "%s: x0=%s tolerance_r=%g tolerance_s=%g initial_step=%g max_iterations=%d "
        "minimum_step=%g mu=%g eta=%g",
        method, x_start, tolerance_r, tolerance_s, initial_step, max_iterations,
        minimum_step, mu, eta,
    )

    schedule = StepSizeSchedule(rule, initial_step, minimum_step, mu)
    alpha = float(initial_step)
    d = np.zeros_like(x_start)

    def advance(x: np.ndarray, grad: np.ndarray, residual: float, iteration: int) -> Step:
        nonlocal alpha, d
        direction = normalize(grad)
        alpha = schedule.update(alpha, iteration, residual)
        d = heavy_ball_velocity(d, direction, alpha, eta, strategy)
        return Step(x=x + d, step_length=norm(d), alpha=alpha)

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


__all__ = ["heavy_ball"]
