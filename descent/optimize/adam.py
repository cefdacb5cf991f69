"""Adam: descent along bias-corrected adaptive moments."""

from __future__ import annotations

from typing import Optional

import numpy as np

from descent.logging import get_logger
from descent.vector_ops import norm

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
from .moments import AdamStepRule, MomentEstimator, check_betas

logger = get_logger(__name__)


def adam(
    problem: Problem,
    x0: np.ndarray,
    rule: AdamStepRule | str = AdamStepRule.DYNAMIC,
    tolerance_r: float = 1e-6,
    tolerance_s: float = 1e-6,
    initial_step: float = 1e-3,
    max_iterations: int = 100,
    minimum_step: float = 1e-6,
    beta1: float = 0.9,
    beta2: float = 0.999,
    epsilon: float = 1e-8,
    callback: Optional[Callback] = None,
    history: bool = False,
) -> OptimizeResult:
    """Minimize with ``x <- x - alpha * mhat / (sqrt(vhat) + epsilon)``.

    With the dynamic rule the step is recomputed every iteration as
    ``initial_step * sqrt(1 - beta2**t) / (1 - beta1**t)`` for as long as it
    stays above ``minimum_step``; the constant rule keeps ``initial_step``.
    The step test is applied to ``||x - x_prev||``.

    Defaults follow the usual Adam settings: a small initial step and a
    short iteration budget.
    """
    rule = AdamStepRule.parse(rule)
    check_betas(beta1, beta2)
    check_tunables(initial_step, max_iterations)
    x_start = as_start_point(x0, problem.dim)
    fun, grad_f = instrument(problem)
    method = f"adam[{rule.value}]"
    logger.debug(
        "%s: x0=%s tolerance_r=%g tolerance_s=%g initial_step=%g max_iterations=%d "
        "minimum_step=%g beta1=%g beta2=%g epsilon=%g",
        method, x_start, tolerance_r, tolerance_s, initial_step, max_iterations,
        minimum_step, beta1, beta2, epsilon,
    )

    moments = MomentEstimator(x_start.size, beta1, beta2, epsilon)
    alpha = float(initial_step)

    def advance(x: np.ndarray, grad: np.ndarray, residual: float, iteration: int) -> Step:
        nonlocal alpha
        moments.update(grad)
        if alpha > minimum_step and rule is AdamStepRule.DYNAMIC:
            alpha = moments.step_size(initial_step)
        x_new = x - alpha * moments.direction()
        moments.advance()
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


__all__ = ["adam"]
