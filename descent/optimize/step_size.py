"""Step-size policies.

Decay rules (exponential, inverse, constant) are pure functions of the
current step, the iteration index and the residual. They only fire while the
step is above ``minimum_step``; once it has dropped to the floor it keeps its
last value for the rest of the run (no clamping to the floor itself).

The Armijo rule is a backtracking line search and needs the objective, so it
lives in :func:`armijo_backtracking` instead of the decay table.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import numpy as np

from descent.vector_ops import norm_squared

Array = np.ndarray


class StepSizeRule(Enum):
    EXPONENTIAL = "exponential"
    INVERSE = "inverse"
    ARMIJO = "armijo"
    CONSTANT = "constant"

    @classmethod
    def parse(cls, value: "StepSizeRule | str") -> "StepSizeRule":
        """Accept a member, its value, or labels like ``"Exponential decay"``."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for suffix in (" decay", " rule"):
            if key.endswith(suffix):
                key = key[: -len(suffix)]
        try:
            return cls(key)
        except ValueError:
            supported = [member.value for member in cls]
            raise ValueError(
                f"Unknown step size rule {value!r}. Supported: {supported}"
            ) from None


def exponential_decay(alpha: float, iteration: int, residual: float, schedule: "StepSizeSchedule") -> float:
    return alpha * math.exp(-schedule.mu)


def inverse_decay(alpha: float, iteration: int, residual: float, schedule: "StepSizeSchedule") -> float:
    if residual == 0:
        return alpha
    return schedule.initial_step / (1.0 + schedule.mu * iteration / residual)


def constant_step(alpha: float, iteration: int, residual: float, schedule: "StepSizeSchedule") -> float:
    return alpha


_DECAY_RULES: dict[StepSizeRule, Callable[..., float]] = {
    StepSizeRule.EXPONENTIAL: exponential_decay,
    StepSizeRule.INVERSE: inverse_decay,
    StepSizeRule.CONSTANT: constant_step,
}


@dataclass(frozen=True)
class StepSizeSchedule:
    """A decay rule bound to its tunables.

    Args:
        rule: EXPONENTIAL, INVERSE or CONSTANT.
        initial_step: Starting step (and numerator of the inverse rule).
        minimum_step: Decay only happens while the step is above this value.
        mu: Decay rate.
    """

    rule: StepSizeRule
    initial_step: float
    minimum_step: float
    mu: float

    def __post_init__(self) -> None:
        if self.rule not in _DECAY_RULES:
            raise ValueError(
                f"{self.rule.value} is not a decay rule; use armijo_backtracking"
            )

    def update(self, alpha: float, iteration: int, residual: float) -> float:
        if alpha > self.minimum_step:
            return _DECAY_RULES[self.rule](alpha, iteration, residual, self)
        return alpha


def armijo_backtracking(
    f: Callable[[Array], float],
    x: Array,
    grad: Array,
    initial_step: float,
    minimum_step: float,
    sigma: float,
) -> float:
    """Halve the step until the sufficient-decrease test passes.

    Starting from ``initial_step``, the step is halved while it is above
    ``minimum_step`` and ``f(x) - f(x - alpha grad) < sigma alpha ||grad||^2``.
    """
    alpha = float(initial_step)
    fx = f(x)
    grad_sq = norm_squared(grad)
    while alpha > minimum_step and fx - f(x - alpha * grad) < sigma * alpha * grad_sq:
        alpha *= 0.5
    return alpha


__all__ = [
    "StepSizeRule",
    "StepSizeSchedule",
    "armijo_backtracking",
    "constant_step",
    "exponential_decay",
    "inverse_decay",
]
