"""Momentum update rules for the heavy-ball and Nesterov solvers."""

from __future__ import annotations

from enum import Enum

import numpy as np

Array = np.ndarray


class MomentumStrategy(Enum):
    """How much of the previous displacement carries into the next one.

    DYNAMIC uses ``1 - alpha`` while the step is below one and falls back to
    ``eta`` otherwise; CONSTANT always uses ``eta``.
    """

    DYNAMIC = "dynamic"
    CONSTANT = "constant"

    @classmethod
    def parse(cls, value: "MomentumStrategy | str") -> "MomentumStrategy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            supported = [member.value for member in cls]
            raise ValueError(
                f"Unknown momentum strategy {value!r}. Supported: {supported}"
            ) from None


def memory_coefficient(alpha: float, eta: float, strategy: MomentumStrategy) -> float:
    if strategy is MomentumStrategy.DYNAMIC and alpha < 1.0:
        return 1.0 - alpha
    return eta


def heavy_ball_velocity(
    d: Array, grad: Array, alpha: float, eta: float, strategy: MomentumStrategy
) -> Array:
    """Next velocity ``coeff * d - alpha * grad`` (``grad`` already normalized)."""
    return memory_coefficient(alpha, eta, strategy) * d - alpha * grad


def nesterov_lookahead(
    x: Array, x_prev: Array, alpha: float, eta: float, strategy: MomentumStrategy
) -> Array:
    """Extrapolated point ``x + coeff * (x - x_prev)``."""
    return x + memory_coefficient(alpha, eta, strategy) * (x - x_prev)


__all__ = [
    "MomentumStrategy",
    "heavy_ball_velocity",
    "memory_coefficient",
    "nesterov_lookahead",
]
