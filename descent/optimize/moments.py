"""First and second moment tracking for Adam.

The estimator keeps the raw exponential averages ``m`` and ``v`` together
with the running powers ``beta1**t`` and ``beta2**t`` used for bias
correction::

    m    <- beta1 m + (1 - beta1) g
    v    <- beta2 v + (1 - beta2) g*g
    mhat  = m / (1 - beta1**t)
    vhat  = v / (1 - beta2**t)

References:
    - Kingma & Ba, *Adam: A Method for Stochastic Optimization* (2015)
"""

from __future__ import annotations

import math
from enum import Enum

import numpy as np

from descent.vector_ops import add, elemwise_division, elemwise_product, elemwise_sqrt

Array = np.ndarray


class AdamStepRule(Enum):
    """DYNAMIC rescales the step by the bias corrections; CONSTANT keeps it fixed."""

    DYNAMIC = "dynamic"
    CONSTANT = "constant"

    @classmethod
    def parse(cls, value: "AdamStepRule | str") -> "AdamStepRule":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            supported = [member.value for member in cls]
            raise ValueError(
                f"Unknown Adam step rule {value!r}. Supported: {supported}"
            ) from None


def check_betas(beta1: float, beta2: float) -> None:
    for name, beta in (("beta1", beta1), ("beta2", beta2)):
        if not 0.0 < beta < 1.0:
            raise ValueError(f"{name} must lie in (0, 1), got {beta}")


class MomentEstimator:
    """Bias-corrected gradient moments for an ``n``-dimensional problem."""

    def __init__(
        self, n: int, beta1: float = 0.9, beta2: float = 0.999, epsilon: float = 1e-8
    ) -> None:
        check_betas(beta1, beta2)
        self.beta1 = float(beta1)
        self.beta2 = float(beta2)
        self.epsilon = float(epsilon)
        self.m = np.zeros(n)
        self.v = np.zeros(n)
        self.mhat = np.zeros(n)
        self.vhat = np.zeros(n)
        self.beta1_iter = self.beta1
        self.beta2_iter = self.beta2

    def update(self, grad: Array) -> None:
        """Fold ``grad`` into the averages and refresh the corrected moments."""
        self.m = self.beta1 * self.m + (1.0 - self.beta1) * grad
        self.v = self.beta2 * self.v + (1.0 - self.beta2) * elemwise_product(grad, grad)
        self.mhat = self.m / (1.0 - self.beta1_iter)
        self.vhat = self.v / (1.0 - self.beta2_iter)

    def step_size(self, initial_step: float) -> float:
        return initial_step * math.sqrt(1.0 - self.beta2_iter) / (1.0 - self.beta1_iter)

    def direction(self) -> Array:
        """``mhat / (sqrt(vhat) + epsilon)``, componentwise."""
        denominator = add(elemwise_sqrt(self.vhat), np.full_like(self.vhat, self.epsilon))
        return elemwise_division(self.mhat, denominator)

    def advance(self) -> None:
        self.beta1_iter *= self.beta1
        self.beta2_iter *= self.beta2


__all__ = ["AdamStepRule", "MomentEstimator", "check_betas"]
