"""Exact derivative providers backed by PyTorch autograd.

These adapters turn a torch-traceable objective into numpy-in / numpy-out
callables so they can be used as ``Problem.grad`` in place of finite
differences. Computation is done in float64 on the CPU.
"""

from __future__ import annotations

from typing import Callable

import numpy as np
import torch

Array = np.ndarray
TorchObjective = Callable[[torch.Tensor], torch.Tensor]


def _to_tensor(x: Array) -> torch.Tensor:
    tensor = torch.as_tensor(np.asarray(x, dtype=float), dtype=torch.float64)
    if tensor.ndim != 1:
        raise ValueError(f"x must be a 1D vector, got shape {tuple(tensor.shape)}")
    return tensor


def torch_objective(fun: TorchObjective) -> Callable[[Array], float]:
    """Wrap a torch objective so it accepts and returns plain numbers."""

    def value(x: Array) -> float:
        with torch.no_grad():
            return float(fun(_to_tensor(x)))

    return value


def autograd_gradient(fun: TorchObjective) -> Callable[[Array], Array]:
    """
    Build an exact gradient provider from a torch objective.

    Args:
        fun: Callable taking a 1D float64 tensor and returning a scalar tensor.

    Returns:
        ``grad(x)`` returning a numpy array shaped like ``x``.

    Raises:
        ValueError: If the objective does not return a scalar.
        RuntimeError: If autograd produces no gradient (e.g. ``fun`` ignores
            its input).
    """

    def grad(x: Array) -> Array:
        params = _to_tensor(x).clone().requires_grad_(True)
        value = fun(params)
        if value.ndim != 0:
            raise ValueError(
                f"objective must return a scalar tensor, got shape {tuple(value.shape)}"
            )
        (result,) = torch.autograd.grad(value, params, allow_unused=True)
        if result is None:
            raise RuntimeError("Autograd did not produce a gradient for x.")
        return result.detach().numpy().copy()

    return grad


def autograd_hessian(fun: TorchObjective) -> Callable[[Array], Array]:
    """Build an exact Hessian provider via ``torch.autograd.functional.hessian``."""

    def hess(x: Array) -> Array:
        matrix = torch.autograd.functional.hessian(fun, _to_tensor(x))
        return matrix.detach().numpy().copy()

    return hess


__all__ = ["autograd_gradient", "autograd_hessian", "torch_objective"]
