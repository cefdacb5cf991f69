"""Finite-difference gradients, Hessians and higher pure derivatives.

The builders return callables so that a numerical gradient can be plugged in
wherever an analytic one is expected::

    >>> import numpy as np
    >>> from descent.finite_diff import DifferenceType, gradient
    >>> grad = gradient(lambda x: float(np.sin(x[0]) + np.sin(x[1])), 1e-4)
    >>> np.round(grad(np.zeros(2)), 6)
    array([1., 1.])

Stacked differences alternate their scheme: the Hessian differentiates each
gradient component with ``difference.other`` (forward <-> backward, centered
stays centered), which keeps one-sided truncation errors from piling up on
the same side.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

import numpy as np
from joblib import Parallel, delayed

Array = np.ndarray
Objective = Callable[[Array], float]
Gradient = Callable[[Array], Array]
Hessian = Callable[[Array], Array]


class DifferenceType(Enum):
    """Finite-difference scheme."""

    FORWARD = "forward"
    BACKWARD = "backward"
    CENTERED = "centered"

    @property
    def other(self) -> "DifferenceType":
        """Scheme used for the next level of a stacked difference."""
        if self is DifferenceType.FORWARD:
            return DifferenceType.BACKWARD
        if self is DifferenceType.BACKWARD:
            return DifferenceType.FORWARD
        return DifferenceType.CENTERED

    @classmethod
    def parse(cls, value: "DifferenceType | str") -> "DifferenceType":
        """Accept an enum member or a case-insensitive name such as ``"Centered"``."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            supported = [member.value for member in cls]
            raise ValueError(
                f"Unknown difference type {value!r}. Supported: {supported}"
            ) from None


def _check_step(h: float) -> float:
    h = float(h)
    if not h > 0:
        raise ValueError(f"finite-difference step h must be positive, got {h}")
    return h


def _map_components(fn: Callable[[int], object], n: int, n_jobs: Optional[int]) -> list:
    """Evaluate ``fn(i)`` for every axis, spread over joblib threads when ``n_jobs`` asks for it."""
    if n_jobs is None or n_jobs == 1:
        return [fn(i) for i in range(n)]
    return Parallel(n_jobs=n_jobs, prefer="threads")(delayed(fn)(i) for i in range(n))


def gradient(
    f: Objective,
    h: float = 1e-2,
    difference: DifferenceType | str = DifferenceType.CENTERED,
    n_jobs: Optional[int] = None,
) -> Gradient:
    """Build a finite-difference gradient of ``f``.

    Parameters
    ----------
    f:
        Scalar objective taking a 1D array.
    h:
        Perturbation applied to one coordinate at a time.
    difference:
        Forward ``(f(x+h e_i) - f(x)) / h``, backward
        ``(f(x) - f(x-h e_i)) / h`` or centered
        ``(f(x+h e_i) - f(x-h e_i)) / 2h``.
    n_jobs:
        Number of joblib threads the components are spread over. ``None``
        or 1 evaluates them in order; -1 uses every core. ``f`` must then
        be safe to call from several threads.

    Returns
    -------
    Callable
        ``grad(x)`` returning an array shaped like ``x``.
    """
    h = _check_step(h)
    difference = DifferenceType.parse(difference)

    def grad(x: Array) -> Array:
        x = np.asarray(x, dtype=float).reshape(-1)
        fx = f(x) if difference is not DifferenceType.CENTERED else None

        def partial(i: int) -> float:
            x_forward = x.copy()
            x_backward = x.copy()
            x_forward[i] += h
            x_backward[i] -= h
            if difference is DifferenceType.FORWARD:
                return (f(x_forward) - fx) / h
            if difference is DifferenceType.BACKWARD:
                return (fx - f(x_backward)) / h
            return (f(x_forward) - f(x_backward)) / (2.0 * h)

        return np.array(_map_components(partial, x.size, n_jobs), dtype=float).reshape(x.shape)

    return grad


def hessian(
    f: Objective,
    h: float = 1e-2,
    difference: DifferenceType | str = DifferenceType.CENTERED,
    n_jobs: Optional[int] = None,
) -> Hessian:
    """Build a finite-difference Hessian of ``f`` by nested differencing.

    Row ``i`` is the gradient, taken with ``difference.other``, of the scalar
    map ``y -> gradient(f, h, difference)(y)[i]``. With ``n_jobs`` the rows
    are computed on joblib threads; each row itself stays sequential.
    """
    h = _check_step(h)
    difference = DifferenceType.parse(difference)
    first = gradient(f, h, difference)

    def hess(x: Array) -> Array:
        x = np.asarray(x, dtype=float).reshape(-1)

        def row(i: int) -> Array:
            def grad_i(y: Array) -> float:
                return float(first(y)[i])

            return gradient(grad_i, h, difference.other)(x)

        rows = _map_components(row, x.size, n_jobs)
        return np.array(rows, dtype=float).reshape(x.size, x.size)

    return hess


def derivative(
    f: Objective,
    order: int,
    h: float = 1e-2,
    difference: DifferenceType | str = DifferenceType.CENTERED,
) -> Gradient:
    """Pure partial derivatives of arbitrary order along every axis.

    The returned callable maps ``x`` to the vector whose ``i``-th entry
    approximates ``d^order f / dx_i^order``. Each level of the recursion
    differences the level below with the alternate scheme, so an order-2
    forward derivative is a backward difference of forward differences.
    Order 0 returns ``f(x)`` repeated once per axis.
    """
    if order < 0:
        raise ValueError(f"derivative order must be non-negative, got {order}")
    h = _check_step(h)
    difference = DifferenceType.parse(difference)

    if order == 0:

        def values(x: Array) -> Array:
            x = np.asarray(x, dtype=float).reshape(-1)
            return np.full(x.size, float(f(x)))

        return values

    lower = derivative(f, order - 1, h, difference.other)

    def partials(x: Array) -> Array:
        x = np.asarray(x, dtype=float).reshape(-1)
        out = np.zeros_like(x)
        for i in range(x.size):
            step = np.zeros_like(x)
            step[i] = h
            if difference is DifferenceType.FORWARD:
                out[i] = (lower(x + step)[i] - lower(x)[i]) / h
            elif difference is DifferenceType.BACKWARD:
                out[i] = (lower(x)[i] - lower(x - step)[i]) / h
            else:
                out[i] = (lower(x + step)[i] - lower(x - step)[i]) / (2.0 * h)
        return out

    return partials


__all__ = [
    "Array",
    "DifferenceType",
    "Gradient",
    "Hessian",
    "Objective",
    "derivative",
    "gradient",
    "hessian",
]
