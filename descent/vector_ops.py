"""Vector algebra primitives used by the descent solvers.

All operations take and return 1D float ``numpy`` arrays. Invalid input never
aborts an operation: the offending entries (or the whole result, on a size
mismatch) are set to zero and a :class:`VectorAlgebraWarning` subclass is
emitted through :mod:`warnings` and the package logger. Callers that prefer
hard failures can escalate with::

    warnings.simplefilter("error", VectorAlgebraWarning)
"""

from __future__ import annotations

import warnings

import numpy as np

from descent.logging import get_logger

Array = np.ndarray

logger = get_logger(__name__)


class VectorAlgebraWarning(RuntimeWarning):
    """Base category for degraded vector algebra results."""


class DimensionMismatch(VectorAlgebraWarning):
    """Operands are empty or have different lengths."""


class DivisionByZero(VectorAlgebraWarning):
    """A denominator component is exactly zero."""


class DomainError(VectorAlgebraWarning):
    """Square root of a negative component."""


def _signal(category: type[VectorAlgebraWarning], message: str) -> None:
    logger.warning(message)
    warnings.warn(message, category, stacklevel=3)


def _as_vector(a) -> Array:
    return np.asarray(a, dtype=float).reshape(-1)


def _check_pair(a: Array, b: Array, op: str) -> bool:
    if a.size == 0 or a.size != b.size:
        _signal(
            DimensionMismatch,
            f"{op}: vectors must have the same positive size, got {a.size} and {b.size}",
        )
        return False
    return True


def norm(x) -> float:
    """Euclidean norm."""
    return float(np.sqrt(norm_squared(x)))


def norm_squared(x) -> float:
    """Squared Euclidean norm (dot product of ``x`` with itself)."""
    x = _as_vector(x)
    return float(np.dot(x, x))


def scale(scalar: float, x) -> Array:
    """Multiply every component of ``x`` by ``scalar``."""
    return float(scalar) * _as_vector(x)


def add(a, b) -> Array:
    a, b = _as_vector(a), _as_vector(b)
    if not _check_pair(a, b, "add"):
        return np.zeros_like(a)
    return a + b


def subtract(a, b) -> Array:
    a, b = _as_vector(a), _as_vector(b)
    if not _check_pair(a, b, "subtract"):
        return np.zeros_like(a)
    return a - b


def elemwise_product(a, b) -> Array:
    """Hadamard product ``a ⊙ b``."""
    a, b = _as_vector(a), _as_vector(b)
    if not _check_pair(a, b, "elemwise_product"):
        return np.zeros_like(a)
    return a * b


def elemwise_division(a, b) -> Array:
    """Componentwise quotient ``a ⊘ b``.

    Indices where ``b`` is exactly zero yield ``0`` and emit one
    :class:`DivisionByZero` warning each.
    """
    a, b = _as_vector(a), _as_vector(b)
    if not _check_pair(a, b, "elemwise_division"):
        return np.zeros_like(a)
    zero = b == 0
    result = np.zeros_like(a)
    np.divide(a, b, out=result, where=~zero)
    for index in np.flatnonzero(zero):
        _signal(DivisionByZero, f"division by zero at index {int(index)}")
    return result


def elemwise_sqrt(a) -> Array:
    """Componentwise square root.

    Negative components yield ``0`` and emit one :class:`DomainError`
    warning each.
    """
    a = _as_vector(a)
    if a.size == 0:
        _signal(DimensionMismatch, "elemwise_sqrt: vector must have a positive size")
        return a.copy()
    negative = a < 0
    result = np.zeros_like(a)
    np.sqrt(a, out=result, where=~negative)
    for index in np.flatnonzero(negative):
        _signal(DomainError, f"square root of a negative number at index {int(index)}")
    return result


def normalize(x) -> Array:
    """Return ``x / ||x||``; a zero vector is returned unchanged with a warning."""
    x = _as_vector(x)
    length = norm(x)
    if length == 0.0:
        _signal(DivisionByZero, "cannot normalize a zero vector")
        return np.zeros_like(x)
    return x / length


__all__ = [
    "Array",
    "DimensionMismatch",
    "DivisionByZero",
    "DomainError",
    "VectorAlgebraWarning",
    "add",
    "elemwise_division",
    "elemwise_product",
    "elemwise_sqrt",
    "norm",
    "norm_squared",
    "normalize",
    "scale",
    "subtract",
]
