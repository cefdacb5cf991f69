"""Tests for the vector algebra primitives."""

import logging
import warnings
from io import StringIO

import numpy as np
import pytest

from descent.logging import configure_logging
from descent.vector_ops import (
    DimensionMismatch,
    DivisionByZero,
    DomainError,
    VectorAlgebraWarning,
    add,
    elemwise_division,
    elemwise_product,
    elemwise_sqrt,
    norm,
    norm_squared,
    normalize,
    scale,
    subtract,
)


def test_elemwise_product_matches_componentwise(rng):
    a = rng.normal(size=7)
    b = rng.normal(size=7)
    out = elemwise_product(a, b)
    for i in range(7):
        assert out[i] == a[i] * b[i]


def test_elemwise_division_zero_component():
    with pytest.warns(DivisionByZero, match="index 1"):
        out = elemwise_division([1.0, 2.0, 3.0], [2.0, 0.0, 4.0])
    assert np.allclose(out, [0.5, 0.0, 0.75])


def test_elemwise_division_one_warning_per_zero():
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        out = elemwise_division([1.0, 2.0, 3.0], [0.0, 0.0, 1.0])
    messages = [str(w.message) for w in caught if issubclass(w.category, DivisionByZero)]
    assert messages == ["division by zero at index 0", "division by zero at index 1"]
    assert np.allclose(out, [0.0, 0.0, 3.0])


def test_size_mismatch_returns_zeros():
    with pytest.warns(DimensionMismatch):
        out = add([1.0, 2.0], [1.0, 2.0, 3.0])
    assert np.array_equal(out, np.zeros(2))
    with pytest.warns(DimensionMismatch):
        assert np.array_equal(subtract([1.0], [1.0, 2.0]), np.zeros(1))
    with pytest.warns(DimensionMismatch):
        assert elemwise_product([], []).size == 0


def test_elemwise_sqrt_negative_component():
    with pytest.warns(DomainError):
        out = elemwise_sqrt([4.0, -1.0, 9.0])
    assert np.allclose(out, [2.0, 0.0, 3.0])


def test_warnings_share_base_category():
    for category in (DimensionMismatch, DivisionByZero, DomainError):
        assert issubclass(category, VectorAlgebraWarning)
        assert issubclass(category, RuntimeWarning)


def test_warning_can_be_escalated():
    with warnings.catch_warnings():
        warnings.simplefilter("error", VectorAlgebraWarning)
        with pytest.raises(DomainError):
            elemwise_sqrt([-1.0])


def test_degraded_operation_is_logged():
    captured = StringIO()
    configure_logging(level=logging.WARNING, stream=captured)
    try:
        with pytest.warns(DivisionByZero):
            elemwise_division([1.0], [0.0])
        assert "division by zero at index 0" in captured.getvalue()
    finally:
        configure_logging(level=logging.WARNING)


def test_norms_and_scale():
    x = np.array([3.0, 4.0])
    assert norm(x) == 5.0
    assert norm_squared(x) == 25.0
    assert np.allclose(scale(2.0, x), [6.0, 8.0])
    assert np.allclose(add(x, x), [6.0, 8.0])
    assert np.allclose(subtract(x, [1.0, 1.0]), [2.0, 3.0])


def test_normalize():
    assert np.allclose(normalize([3.0, 4.0]), [0.6, 0.8])
    with pytest.warns(DivisionByZero):
        out = normalize([0.0, 0.0])
    assert np.array_equal(out, np.zeros(2))


def test_inputs_are_not_modified():
    a = np.array([1.0, 2.0])
    b = np.array([3.0, 4.0])
    add(a, b)
    elemwise_division(a, b)
    normalize(a)
    assert np.array_equal(a, [1.0, 2.0])
    assert np.array_equal(b, [3.0, 4.0])
