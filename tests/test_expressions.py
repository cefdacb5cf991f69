"""Tests for expression-backed objectives and gradients."""

import copy
import math

import numpy as np
import pytest

from descent.expressions import ScalarExpression, VectorExpression


def test_scalar_expression_evaluates():
    f = ScalarExpression("4*x[0]^4 + 2*x[1]^2 + 2*x[0]*x[1] + 2*x[0]", 2)
    assert f(np.array([1.0, 1.0])) == 10.0
    assert f(np.array([0.0, 0.0])) == 0.0


def test_caret_is_power_with_python_precedence():
    f = ScalarExpression("2*x[0]^2 + 1", 1)
    assert f([3.0]) == 19.0
    assert ScalarExpression("-x[0]^2", 1)([3.0]) == -9.0


def test_functions_and_constants():
    f = ScalarExpression("sin(x[0]) + exp(x[1]) + sqrt(abs(x[2])) + pi", 3)
    assert f([0.0, 0.0, -4.0]) == pytest.approx(1.0 + 2.0 + math.pi)
    assert ScalarExpression("e", 1)([0.0]) == pytest.approx(math.e)


def test_vector_expression():
    g = VectorExpression("{16*x[0]*x[0]*x[0] + 2*x[1] + 2, 4*x[1] + 2*x[0]}", 2)
    assert len(g) == 2
    assert np.allclose(g([1.0, 1.0]), [20.0, 6.0])


def test_vector_expression_commas_inside_calls():
    g = VectorExpression("{atan((x[0] + x[1])), cos(x[0])}", 2)
    assert np.allclose(g([0.0, 0.0]), [0.0, 1.0])


@pytest.mark.parametrize(
    "source",
    [
        "",
        "x[0] +",
        "y + 1",
        "x[2]",
        "x[-1]",
        "x[0.5]",
        "x.__class__",
        "open('f')",
        "max(x[0], x[1])",
        "x[0] if x[1] else 0",
        "x[0] % 2",
        "'a'",
        "[x[0]]",
    ],
)
def test_rejected_sources(source):
    with pytest.raises(ValueError):
        ScalarExpression(source, 2)


def test_vector_expression_requires_braces():
    with pytest.raises(ValueError, match="braces"):
        VectorExpression("x[0], x[1]", 2)


def test_call_size_checked():
    f = ScalarExpression("x[0]", 2)
    with pytest.raises(ValueError, match="size 2"):
        f(np.zeros(3))


def test_copies_are_independent():
    f = ScalarExpression("x[0] * x[1]", 2)
    g = copy.deepcopy(f)
    assert f([2.0, 3.0]) == 6.0
    assert g([4.0, 5.0]) == 20.0
    assert f([2.0, 3.0]) == 6.0


def test_repr_contains_source():
    assert "x[0] + 1" in repr(ScalarExpression("x[0] + 1", 1))
