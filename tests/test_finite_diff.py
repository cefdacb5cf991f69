import numpy as np
import pytest

from descent.finite_diff import DifferenceType, derivative, gradient, hessian


def test_centered_gradient_of_quadratic_form(rng):
    m = rng.normal(size=(4, 4))
    a = m + m.T

    def f(x):
        return float(x @ a @ x)

    grad = gradient(f, h=1e-4, difference=DifferenceType.CENTERED)
    for _ in range(5):
        x = rng.normal(size=4)
        assert np.allclose(grad(x), 2 * a @ x, atol=1e-6)


@pytest.mark.parametrize("difference", ["forward", "backward", "centered"])
def test_gradient_exact_for_linear_functions(difference):
    c = np.array([1.5, -2.0, 0.25])
    grad = gradient(lambda x: float(c @ x) + 3.0, h=1e-3, difference=difference)
    assert np.allclose(grad(np.array([0.3, -0.7, 2.0])), c, atol=1e-8)


def test_one_sided_gradient_error_is_first_order():
    f = lambda x: float(np.exp(x[0]))  # noqa: E731
    x = np.array([0.0])
    forward = gradient(f, h=1e-3, difference="forward")(x)[0]
    backward = gradient(f, h=1e-3, difference="backward")(x)[0]
    assert forward > 1.0 > backward
    assert abs(forward - 1.0) < 1e-3
    assert abs(backward - 1.0) < 1e-3


def test_hessian_of_sphere_at_origin():
    hess = hessian(lambda x: float(x[0] ** 2 + x[1] ** 2), h=1e-3)
    assert np.allclose(hess(np.zeros(2)), [[2.0, 0.0], [0.0, 2.0]], atol=1e-6)


@pytest.mark.parametrize("difference", list(DifferenceType))
def test_hessian_of_mixed_quadratic(difference):
    f = lambda x: float(x[0] ** 2 + 3 * x[0] * x[1] + x[1] ** 2)  # noqa: E731
    hess = hessian(f, h=1e-3, difference=difference)
    assert np.allclose(hess(np.array([0.5, -1.0])), [[2.0, 3.0], [3.0, 2.0]], atol=1e-5)


def test_difference_type_alternates():
    assert DifferenceType.FORWARD.other is DifferenceType.BACKWARD
    assert DifferenceType.BACKWARD.other is DifferenceType.FORWARD
    assert DifferenceType.CENTERED.other is DifferenceType.CENTERED


def test_difference_type_parse():
    assert DifferenceType.parse("Centered") is DifferenceType.CENTERED
    assert DifferenceType.parse(" FORWARD ") is DifferenceType.FORWARD
    with pytest.raises(ValueError):
        DifferenceType.parse("sideways")


def test_non_positive_step_rejected():
    with pytest.raises(ValueError):
        gradient(lambda x: 0.0, h=0.0)
    with pytest.raises(ValueError):
        hessian(lambda x: 0.0, h=-1e-3)


def test_second_derivative_of_cubic():
    f = lambda x: float(x[0] ** 3 + x[1] ** 2)  # noqa: E731
    x = np.array([1.0, 2.0])
    for difference in ("forward", "centered"):
        assert np.allclose(derivative(f, 2, h=1e-2, difference=difference)(x), [6.0, 2.0], atol=1e-6)


def test_derivative_orders_zero_and_one():
    f = lambda x: float(x[0] * x[1])  # noqa: E731
    x = np.array([2.0, 3.0])
    assert np.allclose(derivative(f, 0)(x), [6.0, 6.0])
    assert np.allclose(derivative(f, 1)(x), [3.0, 2.0])
    with pytest.raises(ValueError):
        derivative(f, -1)


@pytest.mark.parametrize("difference", list(DifferenceType))
def test_threaded_gradient_and_hessian_match_sequential(difference, rng):
    def f(x):
        return float(np.sum(x ** 4) + x[0] * x[1] * x[2])

    x = rng.normal(size=3)
    assert np.allclose(
        gradient(f, 1e-3, difference, n_jobs=2)(x), gradient(f, 1e-3, difference)(x)
    )
    assert np.allclose(
        hessian(f, 1e-3, difference, n_jobs=2)(x), hessian(f, 1e-3, difference)(x)
    )
