"""Tests for the torch autograd derivative providers."""

import numpy as np
import pytest
import torch

from descent.autodiff import autograd_gradient, autograd_hessian, torch_objective
from descent.finite_diff import gradient
from descent.optimize import Problem, gradient_descent


def rosenbrock(x: torch.Tensor) -> torch.Tensor:
    return (1 - x[0]) ** 2 + 100 * (x[1] - x[0] ** 2) ** 2


def test_gradient_matches_analytic():
    grad = autograd_gradient(rosenbrock)
    x = np.array([-1.2, 1.0])
    expected = np.array(
        [
            -2 * (1 - x[0]) - 400 * x[0] * (x[1] - x[0] ** 2),
            200 * (x[1] - x[0] ** 2),
        ]
    )
    out = grad(x)
    assert isinstance(out, np.ndarray)
    assert out.dtype == np.float64
    assert np.allclose(out, expected)


def test_gradient_agrees_with_finite_differences(rng):
    fun = lambda x: torch.sin(x).sum() + (x**2).prod()  # noqa: E731
    x = rng.normal(size=3)
    exact = autograd_gradient(fun)(x)
    approx = gradient(torch_objective(fun), h=1e-5)(x)
    assert np.allclose(exact, approx, atol=1e-6)


def test_hessian_of_quadratic_form(rng):
    m = rng.normal(size=(3, 3))
    a = torch.as_tensor(m + m.T, dtype=torch.float64)
    hess = autograd_hessian(lambda x: x @ a @ x)
    assert np.allclose(hess(np.ones(3)), 2 * a.numpy())


def test_non_scalar_objective_rejected():
    grad = autograd_gradient(lambda x: x * 2)
    with pytest.raises(ValueError, match="scalar"):
        grad(np.ones(2))


def test_objective_ignoring_input_rejected():
    grad = autograd_gradient(lambda x: torch.tensor(1.0, dtype=torch.float64))
    with pytest.raises(RuntimeError):
        grad(np.ones(2))


def test_torch_objective_returns_float():
    value = torch_objective(lambda x: (x**2).sum())(np.array([1.0, 2.0]))
    assert isinstance(value, float)
    assert value == 5.0


def test_solver_with_autograd_gradient():
    problem = Problem(
        fun=torch_objective(lambda x: ((x - 2.0) ** 2).sum()),
        grad=autograd_gradient(lambda x: ((x - 2.0) ** 2).sum()),
    )
    res = gradient_descent(problem, np.zeros(3))
    assert res.success
    assert np.allclose(res.x, 2.0, atol=1e-4)
