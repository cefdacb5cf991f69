import math

import numpy as np
import pytest

from descent.optimize import MomentumStrategy, Problem, Status, nesterov


def square(x: np.ndarray) -> float:
    return float(x @ x)


def square_grad(x: np.ndarray) -> np.ndarray:
    return 2 * x


def test_first_two_steps():
    problem = Problem(fun=square, grad=square_grad)
    x0 = np.array([3.0, 4.0])
    res = nesterov(problem, x0, max_iterations=2, tolerance_r=0.0, tolerance_s=0.0, history=True)

    alpha1 = math.exp(-0.2)
    x1 = x0 - alpha1 * np.array([0.6, 0.8])
    assert np.allclose(res.history[1], x1)

    alpha2 = alpha1 * math.exp(-0.2)
    y = x1 + 0.9 * (x1 - x0)
    x2 = y - alpha2 * y / np.linalg.norm(y)
    assert np.allclose(res.history[2], x2)
    assert res.method == "nesterov[exponential, constant]"


def test_lookahead_gradient_evaluated_only_when_stepping():
    problem = Problem(fun=square, grad=square_grad)
    res = nesterov(problem, np.array([3.0, 4.0]), max_iterations=1, tolerance_r=0.0, tolerance_s=0.0)
    # x0, lookahead y, final point
    assert res.njev == 3

    res = nesterov(problem, np.zeros(2))
    assert res.status is Status.CONVERGED_RESIDUAL
    assert res.njev == 2


def test_dynamic_strategy_uses_one_minus_alpha():
    problem = Problem(fun=square, grad=square_grad)
    x0 = np.array([3.0, 4.0])
    res = nesterov(
        problem, x0, rule="constant", strategy=MomentumStrategy.DYNAMIC, initial_step=0.5,
        max_iterations=2, tolerance_r=0.0, tolerance_s=0.0, history=True,
    )
    x1 = x0 - 0.5 * np.array([0.6, 0.8])
    y = x1 + 0.5 * (x1 - x0)
    assert np.allclose(res.history[2], y - 0.5 * y / np.linalg.norm(y))


@pytest.mark.parametrize("rule", ["exponential", "inverse", "constant"])
def test_decreases_objective(rule):
    def f(x):
        return float(np.sum((x - 1.0) ** 2))

    problem = Problem(fun=f)
    x0 = np.array([-2.0, 3.0])
    res = nesterov(problem, x0, rule=rule, initial_step=0.1, max_iterations=300)
    assert res.fun < f(x0)


def test_armijo_not_supported():
    problem = Problem(fun=square, grad=square_grad)
    with pytest.raises(ValueError):
        nesterov(problem, np.ones(2), rule="armijo")


def test_lookahead_gradient_with_wrong_length_rejected():
    calls = []

    def shrinking_grad(x):
        calls.append(x.copy())
        return 2 * x if len(calls) == 1 else 2 * x[:1]

    problem = Problem(fun=square, grad=shrinking_grad)
    with pytest.raises(ValueError, match="components"):
        nesterov(problem, np.array([3.0, 4.0]), max_iterations=1)
    assert len(calls) == 2
