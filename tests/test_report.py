"""Tests for result reporting and convergence plots."""

from io import StringIO

import numpy as np
import pytest

from descent.optimize import Problem, gradient_descent, heavy_ball
from descent.report import plot_convergence, print_result, result_summary


def square(x: np.ndarray) -> float:
    return float(x @ x)


def square_grad(x: np.ndarray) -> np.ndarray:
    return 2 * x


PROBLEM = Problem(fun=square, grad=square_grad)


def test_result_summary():
    res = gradient_descent(PROBLEM, np.array([5.0]))
    summary = result_summary(res)
    assert summary["method"] == "gradient_descent[armijo]"
    assert summary["status"] == "CONVERGED_RESIDUAL"
    assert summary["success"] is True
    assert summary["nit"] == 1
    assert summary["x"] == [0.0]
    assert summary["fun"] == 0.0
    assert summary["grad_norm"] == 0.0
    assert summary["nfev"] > 0
    assert summary["njev"] == 3


def test_print_result():
    res = gradient_descent(PROBLEM, np.array([5.0, 0.0]))
    buffer = StringIO()
    print_result(res, file=buffer)
    output = buffer.getvalue()
    assert "gradient_descent[armijo]" in output
    assert "Converged in 1 iterations thanks to residual criterion." in output
    assert "Computed minimum: (0,0)" in output
    assert "f (0,0) = 0" in output
    assert "|| grad_f (0,0) || = 0" in output


def test_print_result_defaults_to_stdout(capsys):
    print_result(gradient_descent(PROBLEM, np.array([1.0])))
    assert "Computed minimum" in capsys.readouterr().out


def test_plot_convergence():
    matplotlib = pytest.importorskip("matplotlib")
    matplotlib.use("Agg")
    from matplotlib import pyplot as plt

    results = [
        gradient_descent(PROBLEM, np.array([3.0, 4.0]), rule="constant", initial_step=0.1, history=True),
        heavy_ball(PROBLEM, np.array([3.0, 4.0]), max_iterations=50, history=True),
    ]
    ax = plot_convergence(results, square, log_scale=True)
    assert len(ax.get_lines()) == 2
    assert ax.get_lines()[0].get_ydata()[0] > ax.get_lines()[0].get_ydata()[-1]
    labels = [text.get_text() for text in ax.get_legend().get_texts()]
    assert labels == ["gradient_descent[constant]", "heavy_ball[exponential, constant]"]
    plt.close("all")


def test_plot_convergence_requires_history():
    pytest.importorskip("matplotlib")
    res = gradient_descent(PROBLEM, np.array([1.0]))
    with pytest.raises(ValueError, match="history"):
        plot_convergence([res], square)
