"""First-order descent solvers sharing one convergence loop.

Example
-------
>>> import numpy as np
>>> from descent.optimize import Problem, Status, gradient_descent
>>> problem = Problem(fun=lambda x: float(x @ x), grad=lambda x: 2 * x)
>>> res = gradient_descent(problem, np.array([5.0]))
>>> res.status is Status.CONVERGED_RESIDUAL
True
>>> float(res.x[0])
0.0
"""

from .adam import adam
from .core import OptimizeResult, Problem, Status, Step, descent_loop
from .gradient import gradient_descent
from .heavy_ball import heavy_ball
from .moments import AdamStepRule, MomentEstimator
from .momentum import (
    MomentumStrategy,
    heavy_ball_velocity,
    memory_coefficient,
    nesterov_lookahead,
)
from .nesterov import nesterov
from .step_size import StepSizeRule, StepSizeSchedule, armijo_backtracking

__all__ = [
    "AdamStepRule",
    "MomentEstimator",
    "MomentumStrategy",
    "OptimizeResult",
    "Problem",
    "Status",
    "Step",
    "StepSizeRule",
    "StepSizeSchedule",
    "adam",
    "armijo_backtracking",
    "descent_loop",
    "gradient_descent",
    "heavy_ball",
    "heavy_ball_velocity",
    "memory_coefficient",
    "nesterov",
    "nesterov_lookahead",
]
