"""Dispatch solver configurations to their solvers.

Example
-------
>>> import numpy as np
>>> from descent.config import AdamConfig, GradientDescentConfig
>>> from descent.optimize import Problem
>>> from descent.run import run_all
>>> problem = Problem(fun=lambda x: float(x @ x), grad=lambda x: 2 * x)
>>> results = run_all([GradientDescentConfig(), AdamConfig()], problem, np.ones(2))
>>> [r.method for r in results]
['gradient_descent[armijo]', 'adam[dynamic]']
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

import numpy as np
from joblib import Parallel, delayed

from descent.config import (
    AdamConfig,
    GradientDescentConfig,
    HeavyBallConfig,
    NesterovConfig,
    SolverConfig,
)
from descent.logging import get_logger
from descent.optimize import OptimizeResult, Problem, adam, gradient_descent, heavy_ball, nesterov

logger = get_logger(__name__)


def run(
    config: SolverConfig,
    problem: Problem,
    x0: np.ndarray,
    callback: Optional[Callable] = None,
    history: bool = False,
) -> OptimizeResult:
    """Run the solver selected by the type of ``config``.

    Raises:
        TypeError: If ``config`` is not one of the four solver configs.
    """
    if isinstance(config, GradientDescentConfig):
        return gradient_descent(
            problem,
            x0,
            rule=config.rule,
            tolerance_r=config.tolerance_r,
            tolerance_s=config.tolerance_s,
            initial_step=config.initial_step,
            max_iterations=config.max_iterations,
            minimum_step=config.minimum_step,
            mu=config.mu,
            sigma=config.sigma,
            callback=callback,
            history=history,
        )
    if isinstance(config, (HeavyBallConfig, NesterovConfig)):
        solver = heavy_ball if isinstance(config, HeavyBallConfig) else nesterov
        return solver(
            problem,
            x0,
            rule=config.rule,
            strategy=config.strategy,
            tolerance_r=config.tolerance_r,
            tolerance_s=config.tolerance_s,
            initial_step=config.initial_step,
            max_iterations=config.max_iterations,
            minimum_step=config.minimum_step,
            mu=config.mu,
            eta=config.eta,
            callback=callback,
            history=history,
        )
    if isinstance(config, AdamConfig):
        return adam(
            problem,
            x0,
            rule=config.rule,
            tolerance_r=config.tolerance_r,
            tolerance_s=config.tolerance_s,
            initial_step=config.initial_step,
            max_iterations=config.max_iterations,
            minimum_step=config.minimum_step,
            beta1=config.beta1,
            beta2=config.beta2,
            epsilon=config.epsilon,
            callback=callback,
            history=history,
        )
    raise TypeError(f"Unsupported solver config type: {type(config).__name__}")


def run_all(
    configs: Sequence[SolverConfig],
    problem: Problem,
    x0: np.ndarray,
    n_jobs: Optional[int] = None,
    history: bool = False,
) -> List[OptimizeResult]:
    """Run several independent solver configurations on the same problem.

    Runs share no state. With ``n_jobs`` other than None or 1 they are
    executed by joblib on threads (``-1`` uses all cores); results always
    come back in input order. The objective and gradient must then be safe
    to call concurrently.
    """
    if n_jobs is None or n_jobs == 1 or len(configs) <= 1:
        return [run(config, problem, x0, history=history) for config in configs]

    logger.debug("running %d solver configs with n_jobs=%d", len(configs), n_jobs)
    return Parallel(n_jobs=n_jobs, prefer="threads")(
        delayed(run)(config, problem, x0, None, history) for config in configs
    )


__all__ = ["run", "run_all"]
