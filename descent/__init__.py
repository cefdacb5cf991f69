"""Descent - first-order minimization of smooth scalar functions on R^n."""

__version__ = "0.1.0"

# Derivative providers
from .autodiff import autograd_gradient, autograd_hessian, torch_objective

# Solver configurations
from .config import (
    AdamConfig,
    GradientDescentConfig,
    HeavyBallConfig,
    NesterovConfig,
    SolverConfig,
    config_from_dict,
    config_to_dict,
)
from .expressions import ScalarExpression, VectorExpression
from .finite_diff import DifferenceType, derivative, gradient, hessian

# Run files
from .io import RunSpec, dump_run_file, load_run_file, validate_run_file

# Logging
from .logging import configure_logging, get_logger, set_log_level

# Solvers
from .optimize import (
    AdamStepRule,
    MomentumStrategy,
    OptimizeResult,
    Problem,
    Status,
    StepSizeRule,
    adam,
    gradient_descent,
    heavy_ball,
    nesterov,
)
from .report import plot_convergence, print_result, result_summary
from .run import run, run_all
from .vector_ops import DimensionMismatch, DivisionByZero, DomainError, VectorAlgebraWarning

__all__ = [
    "AdamConfig",
    "AdamStepRule",
    "DifferenceType",
    "DimensionMismatch",
    "DivisionByZero",
    "DomainError",
    "GradientDescentConfig",
    "HeavyBallConfig",
    "MomentumStrategy",
    "NesterovConfig",
    "OptimizeResult",
    "Problem",
    "RunSpec",
    "ScalarExpression",
    "SolverConfig",
    "Status",
    "StepSizeRule",
    "VectorAlgebraWarning",
    "VectorExpression",
    "__version__",
    "adam",
    "autograd_gradient",
    "autograd_hessian",
    "config_from_dict",
    "config_to_dict",
    "configure_logging",
    "derivative",
    "dump_run_file",
    "get_logger",
    "gradient",
    "gradient_descent",
    "heavy_ball",
    "hessian",
    "load_run_file",
    "nesterov",
    "plot_convergence",
    "print_result",
    "result_summary",
    "run",
    "run_all",
    "set_log_level",
    "torch_objective",
    "validate_run_file",
]
