"""Solver configurations.

Each solver family has a frozen dataclass holding its tunables and its
policy selection. :data:`SolverConfig` is the union of the four shapes;
:func:`descent.run.run` matches on it once to pick the solver.

Plain-dict conversion uses a ``"method"`` tag::

    {"method": "heavy_ball", "rule": "inverse", "strategy": "dynamic", "eta": 0.8}

Enum-valued fields accept the same names as the enums' ``parse`` methods,
including the long labels (``"Exponential decay"``, ``"Armijo rule"``).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Dict, Union

from descent.optimize.moments import AdamStepRule, check_betas
from descent.optimize.momentum import MomentumStrategy
from descent.optimize.step_size import StepSizeRule


def _check_common(config) -> None:
    if not config.initial_step > 0:
        raise ValueError(f"initial_step must be positive, got {config.initial_step}")
    if config.max_iterations < 0:
        raise ValueError(f"max_iterations must be non-negative, got {config.max_iterations}")
    if config.minimum_step < 0:
        raise ValueError(f"minimum_step must be non-negative, got {config.minimum_step}")
    if config.tolerance_r < 0 or config.tolerance_s < 0:
        raise ValueError("tolerances must be non-negative")


@dataclass(frozen=True)
class GradientDescentConfig:
    """Gradient descent tunables; ``sigma`` is used by the Armijo rule only."""

    rule: StepSizeRule = StepSizeRule.ARMIJO
    tolerance_r: float = 1e-6
    tolerance_s: float = 1e-6
    initial_step: float = 1.0
    max_iterations: int = 1000
    minimum_step: float = 1e-2
    mu: float = 0.2
    sigma: float = 0.1

    def __post_init__(self) -> None:
        object.__setattr__(self, "rule", StepSizeRule.parse(self.rule))
        _check_common(self)
        if self.sigma <= 0:
            raise ValueError(f"sigma must be positive, got {self.sigma}")


@dataclass(frozen=True)
class HeavyBallConfig:
    """Heavy-ball tunables; ``eta`` is the velocity memory coefficient."""

    rule: StepSizeRule = StepSizeRule.EXPONENTIAL
    strategy: MomentumStrategy = MomentumStrategy.CONSTANT
    tolerance_r: float = 1e-6
    tolerance_s: float = 1e-6
    initial_step: float = 1.0
    max_iterations: int = 1000
    minimum_step: float = 1e-2
    mu: float = 0.2
    eta: float = 0.9

    def __post_init__(self) -> None:
        _normalize_momentum(self)


@dataclass(frozen=True)
class NesterovConfig:
    """Nesterov tunables; ``eta`` weights the lookahead extrapolation."""

    rule: StepSizeRule = StepSizeRule.EXPONENTIAL
    strategy: MomentumStrategy = MomentumStrategy.CONSTANT
    tolerance_r: float = 1e-6
    tolerance_s: float = 1e-6
    initial_step: float = 1.0
    max_iterations: int = 1000
    minimum_step: float = 1e-2
    mu: float = 0.2
    eta: float = 0.9

    def __post_init__(self) -> None:
        _normalize_momentum(self)


@dataclass(frozen=True)
class AdamConfig:
    """Adam tunables with the customary small step and short budget."""

    rule: AdamStepRule = AdamStepRule.DYNAMIC
    tolerance_r: float = 1e-6
    tolerance_s: float = 1e-6
    initial_step: float = 1e-3
    max_iterations: int = 100
    minimum_step: float = 1e-6
    beta1: float = 0.9
    beta2: float = 0.999
    epsilon: float = 1e-8

    def __post_init__(self) -> None:
        object.__setattr__(self, "rule", AdamStepRule.parse(self.rule))
        _check_common(self)
        check_betas(self.beta1, self.beta2)
        if self.epsilon <= 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")


def _normalize_momentum(config) -> None:
    object.__setattr__(config, "rule", StepSizeRule.parse(config.rule))
    object.__setattr__(config, "strategy", MomentumStrategy.parse(config.strategy))
    if config.rule is StepSizeRule.ARMIJO:
        raise ValueError(
            f"{type(config).__name__} supports the exponential, inverse and constant rules only"
        )
    _check_common(config)
    if config.eta < 0:
        raise ValueError(f"eta must be non-negative, got {config.eta}")


SolverConfig = Union[GradientDescentConfig, HeavyBallConfig, NesterovConfig, AdamConfig]

METHODS: Dict[str, type] = {
    "gradient_descent": GradientDescentConfig,
    "heavy_ball": HeavyBallConfig,
    "nesterov": NesterovConfig,
    "adam": AdamConfig,
}


def method_name(config: SolverConfig) -> str:
    for name, cls in METHODS.items():
        if type(config) is cls:
            return name
    raise TypeError(f"Unsupported solver config type: {type(config).__name__}")


def config_from_dict(obj: Dict[str, Any]) -> SolverConfig:
    """
    Build a solver config from a ``"method"``-tagged dictionary.

    Raises:
        ValueError: If the method is missing or unknown, a key is not a field of
            that method's config, or a value fails validation.
    """
    if not isinstance(obj, dict):
        raise ValueError(f"Solver config must be a dict, got {type(obj).__name__}")
    data = dict(obj)
    method = data.pop("method", None)
    if method not in METHODS:
        raise ValueError(
            f"Unknown or missing solver method {method!r}. Supported: {sorted(METHODS)}"
        )
    cls = METHODS[method]
    allowed = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ValueError(f"Unknown keys for method '{method}': {unknown}")
    try:
        return cls(**data)
    except TypeError as e:
        raise ValueError(f"Invalid config for method '{method}': {e}") from None


def config_to_dict(config: SolverConfig) -> Dict[str, Any]:
    """Inverse of :func:`config_from_dict`; enum fields become their values."""
    out: Dict[str, Any] = {"method": method_name(config)}
    for key, value in asdict(config).items():
        out[key] = value.value if isinstance(value, Enum) else value
    return out


__all__ = [
    "AdamConfig",
    "GradientDescentConfig",
    "HeavyBallConfig",
    "METHODS",
    "NesterovConfig",
    "SolverConfig",
    "config_from_dict",
    "config_to_dict",
    "method_name",
]
