"""JSON run files.

A run file describes one objective, how its gradient is obtained, a
starting point and the solvers to run on it::

    {
        "version": "descent-json-1.0",
        "f": "4*x[0]^4 + 2*x[1]^2 + 2*x[0]*x[1] + 2*x[0]",
        "fd": false,
        "grad_f": "{16*x[0]^3 + 2*x[1] + 2, 4*x[1] + 2*x[0]}",
        "fd_t": "Centered",                 # used when fd is true
        "h": 0.01,                          # used when fd is true
        "initial_condition": [0.0, 0.0],
        "solvers": [
            {"method": "gradient_descent", "rule": "Armijo rule"},
            {"method": "adam"}
        ]
    }

Only ``version`` is required. Missing keys fall back to the defaults in
:data:`DEFAULTS`; an absent ``solvers`` list runs every solver with its
default configuration.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

import numpy as np

from descent.config import (
    AdamConfig,
    GradientDescentConfig,
    HeavyBallConfig,
    NesterovConfig,
    SolverConfig,
    config_from_dict,
    config_to_dict,
)
from descent.expressions import ScalarExpression, VectorExpression
from descent.finite_diff import DifferenceType
from descent.optimize import Problem

VERSION = "descent-json-1.0"

DEFAULTS: Dict[str, Any] = {
    "f": "4*x[0]*x[0]*x[0]*x[0] + 2*x[1]*x[1] + 2*x[0]*x[1] + 2*x[0]",
    "grad_f": "{16*x[0]*x[0]*x[0] + 2*x[1] + 2, 4*x[1] + 2*x[0]}",
    "fd": True,
    "fd_t": "Centered",
    "h": 1e-2,
    "initial_condition": [0.0, 0.0],
}

_FIELDS = {
    "version": str,
    "f": str,
    "grad_f": str,
    "fd": bool,
    "fd_t": str,
    "h": (int, float),
    "initial_condition": list,
    "solvers": list,
    "metadata": dict,
}


@dataclass
class RunSpec:
    """A parsed run file: the problem, its starting point and the solvers."""

    problem: Problem
    x0: np.ndarray
    solvers: List[SolverConfig] = field(default_factory=list)
    source: Dict[str, Any] = field(default_factory=dict)


def default_solvers() -> List[SolverConfig]:
    return [GradientDescentConfig(), HeavyBallConfig(), NesterovConfig(), AdamConfig()]


def validate_run_file(obj: dict) -> None:
    """
    Structurally validate a run-file object.

    Raises
    ------
    ValueError
        On a missing or wrong version, unknown keys, wrongly typed values,
        a non-numeric or empty initial condition, or a non-positive ``h``.
    """
    if not isinstance(obj, dict):
        raise ValueError(f"Run file must be a JSON object, got {type(obj).__name__}")
    if obj.get("version") != VERSION:
        raise ValueError(
            f"Unsupported or missing version {obj.get('version')!r}; expected {VERSION!r}"
        )
    unknown = sorted(set(obj) - set(_FIELDS))
    if unknown:
        raise ValueError(f"Unknown keys in run file: {unknown}")
    for key, expected in _FIELDS.items():
        if key in obj:
            value = obj[key]
            # bool is an int subclass; reject it where a number is expected
            if not isinstance(value, expected) or (expected != bool and isinstance(value, bool)):
                raise ValueError(f"Field '{key}' has invalid type {type(value).__name__}")
    x0 = obj.get("initial_condition")
    if x0 is not None:
        if len(x0) == 0:
            raise ValueError("Field 'initial_condition' must not be empty")
        for item in x0:
            if isinstance(item, bool) or not isinstance(item, (int, float)):
                raise ValueError(f"initial_condition entries must be numbers, got {item!r}")
    if "h" in obj and not obj["h"] > 0:
        raise ValueError(f"Field 'h' must be positive, got {obj['h']}")
    for entry in obj.get("solvers", []):
        if not isinstance(entry, dict):
            raise ValueError(f"Solver entries must be objects, got {type(entry).__name__}")


def run_spec_from_dict(obj: dict) -> RunSpec:
    """Validate ``obj`` and build the problem, starting point and solver configs."""
    validate_run_file(obj)
    settings = {**DEFAULTS, **obj}
    x0 = np.asarray(settings["initial_condition"], dtype=float)
    dim = x0.size

    fun = ScalarExpression(settings["f"], dim)
    difference = DifferenceType.parse(settings["fd_t"])
    grad = None
    if not settings["fd"]:
        if "f" in obj and "grad_f" not in obj:
            raise ValueError("grad_f is required when fd is false and f is given")
        grad = VectorExpression(settings["grad_f"], dim)
        if len(grad) != dim:
            raise ValueError(
                f"grad_f has {len(grad)} components but the problem has dimension {dim}"
            )
    problem = Problem(fun=fun, grad=grad, dim=dim, difference=difference, h=float(settings["h"]))

    if "solvers" in obj:
        solvers = [config_from_dict(entry) for entry in obj["solvers"]]
    else:
        solvers = default_solvers()
    return RunSpec(problem=problem, x0=x0, solvers=solvers, source=dict(obj))


def run_spec_to_dict(spec: RunSpec) -> dict:
    """Serialize a run spec whose objective and gradient are expressions."""
    problem = spec.problem
    if not isinstance(problem.fun, ScalarExpression):
        raise ValueError("Only problems built from expressions can be serialized")
    result: Dict[str, Any] = {
        "version": VERSION,
        "f": problem.fun.source,
        "fd": problem.grad is None,
        "fd_t": problem.difference.value,
        "h": problem.h,
        "initial_condition": [float(v) for v in spec.x0],
        "solvers": [config_to_dict(config) for config in spec.solvers],
    }
    if problem.grad is not None:
        if not isinstance(problem.grad, VectorExpression):
            raise ValueError("Only gradients built from expressions can be serialized")
        result["grad_f"] = problem.grad.source
    if "metadata" in spec.source:
        result["metadata"] = spec.source["metadata"]
    return result


def load_run_file(path: str) -> RunSpec:
    """
    Load a run file from disk.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the file is not valid JSON or fails validation.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            obj = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Run file not found: {path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in file {path}: {e}")
    return run_spec_from_dict(obj)


def dump_run_file(spec: RunSpec, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(run_spec_to_dict(spec), f, indent=2, ensure_ascii=False)


__all__ = [
    "DEFAULTS",
    "RunSpec",
    "VERSION",
    "default_solvers",
    "dump_run_file",
    "load_run_file",
    "run_spec_from_dict",
    "run_spec_to_dict",
    "validate_run_file",
]
