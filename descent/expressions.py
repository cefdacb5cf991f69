"""Objective and gradient callables built from textual math expressions.

Expressions use the muparserx-style syntax of the run files::

    4*x[0]^4 + 2*x[1]^2 + 2*x[0]*x[1] + 2*x[0]      (scalar)
    {16*x[0]^3 + 2*x[1] + 2, 4*x[1] + 2*x[0]}       (vector)

Supported: numbers, ``x[i]`` with a literal index, ``+ - * /``, ``^`` and
``**`` for powers, unary signs, parentheses, the constants ``pi`` and ``e``
and the functions listed in :data:`FUNCTIONS`. The text is parsed once with
:mod:`ast` and checked node by node; evaluation walks the checked tree, so no
``eval`` is involved. Each instance only holds its source and tree and gets
``x`` as an argument, so copies are independent.
"""

from __future__ import annotations

import ast
import math
from typing import Callable, Dict, List

import numpy as np

Array = np.ndarray

FUNCTIONS: Dict[str, Callable[[float], float]] = {
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "asin": math.asin,
    "acos": math.acos,
    "atan": math.atan,
    "sinh": math.sinh,
    "cosh": math.cosh,
    "tanh": math.tanh,
    "exp": math.exp,
    "log": math.log,
    "sqrt": math.sqrt,
    "abs": abs,
}

CONSTANTS: Dict[str, float] = {"pi": math.pi, "e": math.e}

_BINARY = {
    ast.Add: lambda a, b: a + b,
    ast.Sub: lambda a, b: a - b,
    ast.Mult: lambda a, b: a * b,
    ast.Div: lambda a, b: a / b,
    ast.Pow: lambda a, b: a**b,
}


def _parse(source: str) -> ast.expr:
    text = source.strip()
    if not text:
        raise ValueError("Empty expression.")
    # muparserx power operator; Python's ^ would bind looser than + and *
    text = text.replace("^", "**")
    try:
        return ast.parse(text, mode="eval").body
    except SyntaxError as e:
        raise ValueError(f"Invalid expression syntax: {source!r}. Error: {e}") from None


def _check(node: ast.AST, dim: int, source: str) -> None:
    """Reject everything outside the supported grammar."""
    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise ValueError(f"Unsupported constant {node.value!r} in {source!r}")
        return
    if isinstance(node, ast.Name):
        if node.id not in CONSTANTS:
            raise ValueError(
                f"Unknown identifier '{node.id}' in {source!r}. "
                f"Use x[i] for variables or one of {sorted(CONSTANTS)}."
            )
        return
    if isinstance(node, ast.Subscript):
        if not (isinstance(node.value, ast.Name) and node.value.id == "x"):
            raise ValueError(f"Only the variable x can be indexed in {source!r}")
        index = node.slice
        if not (isinstance(index, ast.Constant) and type(index.value) is int):
            raise ValueError(f"x must be indexed by an integer literal in {source!r}")
        if not 0 <= index.value < dim:
            raise ValueError(
                f"Index x[{index.value}] out of range for dimension {dim} in {source!r}"
            )
        return
    if isinstance(node, ast.BinOp):
        if type(node.op) not in _BINARY:
            raise ValueError(f"Unsupported operator in {source!r}")
        _check(node.left, dim, source)
        _check(node.right, dim, source)
        return
    if isinstance(node, ast.UnaryOp):
        if not isinstance(node.op, (ast.USub, ast.UAdd)):
            raise ValueError(f"Unsupported unary operator in {source!r}")
        _check(node.operand, dim, source)
        return
    if isinstance(node, ast.Call):
        if not (isinstance(node.func, ast.Name) and node.func.id in FUNCTIONS):
            raise ValueError(
                f"Unsupported function call in {source!r}. Allowed: {sorted(FUNCTIONS)}"
            )
        if len(node.args) != 1 or node.keywords:
            raise ValueError(f"{node.func.id}() takes exactly one argument in {source!r}")
        _check(node.args[0], dim, source)
        return
    raise ValueError(f"Unsupported syntax ({type(node).__name__}) in {source!r}")


def _evaluate(node: ast.AST, x: Array) -> float:
    if isinstance(node, ast.Constant):
        return float(node.value)
    if isinstance(node, ast.Name):
        return CONSTANTS[node.id]
    if isinstance(node, ast.Subscript):
        return float(x[node.slice.value])
    if isinstance(node, ast.BinOp):
        return _BINARY[type(node.op)](_evaluate(node.left, x), _evaluate(node.right, x))
    if isinstance(node, ast.UnaryOp):
        value = _evaluate(node.operand, x)
        return -value if isinstance(node.op, ast.USub) else value
    # Call, already validated by _check
    return float(FUNCTIONS[node.func.id](_evaluate(node.args[0], x)))


def _split_components(source: str) -> List[str]:
    text = source.strip()
    if not (text.startswith("{") and text.endswith("}")):
        raise ValueError(f"Vector expression must be enclosed in braces: {source!r}")
    body = text[1:-1]
    parts, depth, start = [], 0, 0
    for pos, char in enumerate(body):
        if char in "([":
            depth += 1
        elif char in ")]":
            depth -= 1
        elif char == "," and depth == 0:
            parts.append(body[start:pos])
            start = pos + 1
    parts.append(body[start:])
    return [part.strip() for part in parts]


class ScalarExpression:
    """Callable ``f(x) -> float`` compiled from an expression in ``x[0..dim-1]``."""

    def __init__(self, source: str, dim: int) -> None:
        if dim < 1:
            raise ValueError(f"dim must be at least 1, got {dim}")
        self.source = source
        self.dim = int(dim)
        self._tree = _parse(source)
        _check(self._tree, self.dim, source)

    def __call__(self, x) -> float:
        x = np.asarray(x, dtype=float).reshape(-1)
        if x.size != self.dim:
            raise ValueError(f"expected a vector of size {self.dim}, got {x.size}")
        return _evaluate(self._tree, x)

    def __repr__(self) -> str:
        return f"ScalarExpression({self.source!r}, dim={self.dim})"


class VectorExpression:
    """Callable ``g(x) -> array`` compiled from ``{e1, e2, ...}``."""

    def __init__(self, source: str, dim: int) -> None:
        self.source = source
        self.dim = int(dim)
        self.components = [ScalarExpression(part, dim) for part in _split_components(source)]

    def __call__(self, x) -> Array:
        return np.array([component(x) for component in self.components], dtype=float)

    def __len__(self) -> int:
        return len(self.components)

    def __repr__(self) -> str:
        return f"VectorExpression({self.source!r}, dim={self.dim})"


__all__ = ["CONSTANTS", "FUNCTIONS", "ScalarExpression", "VectorExpression"]
