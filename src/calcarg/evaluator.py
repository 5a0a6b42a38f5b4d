"""
Expression evaluator for calcarg formulas.

Evaluates expression tree nodes against a binding map (variable name to
number). Pure evaluation: no I/O, no side effects, and the tree and the
bindings are never modified. All arithmetic is carried out in single
precision.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

import numpy as np

from calcarg.errors import EvalError, MissingVariableError
from calcarg.expressions import (
    BinaryExpr,
    BinaryOp,
    Expr,
    NumberLiteral,
    UnaryExpr,
    UnaryOp,
    VariableRef,
)

logger = logging.getLogger(__name__)

_ZERO = np.float32(0)


def evaluate(expr: Expr, bindings: Mapping[str, float]) -> float:
    """Evaluate an expression tree against a binding map.

    Division by zero yields 0 rather than an error or infinity.

    Args:
        expr: Parsed expression tree.
        bindings: Variable name -> value. Only the names the tree references
            are looked up.

    Returns:
        The result as a float holding a single-precision value.

    Raises:
        MissingVariableError: If the tree references a name that is not in
            ``bindings``.
        EvalError: If the tree is nested too deeply to walk.
    """
    try:
        with np.errstate(over="ignore", invalid="ignore"):
            return float(_interpret(expr, bindings))
    except RecursionError as e:
        raise EvalError("formula nested too deeply") from e


def _interpret(expr: Expr, bindings: Mapping[str, float]) -> np.float32:
    """Dispatch evaluation to the appropriate handler."""
    if isinstance(expr, NumberLiteral):
        return np.float32(expr.value)

    if isinstance(expr, VariableRef):
        return _interpret_variable(expr, bindings)

    if isinstance(expr, UnaryExpr):
        return _interpret_unary(expr, bindings)

    if isinstance(expr, BinaryExpr):
        return _interpret_binary(expr, bindings)

    raise EvalError(f"Unknown expression type: {type(expr).__name__}")


def _interpret_variable(expr: VariableRef, bindings: Mapping[str, float]) -> np.float32:
    if expr.name not in bindings:
        logger.debug("Variable %r missing from bindings %s", expr.name, sorted(bindings))
        raise MissingVariableError(expr.name)
    value = bindings[expr.name]
    try:
        return np.float32(value)
    except OverflowError:
        # integers beyond float range saturate like out-of-range floats
        return np.float32(np.inf if value > 0 else -np.inf)


def _interpret_unary(expr: UnaryExpr, bindings: Mapping[str, float]) -> np.float32:
    """Evaluate a unary expression; operators other than negation give 0."""
    val = _interpret(expr.operand, bindings)
    if expr.op == UnaryOp.NEG:
        return -val
    return _ZERO


def _interpret_binary(expr: BinaryExpr, bindings: Mapping[str, float]) -> np.float32:
    """Evaluate a binary expression, left operand first.

    Left-associative chains such as ``1 + 2 + ... + n`` form a left-deep
    tree; the left spine is walked iteratively so its length does not count
    against the recursion limit.
    """
    spine: list[BinaryExpr] = []
    node: Expr = expr
    while isinstance(node, BinaryExpr):
        spine.append(node)
        node = node.left

    result = _interpret(node, bindings)
    for binary in reversed(spine):
        right = _interpret(binary.right, bindings)
        result = _apply_binary(binary.op, result, right)
    return result


def _apply_binary(op: BinaryOp, left: np.float32, right: np.float32) -> np.float32:
    if op == BinaryOp.ADD:
        return left + right
    if op == BinaryOp.SUB:
        return left - right
    if op == BinaryOp.MUL:
        return left * right
    if op == BinaryOp.DIV:
        if right == 0:
            return _ZERO
        return left / right

    return _ZERO
