"""
Parse-once, evaluate-many façade over the formula pipeline.

Usage:
    from calcarg import parse

    calc = parse("(100-<age>)*<health>/100")
    calc.evaluate({"age": 21, "health": 60})  # 47.4
    calc.evaluate({"age": 40, "health": 90})  # 54.0
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from calcarg.errors import EvalError
from calcarg.evaluator import evaluate
from calcarg.expressions import Expr
from calcarg.parser import ParseOptions, parse_expr

logger = logging.getLogger(__name__)


class Calculator(BaseModel):
    """A parsed formula, ready to be evaluated with different bindings."""

    formula: str = Field(description="Formula text as given to parse()")
    root: Expr = Field(description="Root of the expression tree")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.root)

    def evaluate(self, bindings: Mapping[str, float]) -> float:
        """Evaluate the formula against ``bindings``.

        Raises:
            MissingVariableError: If a referenced variable has no binding.
        """
        return evaluate(self.root, bindings)

    eval = evaluate

    def evaluate_json(self, args_json: str) -> float:
        """Evaluate the formula against a JSON object of name -> number.

        Example:
            calc.evaluate_json('{"age": 21, "health": 60}')

        Raises:
            EvalError: If ``args_json`` is not a JSON object whose values are
                all numbers.
            MissingVariableError: If a referenced variable has no binding.
        """
        try:
            args = json.loads(args_json)
        except json.JSONDecodeError as e:
            raise EvalError(f"Invalid JSON bindings: {e}") from e

        if not isinstance(args, dict):
            raise EvalError(f"JSON bindings must be an object, got {type(args).__name__}")
        for key, value in args.items():
            if isinstance(value, bool) or not isinstance(value, int | float):
                raise EvalError(f"Binding '{key}' must be a number, got {value!r}")

        return self.evaluate(args)


def parse(formula: str, options: ParseOptions | None = None) -> Calculator:
    """Parse a formula into a reusable Calculator.

    Args:
        formula: Formula text, e.g. "(100-<age>)*<health>/100".
        options: Parser settings; defaults to ``ParseOptions()``.

    Returns:
        Calculator holding the formula and its expression tree.

    Raises:
        LexError: If the formula cannot be tokenized.
        ParseError: If the formula is not a single valid expression.
    """
    root = parse_expr(formula, options)
    logger.debug("Parsed formula %r as %s", formula, root)
    return Calculator(formula=formula, root=root)


analyse = parse
