"""
Expression tree types for calcarg formulas.

Supports:
- Numeric literals: 100, 0.5 (single precision)
- Variable references: <age>, or a bare identifier
- Arithmetic: +, -, *, /
- Unary negation: -x
"""

from __future__ import annotations

from enum import StrEnum

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary operators for expressions."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


class UnaryOp(StrEnum):
    """Unary operators for expressions."""

    NEG = "-"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class NumberLiteral(BaseModel):
    """A numeric literal, already rounded to single precision."""

    value: float = Field(description="The literal value")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return np.format_float_positional(np.float32(self.value), trim="-")


class VariableRef(BaseModel):
    """
    Reference to a variable in the bindings.

    Examples:
        - VariableRef(name="age") → <age>
    """

    name: str = Field(description="Binding key")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"<{self.name}>"


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        # left spine rendered iteratively; long operator chains are left-deep
        spine: list[BinaryExpr] = []
        node: Expr = self
        while isinstance(node, BinaryExpr):
            spine.append(node)
            node = node.left
        text = str(node)
        for binary in reversed(spine):
            text = f"({text} {binary.op.value} {binary.right})"
        return text


class UnaryExpr(BaseModel):
    """Unary operation: op operand."""

    op: UnaryOp
    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.op.value}{self.operand})"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = NumberLiteral | VariableRef | BinaryExpr | UnaryExpr

# Rebuild models for recursive forward references
BinaryExpr.model_rebuild()
UnaryExpr.model_rebuild()
