"""
Operator-precedence (Pratt) parser for calcarg formulas.

Grammar (precedence low to high):
    expr           → additive
    additive       → multiplicative (("+"|"-") multiplicative)*
    multiplicative → unary (("*"|"/") unary)*
    unary          → "-" unary | primary
    primary        → NUMBER | IDENT | "(" expr ")" | "<" expr ">"

Every token kind that can start an expression has a prefix rule; every
binary operator has an infix rule and a precedence. Binary operators are
left-associative: the right operand is parsed at the operator's own
precedence, so ``a - b - c`` is ``(a - b) - c``.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from calcarg.errors import make_parse_error
from calcarg.expressions import (
    BinaryExpr,
    BinaryOp,
    Expr,
    NumberLiteral,
    UnaryExpr,
    UnaryOp,
    VariableRef,
)
from calcarg.tokenizer import Lexer, Token, TokenKind


class Precedence(IntEnum):
    """Binding power of operator tokens."""

    LOWEST = 1
    SUM = 2  # +, -
    PRODUCT = 3  # *, /
    PREFIX = 4  # -X
    CALL = 5  # (X)
    ESCAPE = 6  # <X>


_PRECEDENCES: dict[TokenKind, Precedence] = {
    TokenKind.PLUS: Precedence.SUM,
    TokenKind.MINUS: Precedence.SUM,
    TokenKind.ASTERISK: Precedence.PRODUCT,
    TokenKind.SLASH: Precedence.PRODUCT,
    TokenKind.LPAREN: Precedence.CALL,
    TokenKind.LESCAPE: Precedence.ESCAPE,
}

_BINARY_OPS: dict[TokenKind, BinaryOp] = {
    TokenKind.PLUS: BinaryOp.ADD,
    TokenKind.MINUS: BinaryOp.SUB,
    TokenKind.ASTERISK: BinaryOp.MUL,
    TokenKind.SLASH: BinaryOp.DIV,
}

_DESCRIPTIONS: dict[TokenKind, str] = {
    TokenKind.EOF: "end of input",
    TokenKind.DIGIT: "number",
    TokenKind.LETTER: "identifier",
}


class ParseOptions(BaseModel):
    """Parser settings.

    Attributes:
        require_eof: Reject formulas with tokens left over after the
            top-level expression. When False, trailing tokens are ignored.
    """

    require_eof: bool = Field(default=True, description="Reject trailing tokens")

    model_config = ConfigDict(frozen=True)


def _describe(tok: Token) -> str:
    if tok.kind in _DESCRIPTIONS:
        label = _DESCRIPTIONS[tok.kind]
        return f"{label} {tok.value!r}" if tok.value else label
    return repr(tok.value)


class _Parser:
    """Pratt parser pulling tokens from a lexer."""

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self.current = lexer.next_token()
        self.peek = lexer.next_token()

        self.prefix_rules: dict[TokenKind, Callable[[], Expr]] = {
            TokenKind.DIGIT: self.parse_number,
            TokenKind.LETTER: self.parse_variable,
            TokenKind.MINUS: self.parse_unary,
            TokenKind.LPAREN: self.parse_grouped,
            TokenKind.LESCAPE: self.parse_escaped,
        }
        self.infix_rules: dict[TokenKind, Callable[[Expr], Expr]] = {
            kind: self.parse_binary for kind in _BINARY_OPS
        }

    @property
    def source(self) -> str:
        return self.lexer.source

    def advance(self) -> None:
        self.current = self.peek
        self.peek = self.lexer.next_token()

    def expect_peek(self, kind: TokenKind, what: str) -> None:
        if self.peek.kind != kind:
            raise make_parse_error(
                f"expected {what}, got {_describe(self.peek)}",
                self.source,
                self.peek.pos,
            )
        self.advance()

    def peek_precedence(self) -> Precedence:
        return _PRECEDENCES.get(self.peek.kind, Precedence.LOWEST)

    def current_precedence(self) -> Precedence:
        return _PRECEDENCES.get(self.current.kind, Precedence.LOWEST)

    # -- Core loop --

    def parse_expression(self, precedence: Precedence) -> Expr:
        prefix = self.prefix_rules.get(self.current.kind)
        if prefix is None:
            raise make_parse_error(
                f"unexpected token in expression position: {_describe(self.current)}",
                self.source,
                self.current.pos,
            )
        left = prefix()

        while precedence < self.peek_precedence():
            infix = self.infix_rules.get(self.peek.kind)
            if infix is None:
                return left
            self.advance()
            left = infix(left)

        return left

    # -- Prefix rules --

    def parse_number(self) -> NumberLiteral:
        tok = self.current
        try:
            with np.errstate(over="ignore"):
                value = np.float32(float(tok.value))
        except ValueError:
            value = None
        if value is None or not np.isfinite(value):
            raise make_parse_error(
                f"cannot parse literal {tok.value!r} as a single-precision number",
                self.source,
                tok.pos,
            )
        return NumberLiteral(value=float(value))

    def parse_variable(self) -> VariableRef:
        return VariableRef(name=self.current.value)

    def parse_unary(self) -> UnaryExpr:
        self.advance()
        operand = self.parse_expression(Precedence.PREFIX)
        return UnaryExpr(op=UnaryOp.NEG, operand=operand)

    def parse_grouped(self) -> Expr:
        self.advance()
        expr = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TokenKind.RPAREN, "closing parenthesis")
        return expr

    def parse_escaped(self) -> Expr:
        self.advance()
        expr = self.parse_expression(Precedence.LOWEST)
        self.expect_peek(TokenKind.RESCAPE, "closing escape marker")
        return expr

    # -- Infix rules --

    def parse_binary(self, left: Expr) -> BinaryExpr:
        op = _BINARY_OPS[self.current.kind]
        precedence = self.current_precedence()
        self.advance()
        right = self.parse_expression(precedence)
        return BinaryExpr(op=op, left=left, right=right)


def parse_expr(source: str, options: ParseOptions | None = None) -> Expr:
    """Parse a formula into an expression tree.

    Args:
        source: Formula text (e.g., "(100-<age>)*<health>/100")
        options: Parser settings; defaults to ``ParseOptions()``.

    Returns:
        Root of the parsed expression tree.

    Raises:
        LexError: If the formula contains a malformed literal or an
            unrecognized character.
        ParseError: If the tokens do not form a single expression, or the
            formula is nested too deeply to parse.
    """
    options = options or ParseOptions()
    parser = _Parser(Lexer(source))
    try:
        expr = parser.parse_expression(Precedence.LOWEST)
    except RecursionError as e:
        raise make_parse_error(
            "formula nested too deeply", source, parser.current.pos
        ) from e

    if options.require_eof and parser.peek.kind != TokenKind.EOF:
        raise make_parse_error(
            f"unexpected token after expression: {_describe(parser.peek)}",
            source,
            parser.peek.pos,
        )

    return expr
