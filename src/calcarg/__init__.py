"""
calcarg: arithmetic formulas with named variables.

Tokenizer, Pratt parser, and evaluator for formulas such as
``(100-<age>)*<health>/100``. Parse once, evaluate many times:

    from calcarg import parse

    calc = parse("(100-<age>)*<health>/100")
    result = calc.evaluate({"age": 21, "health": 60})
    # result == 47.4 (single precision)
"""

from calcarg._version import __version__
from calcarg.calculator import Calculator, analyse, parse
from calcarg.errors import (
    CalcError,
    ErrorContext,
    EvalError,
    LexError,
    MissingVariableError,
    ParseError,
)
from calcarg.evaluator import evaluate
from calcarg.expressions import (
    BinaryExpr,
    BinaryOp,
    Expr,
    NumberLiteral,
    UnaryExpr,
    UnaryOp,
    VariableRef,
)
from calcarg.parser import ParseOptions, parse_expr
from calcarg.tokenizer import Lexer, Token, TokenKind, tokenize

__all__ = [
    "BinaryExpr",
    "BinaryOp",
    "CalcError",
    "Calculator",
    "ErrorContext",
    "EvalError",
    "Expr",
    "LexError",
    "Lexer",
    "MissingVariableError",
    "NumberLiteral",
    "ParseError",
    "ParseOptions",
    "Token",
    "TokenKind",
    "UnaryExpr",
    "UnaryOp",
    "VariableRef",
    "__version__",
    "analyse",
    "evaluate",
    "parse",
    "parse_expr",
    "tokenize",
]
