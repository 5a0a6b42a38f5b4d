"""
Error types for calcarg lexing, parsing, and evaluation.
"""

from dataclasses import dataclass
from typing import Optional


class CalcError(Exception):
    """Base exception for all calcarg errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class LexError(CalcError):
    """
    Raised when a formula cannot be split into tokens.

    Examples:
    - Malformed numeric literal (second decimal point)
    - Unrecognized character
    """

    pass


class ParseError(CalcError):
    """
    Raised when the token stream does not form an expression.

    Examples:
    - Unexpected token where an expression was required
    - Literal text not parseable as a single-precision number
    - Missing closing ")" or ">"
    - Tokens left over after the expression
    """

    pass


class EvalError(CalcError):
    """
    Raised when a parsed formula cannot be evaluated.

    Examples:
    - Referenced variable not present in the bindings
    - Bindings document that is not a JSON object of numbers
    """

    pass


class MissingVariableError(EvalError):
    """Raised when a variable reference has no binding."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Cannot find '{name}' in args")


@dataclass
class ErrorContext:
    """
    Location of an error inside a formula.

    Attributes:
        source: The full formula text
        pos: 0-based offset of the offending character
    """

    source: str
    pos: int

    @property
    def line(self) -> int:
        """1-indexed line of the error."""
        return self.source.count("\n", 0, self.pos) + 1

    @property
    def column(self) -> int:
        """1-indexed column of the error."""
        return self.pos - (self.source.rfind("\n", 0, self.pos) + 1) + 1

    def format(self) -> str:
        """
        Format the offending line with a marker under the error column.

        Returns:
            Formatted string like:
                "1:5 | 1 + @"
                "          ^"
        """
        text = self.source.split("\n")[self.line - 1]
        prefix = f"{self.line}:{self.column} | "
        return f"{prefix}{text}\n{' ' * (len(prefix) + self.column - 1)}^"


def make_lex_error(message: str, source: str, pos: int) -> LexError:
    """Helper to create a LexError with context."""
    return LexError(message, ErrorContext(source=source, pos=pos))


def make_parse_error(message: str, source: str, pos: int) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        source: Formula text
        pos: 0-based offset of the offending token

    Returns:
        ParseError with context attached
    """
    return ParseError(message, ErrorContext(source=source, pos=pos))
