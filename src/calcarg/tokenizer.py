"""
Tokenizer for calcarg formulas.

Converts a formula string into a stream of typed tokens, one token per
request.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import StrEnum, auto

from calcarg.errors import make_lex_error


class TokenKind(StrEnum):
    """Token types for the formula language."""

    # Literals
    DIGIT = auto()
    LETTER = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    ASTERISK = auto()
    SLASH = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    LESCAPE = auto()  # <
    RESCAPE = auto()  # >

    # End of input
    EOF = auto()


class Token:
    """A single token from the formula tokenizer."""

    __slots__ = ("kind", "value", "pos")

    def __init__(self, kind: TokenKind, value: str, pos: int) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"


_SINGLE_CHARS: dict[str, TokenKind] = {
    "<": TokenKind.LESCAPE,
    ">": TokenKind.RESCAPE,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.ASTERISK,
    "/": TokenKind.SLASH,
}

_WHITESPACE = " \t\n\r"


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_letter(c: str) -> bool:
    return "a" <= c <= "z" or "A" <= c <= "Z" or c == "_"


class Lexer:
    """Pull-based tokenizer over a single formula.

    Each call to ``next_token`` consumes input up to the end of the returned
    token. Once the input is exhausted every further call returns an EOF
    token.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            yield tok
            if tok.kind == TokenKind.EOF:
                return

    def next_token(self) -> Token:
        self._skip_whitespace()
        n = len(self.source)
        if self.pos >= n:
            return Token(TokenKind.EOF, "", n)

        start = self.pos
        c = self.source[start]

        if c in _SINGLE_CHARS:
            self.pos += 1
            return Token(_SINGLE_CHARS[c], c, start)
        if _is_digit(c):
            return Token(TokenKind.DIGIT, self._read_number(), start)
        if _is_letter(c):
            return Token(TokenKind.LETTER, self._read_word(), start)

        raise make_lex_error(f"unrecognized character: {c!r}", self.source, start)

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos] in _WHITESPACE:
            self.pos += 1

    def _read_number(self) -> str:
        """Read digits with at most one decimal point."""
        start = self.pos
        seen_dot = False
        while self.pos < len(self.source):
            c = self.source[self.pos]
            if c == ".":
                if seen_dot:
                    raise make_lex_error(
                        f"malformed numeric literal: second decimal point in "
                        f"{self.source[start : self.pos + 1]!r}",
                        self.source,
                        self.pos,
                    )
                seen_dot = True
            elif not _is_digit(c):
                break
            self.pos += 1
        return self.source[start : self.pos]

    def _read_word(self) -> str:
        start = self.pos
        while self.pos < len(self.source) and (
            _is_letter(self.source[self.pos]) or _is_digit(self.source[self.pos])
        ):
            self.pos += 1
        return self.source[start : self.pos]


def tokenize(source: str) -> list[Token]:
    """Tokenize a formula into a list of tokens ending with EOF."""
    return list(Lexer(source))
