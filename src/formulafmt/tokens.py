"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # Literals and references
    FUNCTION = auto()  # identifier followed by (, value upper-cased
    FIELD = auto()  # {Field Name}
    STRING = auto()  # "..." or '...'
    NUMBER = auto()  # digits and dots, or TRUE / FALSE

    # Structural (single-character, except two-character comparisons)
    OPERATOR = auto()  # + - * / & = ! > < == != >= <=
    COMMA = auto()  # ,
    LPAREN = auto()  # (
    RPAREN = auto()  # )

    # Everything else
    TEXT = auto()  # plain identifier or unrecognised character
    WS = auto()  # whitespace run (display scan only)


class HighlightKind(str, Enum):
    """Display-oriented token categories consumed by renderers."""

    FUNCTION = "function"
    FIELD = "field"
    STRING = "string"
    NUMBER = "number"
    OPERATOR = "operator"
    PUNCTUATION = "punctuation"
    TEXT = "text"


_HIGHLIGHT_KINDS = {
    TokenType.FUNCTION: HighlightKind.FUNCTION,
    TokenType.FIELD: HighlightKind.FIELD,
    TokenType.STRING: HighlightKind.STRING,
    TokenType.NUMBER: HighlightKind.NUMBER,
    TokenType.OPERATOR: HighlightKind.OPERATOR,
    TokenType.COMMA: HighlightKind.PUNCTUATION,
    TokenType.LPAREN: HighlightKind.PUNCTUATION,
    TokenType.RPAREN: HighlightKind.PUNCTUATION,
    TokenType.TEXT: HighlightKind.TEXT,
    TokenType.WS: HighlightKind.TEXT,
}


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with normalized value and original source text."""

    type: TokenType
    value: str
    raw: str
    span: Span

    @property
    def highlight_kind(self) -> HighlightKind:
        return _HIGHLIGHT_KINDS[self.type]


@dataclass(frozen=True, slots=True)
class HighlightToken:
    """A ``{text, kind}`` pair; ``text`` is always the exact source slice."""

    text: str
    kind: HighlightKind


DIGITS = frozenset("0123456789")
QUOTES = frozenset("\"'")
SIMPLE_OPERATORS = frozenset("+-*/&")
# Operators that absorb an immediately following "="
COMPARISON_STARTS = frozenset("=!><")
BOOLEANS = frozenset({"TRUE", "FALSE"})

_ASCII_LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")


def is_ident_start(ch: str) -> bool:
    """Return True if ch may begin an identifier."""
    return ch in _ASCII_LETTERS or ch == "_"


def is_ident_char(ch: str) -> bool:
    """Return True if ch may continue an identifier."""
    return ch in _ASCII_LETTERS or ch in DIGITS or ch == "_"


def is_space(ch: str) -> bool:
    return ch != "" and ch.isspace()
