"""Formula lexer — converts source text into a flat token stream.

One scanner serves both consumers. A :class:`ScanPolicy` selects whether
whitespace is captured and whether a call's ``(`` may be separated from the
function name by whitespace. :data:`LAYOUT` drives the formatter,
:data:`DISPLAY` drives highlighting.
"""

from __future__ import annotations

from dataclasses import dataclass

from formulafmt.tokens import (
    BOOLEANS,
    COMPARISON_STARTS,
    DIGITS,
    QUOTES,
    SIMPLE_OPERATORS,
    HighlightToken,
    Position,
    Span,
    Token,
    TokenType,
    is_ident_char,
    is_ident_start,
    is_space,
)


@dataclass(frozen=True, slots=True)
class ScanPolicy:
    """Emission policy for :class:`Lexer`."""

    emit_whitespace: bool
    allow_space_before_call_paren: bool


LAYOUT = ScanPolicy(emit_whitespace=False, allow_space_before_call_paren=False)
DISPLAY = ScanPolicy(emit_whitespace=True, allow_space_before_call_paren=True)

_SINGLE_CHAR = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
}


class Lexer:
    """Tokenize formula source text into a list of Token objects.

    The lexer never fails: unterminated literals run to end of input and
    unknown characters become single-character TEXT tokens.
    """

    def __init__(self, source: str, policy: ScanPolicy = LAYOUT) -> None:
        self._source = source
        self._policy = policy
        self._pos = 0
        self._line = 1
        self._col = 1
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list."""
        while self._pos < len(self._source):
            self._lex_one()
        return self._tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _emit(self, tt: TokenType, start: Position, value: str | None = None) -> Token:
        raw = self._source[start.offset : self._pos]
        tok = Token(tt, raw if value is None else value, raw, Span(start, self._current_pos()))
        self._tokens.append(tok)
        return tok

    # ------------------------------------------------------------------
    # Dispatch, in priority order
    # ------------------------------------------------------------------

    def _lex_one(self) -> None:
        ch = self._peek()
        start = self._current_pos()

        if ch == "{":
            self._lex_field(start)
            return

        if ch in QUOTES:
            self._lex_string(start)
            return

        if ch in DIGITS:
            while self._peek() in DIGITS or self._peek() == ".":
                self._advance()
            self._emit(TokenType.NUMBER, start)
            return

        if ch in SIMPLE_OPERATORS:
            self._advance()
            self._emit(TokenType.OPERATOR, start)
            return

        if ch in COMPARISON_STARTS:
            self._advance()
            if self._peek() == "=":
                self._advance()
            self._emit(TokenType.OPERATOR, start)
            return

        if ch in _SINGLE_CHAR:
            self._advance()
            self._emit(_SINGLE_CHAR[ch], start)
            return

        if is_ident_start(ch):
            self._lex_identifier(start)
            return

        if is_space(ch):
            while is_space(self._peek()):
                self._advance()
            if self._policy.emit_whitespace:
                self._emit(TokenType.WS, start)
            return

        self._advance()
        self._emit(TokenType.TEXT, start)

    # ------------------------------------------------------------------
    # Literals
    # ------------------------------------------------------------------

    def _lex_field(self, start: Position) -> None:
        self._advance()  # consume {
        while self._pos < len(self._source) and self._peek() != "}":
            self._advance()
        if self._pos < len(self._source):
            self._advance()  # consume }
        self._emit(TokenType.FIELD, start)

    def _lex_string(self, start: Position) -> None:
        quote = self._advance()
        while self._pos < len(self._source):
            ch = self._advance()
            if ch == "\\":
                # Escaped character is kept verbatim, whatever it is
                if self._pos < len(self._source):
                    self._advance()
            elif ch == quote:
                break
        self._emit(TokenType.STRING, start)

    # ------------------------------------------------------------------
    # Identifiers, functions and booleans
    # ------------------------------------------------------------------

    def _lex_identifier(self, start: Position) -> None:
        while is_ident_char(self._peek()):
            self._advance()
        text = self._source[start.offset : self._pos]
        upper = text.upper()

        if self._is_call_paren_next():
            self._emit(TokenType.FUNCTION, start, upper)
        elif upper in BOOLEANS:
            self._emit(TokenType.NUMBER, start, upper)
        else:
            self._emit(TokenType.TEXT, start)

    def _is_call_paren_next(self) -> bool:
        """Look ahead (without consuming) for the ``(`` of a call."""
        offset = 0
        if self._policy.allow_space_before_call_paren:
            while is_space(self._peek(offset)):
                offset += 1
        return self._peek(offset) == "("


def scan(source: str, policy: ScanPolicy) -> list[Token]:
    """Tokenize source text under an explicit policy."""
    return Lexer(source, policy).tokenize()


def tokenize(source: str) -> list[Token]:
    """Convenience function: layout tokens, whitespace dropped."""
    return Lexer(source, LAYOUT).tokenize()


def tokenize_for_display(source: str) -> list[HighlightToken]:
    """Classify every character of source for highlighting.

    Concatenating the ``text`` of the result reproduces ``source`` exactly.
    """
    tokens = Lexer(source, DISPLAY).tokenize()
    return [HighlightToken(tok.raw, tok.highlight_kind) for tok in tokens]
