"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from formulafmt.lexer import DISPLAY, scan, tokenize
from formulafmt.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source with the layout policy."""

    def _lex(source: str) -> list[Token]:
        return tokenize(source)

    return _lex


@pytest.fixture
def display():
    """Return a helper that tokenizes source with the display policy."""

    def _display(source: str) -> list[Token]:
        return scan(source, DISPLAY)

    return _display


@pytest.fixture
def types():
    """Return a helper that lists the token types of a token list."""

    def _types(tokens: list[Token]) -> list[TokenType]:
        return [t.type for t in tokens]

    return _types


@pytest.fixture
def values():
    """Return a helper that lists the token values of a token list."""

    def _values(tokens: list[Token]) -> list[str]:
        return [t.value for t in tokens]

    return _values
