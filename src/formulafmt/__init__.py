"""Formatter and highlighter for spreadsheet-style formulas."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from formulafmt.tokens import HighlightToken

__version__ = "0.1.0"


def format(formula: str, indent: str = "\t") -> str:
    """Re-indent and normalize a formula. Never raises."""
    from formulafmt.layout import format_formula

    return format_formula(formula, indent)


def tokenize_for_display(formula: str) -> list[HighlightToken]:
    """Classify every character of a formula for highlighting. Never raises."""
    from formulafmt.lexer import tokenize_for_display as _tokenize_for_display

    return _tokenize_for_display(formula)
