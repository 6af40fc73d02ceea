"""Integration test: format all example .formula files and check invariants."""

from __future__ import annotations

from pathlib import Path

import pytest

from formulafmt import format, tokenize_for_display
from formulafmt.lexer import tokenize
from formulafmt.tokens import TokenType

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"


def _find_formula_files() -> list[Path]:
    """Find all .formula files in the examples directory."""
    return sorted(EXAMPLES_DIR.rglob("*.formula"))


@pytest.fixture(params=_find_formula_files(), ids=lambda p: str(p.relative_to(EXAMPLES_DIR)))
def formula_file(request: pytest.FixtureRequest) -> Path:
    return request.param


class TestExampleFiles:
    def test_formats_idempotently(self, formula_file: Path):
        source = formula_file.read_text(encoding="utf-8")
        once = format(source)
        assert once
        assert format(once) == once

    def test_display_round_trip(self, formula_file: Path):
        source = formula_file.read_text(encoding="utf-8")
        formatted = format(source)
        for text in (source, formatted):
            assert "".join(t.text for t in tokenize_for_display(text)) == text

    def test_function_names_upper_cased(self, formula_file: Path):
        formatted = format(formula_file.read_text(encoding="utf-8"))
        for tok in tokenize(formatted):
            if tok.type == TokenType.FUNCTION:
                assert tok.raw == tok.raw.upper()

    def test_no_trailing_spaces(self, formula_file: Path):
        formatted = format(formula_file.read_text(encoding="utf-8"))
        for line in formatted.split("\n"):
            assert not line.endswith(" "), repr(line)

    def test_positions_are_monotonic(self, formula_file: Path):
        """Token start offsets should be strictly increasing."""
        source = formula_file.read_text(encoding="utf-8")
        prev_offset = -1
        for tok in tokenize(source):
            assert tok.span.start.offset > prev_offset
            prev_offset = tok.span.start.offset
