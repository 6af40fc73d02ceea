"""Whitespace cleanup for formatted output."""

from __future__ import annotations

import re

_TRAILING_SPACES = re.compile(r" +$")
_INTERIOR_SPACES = re.compile(r"(?<=[^ \t]) {2,}(?=[^ \t])")
_BLANK_LINES = re.compile(r"\n\s*\n+")


def tidy_whitespace(text: str) -> str:
    """Apply the formatter's final whitespace rules to assembled output.

    Algorithm:
    1. Split into lines.
    2. Strip trailing spaces from each line. Tabs are indentation and stay.
    3. Collapse interior runs of two or more spaces to one space.
    4. Rejoin with newline and collapse blank lines.
    5. Strip leading and trailing whitespace of the whole result.
    """
    if not text:
        return text

    lines = [_tidy_line(line) for line in text.split("\n")]
    return _BLANK_LINES.sub("\n", "\n".join(lines)).strip()


def _tidy_line(line: str) -> str:
    line = _TRAILING_SPACES.sub("", line)
    return _INTERIOR_SPACES.sub(" ", line)
