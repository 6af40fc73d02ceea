"""--debug token dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from formulafmt.tokens import Token


def dump_tokens(tokens: list[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one line per token to *file*: position, type and value."""
    if not tokens:
        file.write("(no tokens)\n")
        return
    width = max(len(tok.type.name) for tok in tokens)
    for tok in tokens:
        pos = f"{tok.span.start.line}:{tok.span.start.column}"
        line = f"{pos:>7}  {tok.type.name:<{width}}  {tok.value!r}"
        if tok.raw != tok.value:
            line += f"  (raw {tok.raw!r})"
        file.write(line + "\n")
