"""Pretty-printer — renders the layout token stream as indented text.

Calls with two or more top-level arguments are broken open: each argument
goes on its own line, one indent unit deeper, and the closing ``)`` returns
to the call's level. Zero- and one-argument calls stay inline.

Emission is a fold over the tokens. Each step takes a :class:`LayoutState`
and returns the next state together with the text to append, so no state
outlives a single :func:`format_formula` call.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from formulafmt.lexer import tokenize
from formulafmt.strings import tidy_whitespace
from formulafmt.tokens import Token, TokenType

DEFAULT_INDENT = "\t"

# An operator gets no space on the side facing one of these
_NO_SPACE_BEFORE_OPERATOR = frozenset({TokenType.LPAREN, TokenType.COMMA, TokenType.OPERATOR})
_NO_SPACE_AFTER_OPERATOR = frozenset({TokenType.RPAREN, TokenType.COMMA, TokenType.OPERATOR})


@dataclass(frozen=True, slots=True)
class LayoutState:
    """Formatter state between two tokens."""

    depth: int = 0
    multiline: bool = False
    last_char: str = ""


def measure_calls(tokens: list[Token]) -> dict[int, int]:
    """Map each LPAREN index to the number of commas directly inside it.

    Commas nested in deeper parentheses are not counted. An unmatched
    LPAREN counts up to end of input; an unmatched RPAREN is ignored.
    """
    counts: dict[int, int] = {}
    stack: list[int] = []
    for i, tok in enumerate(tokens):
        if tok.type == TokenType.LPAREN:
            counts[i] = 0
            stack.append(i)
        elif tok.type == TokenType.RPAREN:
            if stack:
                stack.pop()
        elif tok.type == TokenType.COMMA and stack:
            counts[stack[-1]] += 1
    return counts


def format_formula(formula: str, indent: str = DEFAULT_INDENT) -> str:
    """Format a formula. Never raises; malformed input is formatted best-effort."""
    if not formula.strip():
        return ""

    return tidy_whitespace(format_tokens(tokenize(formula), indent))


def format_tokens(tokens: list[Token], indent: str = DEFAULT_INDENT) -> str:
    """Render layout tokens without the final whitespace cleanup."""
    counts = measure_calls(tokens)
    state = LayoutState()
    parts: list[str] = []
    for i, tok in enumerate(tokens):
        prev_tok = tokens[i - 1] if i > 0 else None
        next_tok = tokens[i + 1] if i + 1 < len(tokens) else None
        state, text = step(state, tok, prev_tok, next_tok, counts.get(i, 0), indent)
        parts.append(text)
    return "".join(parts)


def step(
    state: LayoutState,
    tok: Token,
    prev_tok: Token | None,
    next_tok: Token | None,
    arg_commas: int,
    indent: str = DEFAULT_INDENT,
) -> tuple[LayoutState, str]:
    """Emit one token. ``arg_commas`` is only meaningful for LPAREN."""
    if tok.type == TokenType.LPAREN:
        if arg_commas > 0:
            depth = state.depth + 1
            return _advance(state, "(\n" + indent * depth, depth=depth, multiline=True)
        return _advance(state, "(")

    if tok.type == TokenType.RPAREN:
        depth = max(0, state.depth - 1)
        text = ")"
        if state.multiline and (prev_tok is None or prev_tok.type != TokenType.LPAREN):
            text = "\n" + indent * depth + text
        return _advance(state, text, depth=depth, multiline=state.multiline and depth > 0)

    if tok.type == TokenType.COMMA:
        text = ","
        if next_tok is not None and next_tok.type != TokenType.RPAREN:
            text += "\n" + indent * state.depth
        return _advance(state, text)

    if tok.type == TokenType.OPERATOR:
        return _advance(state, _space_operator(state, tok, prev_tok, next_tok))

    return _advance(state, tok.value)


def _space_operator(
    state: LayoutState, tok: Token, prev_tok: Token | None, next_tok: Token | None
) -> str:
    text = tok.value
    if (
        prev_tok is not None
        and prev_tok.type not in _NO_SPACE_BEFORE_OPERATOR
        and state.last_char not in (" ", "\n", "\t")
    ):
        text = " " + text
    if next_tok is not None and next_tok.type not in _NO_SPACE_AFTER_OPERATOR:
        text += " "
    return text


def _advance(state: LayoutState, text: str, **changes: object) -> tuple[LayoutState, str]:
    if text:
        changes["last_char"] = text[-1]
    return replace(state, **changes), text
