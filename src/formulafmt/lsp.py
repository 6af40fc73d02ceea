"""Minimal LSP server for formulas — formatting and semantic highlighting."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_FORMATTING,
    TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL,
    DocumentFormattingParams,
    FormattingOptions,
    Position,
    Range,
    SemanticTokens,
    SemanticTokensLegend,
    SemanticTokensParams,
    TextDocumentSyncKind,
    TextEdit,
)
from pygls.lsp.server import LanguageServer

from formulafmt import __version__
from formulafmt.layout import format_formula
from formulafmt.lexer import DISPLAY, scan
from formulafmt.tokens import HighlightKind

# Index in this list is the LSP token type id
TOKEN_TYPES = ["function", "variable", "string", "number", "operator"]

_KIND_TO_TYPE = {
    HighlightKind.FUNCTION: TOKEN_TYPES.index("function"),
    HighlightKind.FIELD: TOKEN_TYPES.index("variable"),
    HighlightKind.STRING: TOKEN_TYPES.index("string"),
    HighlightKind.NUMBER: TOKEN_TYPES.index("number"),
    HighlightKind.OPERATOR: TOKEN_TYPES.index("operator"),
}

LEGEND = SemanticTokensLegend(token_types=TOKEN_TYPES, token_modifiers=[])

server = LanguageServer(
    "formulafmt-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def indent_for(options: FormattingOptions) -> str:
    """Translate the client's formatting options into an indent unit."""
    if options.insert_spaces:
        return " " * max(1, options.tab_size)
    return "\t"


def _end_of(source: str) -> Position:
    lines = source.split("\n")
    return Position(line=len(lines) - 1, character=len(lines[-1]))


def _format_edits(ls: LanguageServer, uri: str, options: FormattingOptions) -> list[TextEdit]:
    """Return a whole-document edit, or nothing if already formatted.

    A trailing newline at the end of the document is kept.
    """
    source = ls.workspace.get_text_document(uri).source
    formatted = format_formula(source, indent_for(options))
    if formatted and source.endswith("\n"):
        formatted += "\n"
    if formatted == source:
        return []
    return [
        TextEdit(
            range=Range(start=Position(line=0, character=0), end=_end_of(source)),
            new_text=formatted,
        )
    ]


def _semantic_tokens(ls: LanguageServer, uri: str) -> SemanticTokens:
    """Encode highlight tokens as relative LSP semantic token data.

    Punctuation, plain text and whitespace are left to the client. Tokens
    spanning several lines are reported once per line.
    """
    source = ls.workspace.get_text_document(uri).source
    data: list[int] = []
    prev_line = 0
    prev_char = 0
    for tok in scan(source, DISPLAY):
        type_id = _KIND_TO_TYPE.get(tok.highlight_kind)
        if type_id is None:
            continue
        line = tok.span.start.line - 1
        char = tok.span.start.column - 1
        for segment in tok.raw.split("\n"):
            if segment:
                delta_line = line - prev_line
                delta_char = char - prev_char if delta_line == 0 else char
                data.extend([delta_line, delta_char, len(segment), type_id, 0])
                prev_line, prev_char = line, char
            line += 1
            char = 0
    return SemanticTokens(data=data)


@server.feature(TEXT_DOCUMENT_FORMATTING)
def formatting(ls: LanguageServer, params: DocumentFormattingParams) -> list[TextEdit]:
    return _format_edits(ls, params.text_document.uri, params.options)


@server.feature(TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL, LEGEND)
def semantic_tokens_full(ls: LanguageServer, params: SemanticTokensParams) -> SemanticTokens:
    return _semantic_tokens(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
