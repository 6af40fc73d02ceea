"""Tests for the LSP server — formatting edits and semantic tokens."""

from __future__ import annotations

import pytest
from lsprotocol.types import (
    FormattingOptions,
    TextDocumentItem,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer
from pygls.workspace import Workspace

from formulafmt.lsp import TOKEN_TYPES, _format_edits, _semantic_tokens, indent_for

URI = "file:///test.formula"
TABS = FormattingOptions(tab_size=4, insert_spaces=False)


@pytest.fixture
def lsp_env():
    """Create a LanguageServer with an initialized workspace."""
    ls = LanguageServer("test", "v0", text_document_sync_kind=TextDocumentSyncKind.Full)
    ws = Workspace(None)
    ls.protocol._workspace = ws

    def put(source: str, uri: str = URI) -> None:
        ws.put_text_document(
            TextDocumentItem(uri=uri, language_id="formula", version=0, text=source)
        )

    return ls, put


def _decode(data: list[int]) -> list[tuple[int, int, int, str]]:
    """Turn relative semantic token data into absolute (line, char, length, type)."""
    result = []
    line = char = 0
    for i in range(0, len(data), 5):
        delta_line, delta_char, length, type_id, _ = data[i : i + 5]
        if delta_line:
            line += delta_line
            char = delta_char
        else:
            char += delta_char
        result.append((line, char, length, TOKEN_TYPES[type_id]))
    return result


# ---------------------------------------------------------------------------
# Formatting options → indent unit
# ---------------------------------------------------------------------------


class TestIndentFor:
    def test_tabs(self) -> None:
        assert indent_for(TABS) == "\t"

    def test_spaces(self) -> None:
        assert indent_for(FormattingOptions(tab_size=2, insert_spaces=True)) == "  "


# ---------------------------------------------------------------------------
# textDocument/formatting
# ---------------------------------------------------------------------------


class TestFormatting:
    def test_whole_document_edit(self, lsp_env) -> None:
        ls, put = lsp_env
        put("if(a,b)\n")
        edits = _format_edits(ls, URI, TABS)
        assert len(edits) == 1
        edit = edits[0]
        assert edit.new_text == "IF(\n\ta,\n\tb\n)\n"
        assert edit.range.start.line == 0
        assert edit.range.start.character == 0
        assert edit.range.end.line == 1
        assert edit.range.end.character == 0

    def test_end_of_last_line(self, lsp_env) -> None:
        ls, put = lsp_env
        put("sum(\n  x)")
        (edit,) = _format_edits(ls, URI, TABS)
        assert edit.new_text == "SUM(x)"
        assert edit.range.end.line == 1
        assert edit.range.end.character == 4

    def test_already_formatted(self, lsp_env) -> None:
        ls, put = lsp_env
        put("SUM({A})")
        assert _format_edits(ls, URI, TABS) == []

    def test_already_formatted_with_trailing_newline(self, lsp_env) -> None:
        ls, put = lsp_env
        put("IF(\n\ta,\n\tb\n)\n")
        assert _format_edits(ls, URI, TABS) == []

    def test_blank_document_with_newline(self, lsp_env) -> None:
        ls, put = lsp_env
        put("  \n")
        (edit,) = _format_edits(ls, URI, TABS)
        assert edit.new_text == ""

    def test_uses_client_indent(self, lsp_env) -> None:
        ls, put = lsp_env
        put("IF(a,b)")
        (edit,) = _format_edits(ls, URI, FormattingOptions(tab_size=2, insert_spaces=True))
        assert edit.new_text == "IF(\n  a,\n  b\n)"


# ---------------------------------------------------------------------------
# textDocument/semanticTokens/full
# ---------------------------------------------------------------------------


class TestSemanticTokens:
    def test_single_line(self, lsp_env) -> None:
        ls, put = lsp_env
        put('IF({A} > 1, "x")')
        tokens = _decode(_semantic_tokens(ls, URI).data)
        assert tokens == [
            (0, 0, 2, "function"),
            (0, 3, 3, "variable"),
            (0, 7, 1, "operator"),
            (0, 9, 1, "number"),
            (0, 12, 3, "string"),
        ]

    def test_multi_line(self, lsp_env) -> None:
        ls, put = lsp_env
        put("IF(\n\t{A},\n\t2\n)")
        tokens = _decode(_semantic_tokens(ls, URI).data)
        assert tokens == [
            (0, 0, 2, "function"),
            (1, 1, 3, "variable"),
            (2, 1, 1, "number"),
        ]

    def test_string_spanning_lines_is_split(self, lsp_env) -> None:
        ls, put = lsp_env
        put('"ab\ncde"')
        tokens = _decode(_semantic_tokens(ls, URI).data)
        assert tokens == [(0, 0, 3, "string"), (1, 0, 4, "string")]

    def test_empty_document(self, lsp_env) -> None:
        ls, put = lsp_env
        put("")
        assert _semantic_tokens(ls, URI).data == []
