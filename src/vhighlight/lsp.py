"""Minimal LSP server for V: semantic tokens and document outline."""

from __future__ import annotations

from bisect import bisect_right

from lsprotocol.types import (
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL,
    TEXT_DOCUMENT_SEMANTIC_TOKENS_RANGE,
    DocumentSymbol,
    DocumentSymbolParams,
    Position,
    Range,
    SemanticTokens,
    SemanticTokensLegend,
    SemanticTokensParams,
    SemanticTokensRangeParams,
    SymbolKind,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer
from pygls.workspace import PositionCodec

from vhighlight import __version__
from vhighlight.highlighter import Highlighter
from vhighlight.tokens import Category, Span

TOKEN_TYPES = [c.value for c in Category]
_TOKEN_INDEX = {c: i for i, c in enumerate(Category)}

LEGEND = SemanticTokensLegend(token_types=TOKEN_TYPES, token_modifiers=[])

_SYMBOL_KINDS = {
    "function": SymbolKind.Function,
    "struct": SymbolKind.Struct,
    "interface": SymbolKind.Interface,
    "type": SymbolKind.Class,
    "enum": SymbolKind.Enum,
    "module": SymbolKind.Module,
    "todo": SymbolKind.String,
}

server = LanguageServer(
    "vhighlight-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)
highlighter = Highlighter()


def offset_at(source: str, line: int, character: int, codec: PositionCodec | None = None) -> int:
    """Convert a 0-based LSP line/character pair into a buffer offset.

    *character* counts client code units per *codec*; without one it counts
    code points.
    """
    offset = 0
    for _ in range(line):
        nl = source.find("\n", offset)
        if nl == -1:
            return len(source)
        offset = nl + 1
    line_end = source.find("\n", offset)
    if line_end == -1:
        line_end = len(source)
    if codec is None:
        return min(offset + character, line_end)
    units = 0
    while offset < line_end and units < character:
        units += codec.client_num_units(source[offset])
        offset += 1
    return offset


def line_starts(source: str) -> list[int]:
    """Return the offset at which each line of *source* begins."""
    starts = [0]
    nl = source.find("\n")
    while nl != -1:
        starts.append(nl + 1)
        nl = source.find("\n", nl + 1)
    return starts


def _units(text: str, codec: PositionCodec | None) -> int:
    return len(text) if codec is None else codec.client_num_units(text)


def _lsp_position(
    source: str, starts: list[int], offset: int, codec: PositionCodec | None
) -> Position:
    line = bisect_right(starts, offset) - 1
    return Position(line=line, character=_units(source[starts[line] : offset], codec))


def encode_tokens(
    source: str, spans: list[Span], codec: PositionCodec | None = None
) -> list[int]:
    """Encode spans as LSP relative semantic-token data, one token per line piece.

    Spans arrive in order, so columns are measured from the previous token
    on the same line and each character is counted once.
    """
    starts = line_starts(source)
    data: list[int] = []
    prev_line = 0
    prev_char = 0
    prev_offset = 0
    for span in spans:
        kind = _TOKEN_INDEX[span.category]
        pos = span.start
        while pos < span.end:
            nl = source.find("\n", pos, span.end)
            piece_end = span.end if nl == -1 else nl
            if piece_end > pos:
                line = bisect_right(starts, pos) - 1
                if line == prev_line:
                    char = prev_char + _units(source[prev_offset:pos], codec)
                    delta_char = char - prev_char
                else:
                    char = _units(source[starts[line] : pos], codec)
                    delta_char = char
                length = _units(source[pos:piece_end], codec)
                data.extend([line - prev_line, delta_char, length, kind, 0])
                prev_line, prev_char, prev_offset = line, char, pos
            pos = piece_end + 1
    return data


def _semantic_tokens(ls: LanguageServer, uri: str, lsp_range: Range | None = None) -> SemanticTokens:
    """Classify the document (or a range of it) and encode the result."""
    document = ls.workspace.get_text_document(uri)
    source = document.source
    codec = document.position_codec
    region = None
    if lsp_range is not None:
        region = (
            offset_at(source, lsp_range.start.line, lsp_range.start.character, codec),
            offset_at(source, lsp_range.end.line, lsp_range.end.character, codec),
        )
    spans = highlighter.classify(source, region)
    return SemanticTokens(data=encode_tokens(source, spans, codec))


def _document_symbols(ls: LanguageServer, uri: str) -> list[DocumentSymbol]:
    """Turn outline entries into flat document symbols."""
    document = ls.workspace.get_text_document(uri)
    source = document.source
    codec = document.position_codec
    starts = line_starts(source)
    symbols: list[DocumentSymbol] = []
    for entry in highlighter.outline(source):
        rng = Range(
            start=_lsp_position(source, starts, entry.offset, codec),
            end=_lsp_position(source, starts, entry.offset + len(entry.label), codec),
        )
        symbols.append(
            DocumentSymbol(
                name=entry.label,
                kind=_SYMBOL_KINDS.get(entry.kind, SymbolKind.Variable),
                range=rng,
                selection_range=rng,
                detail=entry.kind,
            )
        )
    return symbols


@server.feature(TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL, LEGEND)
def semantic_tokens_full(ls: LanguageServer, params: SemanticTokensParams) -> SemanticTokens:
    return _semantic_tokens(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_SEMANTIC_TOKENS_RANGE, LEGEND)
def semantic_tokens_range(
    ls: LanguageServer, params: SemanticTokensRangeParams
) -> SemanticTokens:
    return _semantic_tokens(ls, params.text_document.uri, params.range)


@server.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbol(ls: LanguageServer, params: DocumentSymbolParams) -> list[DocumentSymbol]:
    return _document_symbols(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
