"""Minimal LSP server for AppDelegate files: diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from sdkinject import __version__, make_injection, rules, rules_for
from sdkinject.errors import StructureNotFoundError
from sdkinject.project import APP_DELEGATE_NAMES
from sdkinject.sdk import SdkModule
from sdkinject.text import position_at

server = LanguageServer(
    "sdkinject-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _range_at(source: str, offset: int) -> Range:
    pos = position_at(source, offset)
    return Range(
        start=Position(line=pos.line - 1, character=pos.column - 1),
        end=Position(line=pos.line - 1, character=pos.column),
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Scan an AppDelegate and publish diagnostics about the SDK start call."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    diagnostics: list[Diagnostic] = []

    found = rules_for(filename)
    if found is not None and filename.lower() in APP_DELEGATE_NAMES:
        rule_set = found[0]
        # The recognition pattern does not depend on the secret or modules
        injection = make_injection(filename, "", SdkModule.ALL)
        bag = rule_set.analyze(source, injection)
        try:
            rules.check_anchors(source, bag, filename, rule_set.TYPE_LABEL)
        except StructureNotFoundError as exc:
            diagnostics.append(
                Diagnostic(
                    range=_range_at(source, exc.offset or 0),
                    message=exc.message,
                    severity=DiagnosticSeverity.Error,
                    source="sdkinject",
                )
            )
        else:
            if bag.start_call_start == rules.NOT_FOUND:
                diagnostics.append(
                    Diagnostic(
                        range=_range_at(source, bag.application_start - 1),
                        message="MSMobileCenter start call not found in 'application'",
                        severity=DiagnosticSeverity.Information,
                        source="sdkinject",
                    )
                )

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
