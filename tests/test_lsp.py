"""Tests for the LSP server: diagnostic generation."""

from __future__ import annotations

import pytest
from lsprotocol.types import (
    DiagnosticSeverity,
    PublishDiagnosticsParams,
    TextDocumentItem,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer
from pygls.workspace import Workspace

from sdkinject.lsp import _validate


@pytest.fixture
def lsp_env():
    """Create a LanguageServer with an initialized workspace and captured diagnostics."""
    ls = LanguageServer("test", "v0", text_document_sync_kind=TextDocumentSyncKind.Full)
    ws = Workspace(None)
    ls.protocol._workspace = ws

    published: list[PublishDiagnosticsParams] = []
    ls.text_document_publish_diagnostics = lambda params: published.append(params)

    def put(source: str, uri: str = "file:///AppDelegate.swift") -> None:
        ws.put_text_document(
            TextDocumentItem(uri=uri, language_id="swift", version=0, text=source)
        )

    return ls, published, put


class TestStructureErrors:
    def test_missing_method(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("import UIKit\n\nclass AppDelegate {\n}\n")
        _validate(ls, "file:///AppDelegate.swift")

        assert len(published) == 1
        diags = published[0].diagnostics
        assert len(diags) == 1
        d = diags[0]
        assert d.severity == DiagnosticSeverity.Error
        assert "function 'application'" in d.message
        assert d.source == "sdkinject"
        # Reported at the class declaration (line 3, 0-based 2)
        assert d.range.start.line == 2
        assert d.range.start.character == 0

    def test_missing_class(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("import UIKit\n")
        _validate(ls, "file:///AppDelegate.swift")

        d = published[0].diagnostics[0]
        assert d.severity == DiagnosticSeverity.Error
        assert d.message == "class 'AppDelegate' is not defined"
        assert d.range.start.line == 0


class TestStartCall:
    def test_missing_call_is_information(self, lsp_env, swift_source) -> None:
        ls, published, put = lsp_env
        put(swift_source)
        _validate(ls, "file:///AppDelegate.swift")

        diags = published[0].diagnostics
        assert len(diags) == 1
        assert diags[0].severity == DiagnosticSeverity.Information
        assert "start call not found" in diags[0].message
        # Points at the method's opening brace
        assert diags[0].range.start.line == 7
        assert diags[0].range.start.character == 143

    def test_call_present_is_clean(self, lsp_env, swift_source) -> None:
        ls, published, put = lsp_env
        patched = swift_source.replace(
            "-> Bool {\n",
            '-> Bool {\n        MSMobileCenter.start("s", withServices: [MSCrashes.self])\n',
        )
        put(patched)
        _validate(ls, "file:///AppDelegate.swift")
        assert published[0].diagnostics == []

    def test_objc_clean(self, lsp_env, objc_source) -> None:
        ls, published, put = lsp_env
        patched = objc_source.replace(
            "launchOptions {\n",
            'launchOptions {\n    [MSMobileCenter start:@"s" withServices:@[[MSCrashes class]]];\n',
        )
        put(patched, "file:///proj/AppDelegate.m")
        _validate(ls, "file:///proj/AppDelegate.m")
        assert published[0].diagnostics == []


class TestOtherFiles:
    def test_non_app_delegate_ignored(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("class ViewController {\n}\n", "file:///ViewController.swift")
        _validate(ls, "file:///ViewController.swift")

        assert len(published) == 1
        assert published[0].diagnostics == []
        assert published[0].uri == "file:///ViewController.swift"
