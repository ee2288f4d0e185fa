"""Tests for the --debug dump helpers."""

from __future__ import annotations

import io

from sdkinject import swift
from sdkinject.debug import dump_bag, dump_scan
from sdkinject.sdk import SdkModule, swift_injection


class TestDumpScan:
    def test_depth_column(self) -> None:
        out = io.StringIO()
        dump_scan("a{\n  b\n}\n", file=out)
        assert out.getvalue().splitlines() == [
            "   1  0 | a{",
            "   2  1 |   b",
            "   3  0 | }",
        ]

    def test_comment_masked(self) -> None:
        out = io.StringIO()
        dump_scan("a{ // c\n}\n", file=out)
        lines = out.getvalue().splitlines()
        assert lines[0] == "   1  0 | a{ // c"
        assert lines[1].endswith("|    ~~~~")
        assert lines[2] == "   2  0 | }"

    def test_crlf_not_shown(self) -> None:
        out = io.StringIO()
        dump_scan("a\r\nb\r\n", file=out)
        assert "\r" not in out.getvalue()


class TestDumpBag:
    def test_fields_listed(self, swift_source) -> None:
        bag = swift.analyze(swift_source, swift_injection("s", SdkModule.ANALYTICS))
        out = io.StringIO()
        dump_bag(bag, swift_source, file=out)
        text = out.getvalue()
        assert text.startswith("SwiftInjectBag\n")
        assert "  start_call_start = -1\n" in text
        assert "  is_within_class = False\n" in text
        assert "block_level" not in text

    def test_offsets_have_positions(self, swift_source) -> None:
        bag = swift.analyze(swift_source, swift_injection("s", SdkModule.ANALYTICS))
        out = io.StringIO()
        dump_bag(bag, swift_source, file=out)
        line = next(l for l in out.getvalue().splitlines() if "application_start" in l)
        assert line.endswith("(8:145)")
