"""Source positions, splicing, and newline-preserving file I/O."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Edit:
    """Replace `length` characters at `start` with `text`."""

    start: int
    length: int
    text: str


def position_at(source: str, offset: int) -> Position:
    """Return the line/column position of `offset` in `source`."""
    offset = max(0, min(offset, len(source)))
    line = source.count("\n", 0, offset) + 1
    line_start = source.rfind("\n", 0, offset) + 1
    return Position(line, offset - line_start + 1, offset)


def detect_newline(source: str) -> str:
    """Return the line terminator used by `source` ("\\r\\n" or "\\n")."""
    return "\r\n" if "\r\n" in source else "\n"


def splice(source: str, start: int, length: int, text: str) -> str:
    return source[:start] + text + source[start + abs(length) :]


def apply_edits(source: str, edits: list[Edit]) -> str:
    """Apply edits from the highest offset down so lower offsets stay valid."""
    for edit in sorted(edits, key=lambda e: e.start, reverse=True):
        source = splice(source, edit.start, edit.length, edit.text)
    return source


def read_source(path: Path) -> str:
    """Read UTF-8 text without translating line endings."""
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def write_source(path: Path, text: str) -> None:
    path.write_text(text, encoding="utf-8", newline="")
