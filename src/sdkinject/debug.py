"""--debug dumps of scanner results to stderr."""

from __future__ import annotations

import sys
from dataclasses import fields
from typing import TextIO

from sdkinject.rules import NOT_FOUND
from sdkinject.scanner import C_QUOTES, ScanBag, trace
from sdkinject.text import position_at


def dump_bag(bag: ScanBag, source: str, *, file: TextIO | None = None) -> None:
    """Print every bag field; offsets are shown with their line:column."""
    file = file or sys.stderr
    file.write(f"{type(bag).__name__}\n")
    for f in fields(bag):
        value = getattr(bag, f.name)
        if f.name in ("significant", "block_level") or not f.repr:
            continue
        if isinstance(value, bool) or not isinstance(value, int):
            file.write(f"  {f.name} = {value!r}\n")
        elif value == NOT_FOUND or not f.name.endswith(("_start", "_end")):
            file.write(f"  {f.name} = {value}\n")
        else:
            pos = position_at(source, value)
            file.write(f"  {f.name} = {value} ({pos.line}:{pos.column})\n")


def dump_scan(source: str, quotes: str = C_QUOTES, *, file: TextIO | None = None) -> None:
    """Print each line with its starting depth, marking non-significant characters with ~."""
    file = file or sys.stderr
    points = trace(source, quotes)
    lines = source.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    offset = 0
    for number, line in enumerate(lines, start=1):
        text = line.rstrip("\r")
        depth = points[offset][1] if offset < len(points) else 0
        mask = "".join(" " if points[offset + i][0] else "~" for i in range(len(text))).rstrip()
        file.write(f"{number:>4} {depth:>2} | {text}\n")
        if mask:
            file.write(f"{'':>4} {'':>2} | {mask}\n")
        offset += len(line) + 1
