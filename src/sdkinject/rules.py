"""Shared contract for the AppDelegate injection rule sets.

A rule set walks the source once with its traps, then splices the original
text at the offsets recorded in its bag. The scanner is never run again for
the same edit.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from sdkinject.errors import StructureNotFoundError
from sdkinject.scanner import Scanner, ScanBag, ScanState
from sdkinject.text import Edit, apply_edits, detect_newline

NOT_FOUND = -1

# Line break and indentation in front of a start call, removed with it
_LEADING_BREAK = re.compile(r"(?:\r?\n)?[ \t]*\Z")


@dataclass(frozen=True, slots=True)
class Injection:
    """What a rule set adds to one AppDelegate."""

    imports: tuple[str, ...]
    import_template: str  # e.g. "import {}"
    call: str
    call_pattern: re.Pattern[str]  # recognises a prior call at the scan position
    indent: str


@dataclass
class InjectBag(ScanBag):
    """Offsets and flags common to every AppDelegate rule set."""

    imports: dict[str, tuple[int, int]] = field(default_factory=dict)
    import_block_end: int = NOT_FOUND
    type_start: int = NOT_FOUND
    statement_start: int = 0
    header: list[str] = field(default_factory=list, repr=False)
    application_start: int = NOT_FOUND
    application_end: int = NOT_FOUND
    literal_hint: int = NOT_FOUND
    is_within_application_method: bool = False
    start_call_start: int = NOT_FOUND
    start_call_length: int = NOT_FOUND


# ------------------------------------------------------------------
# Traps shared by both languages
# ------------------------------------------------------------------


def declaration_header(bag: InjectBag) -> str:
    """Live code between the previous `{`, `}` or `;` and the current position.

    Comments and literals are blanked to spaces (line breaks kept), so offsets
    into the header still line up with `bag.statement_start`.
    """
    return "".join(bag.header)


def last_match(pattern: re.Pattern[str], text: str) -> re.Match[str] | None:
    match = None
    for match in pattern.finditer(text):
        pass
    return match


def _collect_header(bag: InjectBag, state: ScanState) -> None:
    ch = state.current_char
    bag.header.append(ch if state.significant or ch in "\r\n" else " ")


def track_statement_start(bag: InjectBag, state: ScanState) -> None:
    bag.statement_start = state.position + 1
    bag.header.clear()


def is_statement_boundary(bag: InjectBag, state: ScanState) -> bool:
    return state.significant and state.current_char in "{};"


def add_header_traps(scanner: Scanner[InjectBag]) -> None:
    """Register the statement header traps; must come after every other trap."""
    scanner.add_trap(lambda bag, state: True, _collect_header)
    scanner.add_trap(is_statement_boundary, track_statement_start)


def record_start_call(call_pattern: re.Pattern[str]):
    """Build an action recording the span of a prior start call."""

    def action(bag: InjectBag, state: ScanState) -> None:
        match = state.followed_by(call_pattern)
        if match:
            bag.start_call_start = state.position
            bag.start_call_length = match.end() - match.start()

    return action


# ------------------------------------------------------------------
# Splicing
# ------------------------------------------------------------------


def check_anchors(source: str, bag: InjectBag, filename: str, type_label: str) -> None:
    """Raise StructureNotFoundError unless the type and `application` were found."""
    if bag.type_start == NOT_FOUND:
        if bag.literal_hint != NOT_FOUND:
            raise StructureNotFoundError(
                f"{type_label} is not defined (the quote here opens a literal that never closes)",
                source,
                bag.literal_hint,
                filename,
            )
        raise StructureNotFoundError(f"{type_label} is not defined", source, None, filename)
    if bag.application_start == NOT_FOUND:
        raise StructureNotFoundError(
            f"function 'application' is not defined in {type_label}",
            source,
            bag.type_start,
            filename,
        )


def insert_sdk(
    source: str,
    bag: InjectBag,
    injection: Injection,
    filename: str,
    type_label: str,
) -> str:
    """Add missing imports and the start call; patched input is returned unchanged."""
    check_anchors(source, bag, filename, type_label)
    newline = detect_newline(source)
    edits: list[Edit] = []

    if bag.start_call_start != NOT_FOUND:
        existing = source[bag.start_call_start : bag.start_call_start + bag.start_call_length]
        if existing != injection.call:
            edits.append(Edit(bag.start_call_start, bag.start_call_length, injection.call))
    else:
        edits.append(
            Edit(bag.application_start, 0, f"{newline}{injection.indent}{injection.call}")
        )

    missing = [name for name in injection.imports if name not in bag.imports]
    if missing:
        text = "".join(injection.import_template.format(name) + newline for name in missing)
        edits.append(Edit(max(bag.import_block_end, 0), 0, text))

    return apply_edits(source, edits)


def remove_sdk(source: str, bag: InjectBag, injection: Injection) -> str:
    """Delete the SDK imports and start call if present."""
    edits: list[Edit] = []

    if bag.start_call_start != NOT_FOUND:
        lead = _LEADING_BREAK.search(source, 0, bag.start_call_start)
        start = lead.start() if lead else bag.start_call_start
        end = bag.start_call_start + bag.start_call_length
        edits.append(Edit(start, end - start, ""))

    for name in injection.imports:
        span = bag.imports.get(name)
        if span is not None:
            edits.append(Edit(span[0], span[1] - span[0], ""))

    return apply_edits(source, edits)
