"""Swift AppDelegate rule set."""

from __future__ import annotations

import re
from dataclasses import dataclass

from sdkinject import rules
from sdkinject.rules import NOT_FOUND, InjectBag, Injection
from sdkinject.scanner import Scanner, ScanState

QUOTES = '"'
TYPE_LABEL = "class 'AppDelegate'"

# One `import` clause; a line may hold several separated by `;`
_IMPORT_CLAUSE = re.compile(
    r"[ \t]*(?:@\w+[ \t]+)*import[ \t]+"
    r"(?:(?:typealias|struct|class|enum|protocol|let|var|func)[ \t]+)?"
    r"([\w.]+)[ \t]*;?"
)
_IMPORT_LINE = re.compile(
    rf"(?:{_IMPORT_CLAUSE.pattern})+[ \t]*(?://[^\r\n]*)?(?:\r?\n|\Z)"
)
_TYPE_DECL = re.compile(r"\b(class|extension|struct|enum|protocol)\s+(\w+)")
_FUNC_DECL = re.compile(r"\bfunc\s+(\w+)")


@dataclass
class SwiftInjectBag(InjectBag):
    is_within_class: bool = False
    was_within_class: bool = False


def _is_import_line(bag: SwiftInjectBag, state: ScanState) -> bool:
    return (
        state.significant
        and state.block_level == 0
        and not bag.was_within_class
        and state.at_line_start
    )


def _record_import(bag: SwiftInjectBag, state: ScanState) -> None:
    line = state.followed_by(_IMPORT_LINE)
    if not line:
        return
    clauses = []
    clause = _IMPORT_CLAUSE.match(state.source, line.start(), line.end())
    while clause:
        clauses.append(clause)
        clause = _IMPORT_CLAUSE.match(state.source, clause.end(), line.end())
    for clause in clauses:
        # A lone import owns its whole line, break included
        span = (line.start(), line.end()) if len(clauses) == 1 else clause.span()
        bag.imports.setdefault(clause.group(1), span)
    bag.import_block_end = line.end()


def _enter_class(bag: SwiftInjectBag, state: ScanState) -> None:
    header = rules.declaration_header(bag)
    decl = rules.last_match(_TYPE_DECL, header)
    if decl and decl.group(1) in ("class", "extension") and decl.group(2) == "AppDelegate":
        bag.is_within_class = True
        bag.was_within_class = True
        if bag.type_start == NOT_FOUND:
            bag.type_start = bag.statement_start + decl.start()


def _exit_class(bag: SwiftInjectBag, state: ScanState) -> None:
    bag.is_within_class = False


def _enter_method(bag: SwiftInjectBag, state: ScanState) -> None:
    func = rules.last_match(_FUNC_DECL, rules.declaration_header(bag))
    if func and func.group(1) == "application":
        bag.application_start = state.position + 1
        bag.is_within_application_method = True


def _exit_method(bag: SwiftInjectBag, state: ScanState) -> None:
    bag.application_end = state.position
    bag.is_within_application_method = False


def analyze(source: str, injection: Injection) -> SwiftInjectBag:
    """Walk a Swift AppDelegate and record import, class and method offsets."""
    scanner = Scanner(source, SwiftInjectBag(), QUOTES)
    scanner.add_trap(_is_import_line, _record_import)
    scanner.add_trap(
        lambda bag, state: state.significant
        and state.block_level == 0
        and state.current_char == "{",
        _enter_class,
    )
    scanner.add_trap(
        lambda bag, state: state.significant
        and state.block_level == 0
        and bag.is_within_class
        and state.current_char == "}",
        _exit_class,
    )
    scanner.add_trap(
        lambda bag, state: state.significant
        and bag.is_within_class
        and state.block_level == 1
        and bag.application_start == NOT_FOUND
        and state.current_char == "{",
        _enter_method,
    )
    scanner.add_trap(
        lambda bag, state: state.significant
        and state.block_level == 1
        and bag.is_within_application_method
        and state.current_char == "}",
        _exit_method,
    )
    scanner.add_trap(
        lambda bag, state: state.significant
        and bag.is_within_application_method
        and bag.start_call_start == NOT_FOUND,
        rules.record_start_call(injection.call_pattern),
    )
    rules.add_header_traps(scanner)
    return scanner.walk()


def insert_sdk(source: str, injection: Injection, filename: str = "AppDelegate.swift") -> str:
    bag = analyze(source, injection)
    return rules.insert_sdk(source, bag, injection, filename, TYPE_LABEL)


def remove_sdk(source: str, injection: Injection) -> str:
    return rules.remove_sdk(source, analyze(source, injection), injection)
