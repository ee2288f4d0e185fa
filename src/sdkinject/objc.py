"""Objective-C AppDelegate rule set."""

from __future__ import annotations

import re
from dataclasses import dataclass

from sdkinject import rules
from sdkinject.rules import NOT_FOUND, InjectBag, Injection
from sdkinject.scanner import C_QUOTES, Scanner, ScanState

QUOTES = C_QUOTES
TYPE_LABEL = "@implementation AppDelegate"

# #import <Module/Header.h>, #import "Header.h", @import Module;
_IMPORT_LINE = re.compile(
    r"[ \t]*[@#][ \t]*(?:import|include)[ \t]*"
    r"(?:<([^>/\r\n]+)(?:/[^>\r\n]*)?>|\"([^\"\r\n]+)\"|([\w.]+)[ \t]*;)"
    r"[^\r\n]*(?:\r?\n|\Z)"
)
_IMPLEMENTATION = re.compile(r"@implementation\s+AppDelegate(?!\w)")
_METHOD_DECL = re.compile(r"^[ \t]*[-+]\s*\([^()]*\)\s*(\w+)", re.MULTILINE)
# An apostrophe in directive text (`#warning Don't ...`) opens a character literal
_DIRECTIVE_QUOTE = re.compile(
    r"^[ \t]*#[ \t]*\w+[^\r\n'\"]*"
    r"(')[^\r\n']*(?:\r?\n|\Z)",
    re.MULTILINE,
)


@dataclass
class ObjCInjectBag(InjectBag):
    is_within_implementation: bool = False
    was_within_implementation: bool = False


def _record_import(bag: ObjCInjectBag, state: ScanState) -> None:
    match = state.followed_by(_IMPORT_LINE)
    if match:
        name = match.group(1) or match.group(2) or match.group(3)
        bag.imports.setdefault(name, (match.start(), match.end()))
        bag.import_block_end = match.end()


def _enter_implementation(bag: ObjCInjectBag, state: ScanState) -> None:
    if state.followed_by(_IMPLEMENTATION):
        bag.is_within_implementation = True
        bag.was_within_implementation = True
        if bag.type_start == NOT_FOUND:
            bag.type_start = state.position


def _exit_implementation(bag: ObjCInjectBag, state: ScanState) -> None:
    bag.is_within_implementation = False


def _enter_method(bag: ObjCInjectBag, state: ScanState) -> None:
    method = rules.last_match(_METHOD_DECL, rules.declaration_header(bag))
    if method and method.group(1) == "application":
        bag.application_start = state.position + 1
        bag.is_within_application_method = True


def _exit_method(bag: ObjCInjectBag, state: ScanState) -> None:
    bag.application_end = state.position
    bag.is_within_application_method = False


def analyze(source: str, injection: Injection) -> ObjCInjectBag:
    """Walk an Objective-C AppDelegate and record import, class and method offsets."""
    scanner = Scanner(source, ObjCInjectBag(), QUOTES)
    scanner.add_trap(
        lambda bag, state: state.significant
        and state.block_level == 0
        and not bag.was_within_implementation
        and state.at_line_start,
        _record_import,
    )
    scanner.add_trap(
        lambda bag, state: state.significant
        and state.block_level == 0
        and state.starts_with("@implementation"),
        _enter_implementation,
    )
    scanner.add_trap(
        lambda bag, state: state.significant
        and state.block_level == 0
        and bag.is_within_implementation
        and state.starts_with("@end"),
        _exit_implementation,
    )
    scanner.add_trap(
        lambda bag, state: state.significant
        and bag.is_within_implementation
        and state.block_level == 0
        and bag.application_start == NOT_FOUND
        and state.current_char == "{",
        _enter_method,
    )
    scanner.add_trap(
        lambda bag, state: state.significant
        and state.block_level == 0
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
    bag = scanner.walk()
    if bag.type_start == NOT_FOUND:
        stray = _DIRECTIVE_QUOTE.search(source)
        if stray:
            bag.literal_hint = stray.start(1)
    return bag


def insert_sdk(source: str, injection: Injection, filename: str = "AppDelegate.m") -> str:
    bag = analyze(source, injection)
    return rules.insert_sdk(source, bag, injection, filename, TYPE_LABEL)


def remove_sdk(source: str, injection: Injection) -> str:
    return rules.remove_sdk(source, analyze(source, injection), injection)
