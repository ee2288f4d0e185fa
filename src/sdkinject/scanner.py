"""Lexical context scanner: one forward pass tracking live code and brace depth.

The scanner knows nothing about Swift or Objective-C beyond comments, string
literals and braces. Callers register traps, (predicate, action) pairs that are
evaluated at every offset in registration order, and collect their findings in
a caller-defined bag returned by `walk()`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Generic, TypeVar

C_QUOTES = "\"'"


class _Mode(Enum):
    CODE = auto()
    LINE_COMMENT = auto()
    BLOCK_COMMENT = auto()
    LITERAL = auto()


@dataclass
class ScanBag:
    """Base accumulator. Subclass it to add offsets and flags for a rule set."""

    significant: bool = True
    block_level: int = 0


B = TypeVar("B", bound=ScanBag)


@dataclass(frozen=True, slots=True)
class ScanState:
    """Read-only view of the scanner at one offset."""

    source: str
    position: int
    significant: bool
    block_level: int

    @property
    def current_char(self) -> str:
        return self.source[self.position]

    @property
    def preceding_text(self) -> str:
        """All text strictly before the current position (the backpart)."""
        return self.source[: self.position]

    @property
    def following_text(self) -> str:
        """Text from the current position to the end (the forepart)."""
        return self.source[self.position :]

    @property
    def at_line_start(self) -> bool:
        if self.position == 0:
            return True
        prev = self.source[self.position - 1]
        return prev == "\n" or (prev == "\r" and self.current_char != "\n")

    def starts_with(self, prefix: str) -> bool:
        return self.source.startswith(prefix, self.position)

    def preceded_by(self, pattern: re.Pattern[str] | str) -> re.Match[str] | None:
        """Search the backpart without copying it; `$` anchors at the position."""
        return re.compile(pattern).search(self.source, 0, self.position)

    def followed_by(self, pattern: re.Pattern[str] | str) -> re.Match[str] | None:
        """Match `pattern` starting exactly at the current position."""
        return re.compile(pattern).match(self.source, self.position)


@dataclass(frozen=True, slots=True)
class Trap(Generic[B]):
    """A rule evaluated at every offset: run `action` when `predicate` holds."""

    predicate: Callable[[B, ScanState], bool]
    action: Callable[[B, ScanState], None]


class Scanner(Generic[B]):
    """Walk source text once, firing traps against a caller-owned bag."""

    def __init__(self, source: str, bag: B, quotes: str = C_QUOTES) -> None:
        self._source = source
        self._bag = bag
        self._quotes = quotes
        self._traps: list[Trap[B]] = []
        self._pos = 0
        self._mode = _Mode.CODE
        self._quote = ""
        self._escaped = False
        self._comment_start = 0
        self._block_level = 0
        self._started = False

    @property
    def traps(self) -> tuple[Trap[B], ...]:
        return tuple(self._traps)

    def add_trap(
        self,
        predicate: Callable[[B, ScanState], bool],
        action: Callable[[B, ScanState], None],
    ) -> None:
        """Append a trap. Traps fire in registration order."""
        if self._started:
            raise RuntimeError("cannot add traps once the walk has started")
        self._traps.append(Trap(predicate, action))

    def walk(self) -> B:
        """Scan the full source and return the bag."""
        if self._started:
            raise RuntimeError("scanner has already walked its source; create a new one")
        self._started = True

        source = self._source
        bag = self._bag
        while self._pos < len(source):
            ch = source[self._pos]
            significant = self._classify(ch)

            # A closing brace reports the same depth as its opening brace
            if significant and ch == "}" and self._block_level > 0:
                self._block_level -= 1

            bag.significant = significant
            bag.block_level = self._block_level
            state = ScanState(source, self._pos, significant, self._block_level)
            for trap in self._traps:
                if trap.predicate(bag, state):
                    trap.action(bag, state)

            if significant and ch == "{":
                self._block_level += 1
            self._pos += 1

        return bag

    # ------------------------------------------------------------------
    # Lexical state
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _classify(self, ch: str) -> bool:
        """Return whether the current offset is live code and advance the mode."""
        if self._mode == _Mode.CODE:
            if ch == "/":
                nxt = self._peek(1)
                if nxt == "/":
                    self._mode = _Mode.LINE_COMMENT
                    return False
                if nxt == "*":
                    self._mode = _Mode.BLOCK_COMMENT
                    self._comment_start = self._pos
                    return False
            if ch in self._quotes:
                self._mode = _Mode.LITERAL
                self._quote = ch
                self._escaped = False
                return False
            return True

        if self._mode == _Mode.LINE_COMMENT:
            if ch == "\n" or (ch == "\r" and self._peek(1) != "\n"):
                self._mode = _Mode.CODE
            return False

        if self._mode == _Mode.BLOCK_COMMENT:
            # "*/" must not reuse the "*" of the opening "/*"
            if (
                ch == "/"
                and self._pos - self._comment_start >= 3
                and self._source[self._pos - 1] == "*"
            ):
                self._mode = _Mode.CODE
            return False

        if self._escaped:
            self._escaped = False
        elif ch == "\\":
            self._escaped = True
        elif ch == self._quote:
            self._mode = _Mode.CODE
        return False


@dataclass
class _TraceBag(ScanBag):
    points: list[tuple[bool, int]] = field(default_factory=list)


def trace(source: str, quotes: str = C_QUOTES) -> list[tuple[bool, int]]:
    """Convenience function: the (significant, block_level) pair at every offset."""
    scanner = Scanner(source, _TraceBag(), quotes)
    scanner.add_trap(
        lambda bag, state: True,
        lambda bag, state: bag.points.append((state.significant, state.block_level)),
    )
    return scanner.walk().points
