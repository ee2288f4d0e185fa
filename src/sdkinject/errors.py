"""Error types with formatted source context."""

from __future__ import annotations

from sdkinject.text import position_at


class IntegrationError(Exception):
    """Base class for errors that abort an SDK integration run."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.format())

    def format(self) -> str:
        return f"error: {self.message}"


class DiscoveryError(IntegrationError):
    """Raised when the Xcode project layout cannot be located."""


class StructureNotFoundError(IntegrationError):
    """Raised when a rule set's required anchor was never found by the scanner.

    `offset` points at the closest anchor that was found (e.g. the class
    declaration when only the method is missing), or is None.
    """

    def __init__(
        self,
        message: str,
        source: str,
        offset: int | None = None,
        filename: str = "AppDelegate",
    ) -> None:
        self.source = source
        self.offset = offset
        self.filename = filename
        self.position = position_at(source, offset) if offset is not None else None
        super().__init__(message)

    def format(self) -> str:
        if self.position is None:
            return f"error: {self.message}\n  --> {self.filename}"

        lines = self.source.splitlines(keepends=True)
        line_idx = self.position.line - 1
        col = self.position.column

        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        pad = " " * (col - 1)
        carets = "^" * max(1, min(2, len(source_line) - col + 1))

        line_num = str(self.position.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {self.filename}:{self.position.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )
