"""Error types with formatted source context."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cljformat.tokens import Position


class PositionError(Exception):
    """An error pinned to a source position.

    The ``tag`` names the layer that raised it ("lex", "parse", ...), so that
    every layer renders the same ``<tag> error at <name>:<line>:<col>: <msg>``
    shape.
    """

    def __init__(self, tag: str, message: str, position: Position) -> None:
        self.tag = tag
        self.message = message
        self.position = position
        super().__init__(f"{tag} error at {position}: {message}")

    def format(self, source: str) -> str:
        """Render the error with the offending source line and a caret."""
        lines = source.splitlines(keepends=True)
        line_idx = self.position.line - 1
        col = self.position.column

        # Build the source line (strip trailing newline for display)
        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        pad = " " * (col - 1)

        line_num = str(self.position.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"{self.tag} error: {self.message}\n"
            f"{' ' * gutter_width}--> {self.position}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}^"
        )


class LexError(PositionError):
    """A scan failure, converted from the lexer's terminal error token."""

    def __init__(self, message: str, position: Position) -> None:
        super().__init__("lex", message, position)
