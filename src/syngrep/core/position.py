# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Translate byte offsets into line and column positions.

Both translators here share one line-break convention: `\\n` breaks a line, a `\\r` that is
not followed by `\\n` breaks a line, and a `\\r\\n` pair breaks it once. Columns are counted
in characters (Unicode code points); byte columns are counted in UTF-8 bytes.
"""

from __future__ import annotations

import bisect
import re

from typing import NamedTuple


_LINE_BREAK = re.compile(rb"\r\n|\r|\n")


class TokenPosition(NamedTuple):
    """Where a byte offset inside a token lands, relative to the token's first line."""

    line_delta: int
    """Line breaks crossed between the token start and the offset."""
    column: int
    """Character column. Absolute when `line_delta == 0`, otherwise from the line start."""
    byte_column: int
    """Byte column. From the token start when `line_delta == 0`, otherwise from the line start."""


def _is_line_break(token: str, index: int) -> bool:
    char = token[index]
    if char == "\n":
        return True
    return char == "\r" and token[index + 1 : index + 2] != "\n"


def token_line_col(token: str, start_col: int, offset: int) -> TokenPosition:
    """Walk `token` up to the byte `offset` and report where it lands.

    Args:
        token: The decoded token text.
        start_col: Character column of the token's first character in its line.
        offset: Byte offset into the UTF-8 encoding of `token`.

    Returns:
        The number of lines crossed, the character column and the byte column. An offset
        of 0 always gives `(0, start_col, 0)`; an offset right after a line break gives
        column 0.
    """
    line_delta = 0
    column = start_col
    byte_column = 0
    consumed = 0
    for index, char in enumerate(token):
        if consumed >= offset:
            break
        width = len(char.encode("utf-8"))
        consumed += width
        if char == "\r" and token[index + 1 : index + 2] == "\n":
            # first half of a CRLF pair; the \n breaks the line
            continue
        if _is_line_break(token, index):
            line_delta += 1
            column = 0
            byte_column = 0
        else:
            column += 1
            byte_column += width
    return TokenPosition(line_delta, column, byte_column)


class LineIndex:
    """Line start offsets for a whole source buffer.

    Rows and byte columns of nodes are looked up here rather than taken from the tree
    provider, so that files with lone `\\r` line endings number their lines the same way
    `token_line_col` does.
    """

    def __init__(self, source: bytes) -> None:
        """Index the line breaks of `source`."""
        self._source = source
        starts = [0]
        ends: list[int] = []
        for match in _LINE_BREAK.finditer(source):
            ends.append(match.start())
            starts.append(match.end())
        ends.append(len(source))
        self._starts = starts
        self._ends = ends

    def __len__(self) -> int:
        return len(self._starts)

    def row_col(self, byte_offset: int) -> tuple[int, int]:
        """Return the 0-based row and byte column of a byte offset."""
        row = bisect.bisect_right(self._starts, byte_offset) - 1
        return row, byte_offset - self._starts[row]

    def line_bytes(self, row: int) -> bytes:
        """Return the raw bytes of a line, without its terminator."""
        return self._source[self._starts[row] : self._ends[row]]

    def line_text(self, row: int) -> str:
        """Return the decoded text of a line, without its terminator."""
        return self.line_bytes(row).decode("utf-8", errors="replace")

    def char_column(self, row: int, byte_column: int) -> int:
        """Convert a byte column within `row` to a character column."""
        return len(self.line_bytes(row)[:byte_column].decode("utf-8", errors="replace"))


__all__ = ("LineIndex", "TokenPosition", "token_line_col")
