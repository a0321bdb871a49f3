# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Render match records on a rich console.

Grouped output (the default):

    src/main.rs
    3:    let s = "test";

    src/lib.rs
    10:fn test() {}

Without grouping every match line starts with its path: `src/main.rs:3:    let s = "test";`.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.style import Style
from rich.text import Text


if TYPE_CHECKING:
    from syngrep.config.settings import ReportStyles
    from syngrep.core.search import MatchRecord


def _char_range(text: str, start_byte: int, end_byte: int) -> tuple[int, int]:
    """Convert a byte range of `text`'s UTF-8 encoding to a character range."""
    if text.isascii():
        return start_byte, end_byte
    encoded = text.encode("utf-8")
    start = len(encoded[:start_byte].decode("utf-8", errors="ignore"))
    end = len(encoded[:end_byte].decode("utf-8", errors="ignore"))
    return start, end


class MatchReporter:
    """Prints match records as they arrive, remembering which file header was printed last."""

    def __init__(
        self,
        console: Console,
        styles: ReportStyles,
        *,
        color: bool = True,
        group: bool = True,
        column: bool = False,
    ) -> None:
        """Initialize the reporter.

        Args:
            console: Where matches are printed
            styles: Rich styles for headers, line numbers and matches
            color: Apply styles at all
            group: Print a header per file instead of prefixing each line with its path
            column: Print 1-based column numbers after line numbers
        """
        self.console = console
        self.color = color
        self.group = group
        self.column = column
        self._file_style = Style.parse(styles.file_path) if color else Style.null()
        self._number_style = Style.parse(styles.line_number) if color else Style.null()
        self._match_style = Style.parse(styles.match) if color else Style.null()
        self._current_path: Path | None = None
        self._printed_any = False

    def _print_header(self, path: Path) -> None:
        if self._printed_any:
            self.console.print()
        self.console.print(Text(str(path), style=self._file_style))

    def _prefix(self, record: MatchRecord) -> Text:
        prefix = Text()
        if not self.group:
            prefix.append(f"{record.path}", style=self._file_style)
            prefix.append(":")
        prefix.append(f"{record.line + 1}", style=self._number_style)
        prefix.append(":")
        if self.column:
            prefix.append(f"{record.column + 1}", style=self._number_style)
            prefix.append(":")
        return prefix

    def render(self, record: MatchRecord) -> Text:
        """Render one record as it would be printed, without the file header."""
        prefix = self._prefix(record)
        body = Text(record.line_text)
        for start_byte, end_byte in record.highlights:
            start, end = _char_range(record.line_text, start_byte, end_byte)
            body.stylize(self._match_style, start, end)
        if "\n" in record.line_text:
            indent = Text(f"\n{' ' * prefix.cell_len}")
            body = indent.join(body.split("\n", allow_blank=True))
        return Text.assemble(prefix, body)

    def report(self, record: MatchRecord) -> None:
        """Print one record, with a file header first if it starts a new file."""
        if self.group and record.path != self._current_path:
            self._print_header(record.path)
        self._current_path = record.path
        self.console.print(self.render(record))
        self._printed_any = True

    def report_all(self, records: Iterable[MatchRecord]) -> int:
        """Print records in order. Returns how many were printed."""
        count = 0
        for record in records:
            self.report(record)
            count += 1
        return count


__all__ = ("MatchReporter",)
