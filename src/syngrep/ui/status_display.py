# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Clean status display for user-facing messages."""

from __future__ import annotations

from rich.console import Console

from syngrep.exceptions import SyngrepError


class StatusDisplay:
    """Status and error messages on stderr.

    Match output owns stdout; everything the user should see that is not a match goes
    through here, so piping syngrep into another tool only pipes matches.
    """

    def __init__(self, *, console: Console | None = None) -> None:
        """Initialize status display.

        Args:
            console: Optional rich Console instance. If not provided, creates one on stderr.
        """
        self.console = console or Console(stderr=True, markup=False, highlight=False)

    def print_error(
        self, message: str, *, details: str | None = None, suggestions: list[str] | None = None
    ) -> None:
        """Print an error message.

        Args:
            message: Error message
            details: Optional additional details
            suggestions: Optional hints for fixing the error
        """
        self.console.print(f"✗ Error: {message}", style="bold red")
        if details:
            self.console.print(f"  {details}", style="red")
        for suggestion in suggestions or ():
            self.console.print(f"  → {suggestion}", style="yellow")

    def print_exception(self, error: SyngrepError) -> None:
        """Print a syngrep error with its context and suggestions."""
        self.print_error(str(error), suggestions=error.suggestions)

    def print_warning(self, message: str) -> None:
        """Print a warning message.

        Args:
            message: Warning message
        """
        self.console.print(f"⚠️  {message}", style="yellow")


_display: StatusDisplay | None = None


def get_display() -> StatusDisplay:
    """Get the shared status display."""
    global _display
    if _display is None:
        _display = StatusDisplay()
    return _display


__all__ = ("StatusDisplay", "get_display")
