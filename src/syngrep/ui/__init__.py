# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Terminal output: match reports on stdout, status and errors on stderr."""

from syngrep.ui.report import MatchReporter
from syngrep.ui.status_display import StatusDisplay, get_display


__all__ = ("MatchReporter", "StatusDisplay", "get_display")
