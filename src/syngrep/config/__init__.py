# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Settings and logging setup."""

from syngrep.config.logging import setup_logger
from syngrep.config.settings import ReportStyles, SyngrepSettings, get_settings, reset_settings


__all__ = ("ReportStyles", "SyngrepSettings", "get_settings", "reset_settings", "setup_logger")
