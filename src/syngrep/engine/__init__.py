# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""File discovery and the per-file search pipeline."""

from syngrep.engine.discovery import FileDiscoveryService
from syngrep.engine.runner import SearchRunner, SearchStats, read_source


__all__ = ("FileDiscoveryService", "SearchRunner", "SearchStats", "read_source")
