# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""File discovery with rignore integration."""

from __future__ import annotations

import logging

from pathlib import Path
from typing import TYPE_CHECKING

import rignore

from syngrep.exceptions import DiscoveryError, ValidationError


if TYPE_CHECKING:
    from syngrep.config.settings import SyngrepSettings
    from syngrep.grammar.registry import GrammarProfile


logger = logging.getLogger(__name__)


class FileDiscoveryService:
    """Finds the files a search should read.

    Directories are walked with rignore, honoring ignore files, and filtered by the grammar's
    extensions. A path that names a file is searched as-is, whatever its extension.
    """

    def __init__(self, profile: GrammarProfile, settings: SyngrepSettings) -> None:
        """Initialize for one grammar."""
        self.profile = profile
        self.settings = settings

    def discover(self, path: Path) -> list[Path]:
        """Return the files under `path` to search, sorted.

        Raises:
            ValidationError: `path` does not exist.
            DiscoveryError: The directory could not be walked.
        """
        if path.is_file():
            return [path]
        if not path.is_dir():
            raise ValidationError(
                "Search path does not exist", details={"file_path": str(path)}
            )
        if not self.profile.extensions:
            logger.warning(
                "Grammar %s has no file extensions; no files will be found in %s",
                self.profile.name,
                path,
            )
            return []
        try:
            walker = rignore.walk(
                path,
                ignore_hidden=self.settings.ignore_hidden,
                read_git_ignore=self.settings.read_git_ignore,
                read_ignore_files=self.settings.read_git_ignore,
                max_filesize=self.settings.max_file_size,
                case_insensitive=True,
            )
            discovered = [
                Path(file_path)
                for file_path in walker
                if self.profile.matches_file(Path(file_path)) and Path(file_path).is_file()
            ]
        except (OSError, ValueError) as e:
            raise DiscoveryError(
                f"Failed to discover files in {path}",
                details={"file_path": str(path), "error": str(e)},
                suggestions=["Check that the directory exists and is readable"],
            ) from e
        logger.debug("Discovered %d %s files under %s", len(discovered), self.profile.name, path)
        return sorted(discovered)


__all__ = ("FileDiscoveryService",)
