# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Per-file search pipeline: read, decode, parse, search, report.

Anything that goes wrong with one file is logged and the run moves on to the next file.
"""

from __future__ import annotations

import dataclasses
import logging
import time

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from syngrep.core.nodes import NodeKinds
from syngrep.exceptions import SearchError


if TYPE_CHECKING:
    from syngrep.core.search import MatchRecord, MatchSpec, SearchSession
    from syngrep.ui.report import MatchReporter


logger = logging.getLogger(__name__)


@dataclasses.dataclass
class SearchStats:
    """Statistics for one search run."""

    files_discovered: int = 0
    files_searched: int = 0
    matches: int = 0
    start_time: float = dataclasses.field(default_factory=time.time)
    files_with_errors: list[Path] = dataclasses.field(default_factory=list)

    def elapsed_time(self) -> float:
        """Seconds since the run started."""
        return time.time() - self.start_time

    @property
    def total_errors(self) -> int:
        """Number of files that could not be searched."""
        return len(self.files_with_errors)


def read_source(path: Path) -> bytes:
    """Read a file and check that it is UTF-8 text.

    Raises:
        SearchError: The file could not be read or is not valid UTF-8.
    """
    try:
        source = path.read_bytes()
    except OSError as e:
        raise SearchError(
            f"Unable to read file: {e.strerror or e}", details={"file_path": str(path)}
        ) from e
    try:
        _ = source.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SearchError(
            f"File is not valid UTF-8 ({e.reason} at byte {e.start})",
            details={"file_path": str(path)},
        ) from e
    return source


class SearchRunner:
    """Runs one literal pattern or structural query over many files with one parser."""

    def __init__(
        self,
        session: SearchSession,
        spec: MatchSpec,
        reporter: MatchReporter | None = None,
        *,
        kinds: NodeKinds | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            session: Parser session for the grammar being searched
            spec: Literal pattern or structural query
            reporter: Where records go; when `None`, records are only counted
            kinds: Node categories a literal pattern is matched in
        """
        self.session = session
        self.spec = spec
        self.reporter = reporter
        self.kinds = kinds or NodeKinds()
        self.stats = SearchStats()

    def search_file(self, path: Path) -> list[MatchRecord]:
        """Search one file.

        Raises:
            SearchError: The file could not be read, decoded or parsed.
        """
        source = read_source(path)
        return self.session.search(source, self.spec, path=path, kinds=self.kinds)

    def run(self, paths: Iterable[Path]) -> SearchStats:
        """Search `paths` in order, reporting records as each file finishes."""
        for path in paths:
            self.stats.files_discovered += 1
            try:
                records = self.search_file(path)
            except SearchError as e:
                logger.warning("Skipping %s", e)
                self.stats.files_with_errors.append(path)
                continue
            self.stats.files_searched += 1
            self.stats.matches += len(records)
            if self.reporter is not None:
                _ = self.reporter.report_all(records)
        logger.info(
            "Searched %d of %d files, %d matches (%.2fs)",
            self.stats.files_searched,
            self.stats.files_discovered,
            self.stats.matches,
            self.stats.elapsed_time(),
        )
        return self.stats


__all__ = ("SearchRunner", "SearchStats", "read_source")
