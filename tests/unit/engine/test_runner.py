# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for the per-file search pipeline."""

from __future__ import annotations

import logging

from pathlib import Path

import pytest

from syngrep.core.matcher import LiteralPattern
from syngrep.core.nodes import NodeKinds
from syngrep.core.search import SearchSession
from syngrep.engine.runner import SearchRunner, SearchStats, read_source
from syngrep.exceptions import SearchError


pytestmark = [pytest.mark.unit]


class TestReadSource:
    """Reading and validating file contents."""

    def test_reads_utf8(self, tmp_path: Path) -> None:
        """Valid UTF-8 comes back as bytes, unchanged."""
        path = tmp_path / "ok.rs"
        path.write_bytes("// é\n".encode())
        assert read_source(path) == "// é\n".encode()

    def test_missing_file(self, tmp_path: Path) -> None:
        """Unreadable files raise a per-file error."""
        with pytest.raises(SearchError, match="Unable to read file"):
            _ = read_source(tmp_path / "missing.rs")

    def test_invalid_utf8(self, tmp_path: Path) -> None:
        """Files that are not UTF-8 are rejected before parsing."""
        path = tmp_path / "bad.rs"
        path.write_bytes(b"fn test() {}\n\xff\xfe\n")
        with pytest.raises(SearchError, match="not valid UTF-8") as exc_info:
            _ = read_source(path)
        assert exc_info.value.details["file_path"] == str(path)


class TestSearchStats:
    """Run statistics."""

    def test_defaults(self) -> None:
        """A fresh run has counted nothing."""
        stats = SearchStats()
        assert stats.files_searched == 0
        assert stats.total_errors == 0
        assert stats.elapsed_time() >= 0


class TestSearchRunner:
    """Running one pattern over many files."""

    def test_bad_files_are_skipped(
        self,
        tmp_path: Path,
        rust_file: Path,
        rust_session: SearchSession,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """A file that cannot be decoded is logged, and later files are still searched."""
        bad = tmp_path / "bad.rs"
        bad.write_bytes(b"fn test() {}\n\xff\n")
        runner = SearchRunner(rust_session, LiteralPattern(text="test"))
        with caplog.at_level(logging.WARNING, logger="syngrep"):
            stats = runner.run([bad, rust_file])
        assert stats.files_discovered == 2
        assert stats.files_searched == 1
        assert stats.files_with_errors == [bad]
        assert stats.matches == 1
        assert "not valid UTF-8" in caplog.text

    def test_kinds_are_passed_through(self, rust_file: Path, rust_session: SearchSession) -> None:
        """Node kinds decide which tokens are searched."""
        runner = SearchRunner(
            rust_session,
            LiteralPattern(text="test"),
            kinds=NodeKinds(identifier=True, string=True, comment=True),
        )
        assert runner.run([rust_file]).matches == 4
