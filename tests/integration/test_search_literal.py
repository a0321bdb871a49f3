# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Literal searches over real Rust parse trees."""

from __future__ import annotations

import logging

from pathlib import Path

import pytest

from syngrep.core.matcher import CasePolicy, LiteralPattern
from syngrep.core.nodes import NodeCategory, NodeKinds
from syngrep.core.search import MatchRecord, SearchSession, search_literal
from syngrep.grammar.registry import GrammarProfile


pytestmark = [pytest.mark.integration]

PATH = Path("main.rs")
ALL_KINDS = NodeKinds(identifier=True, string=True, comment=True)


def _search(
    session: SearchSession, source: bytes, pattern: LiteralPattern, kinds: NodeKinds
) -> list[MatchRecord]:
    return session.search(source, pattern, path=PATH, kinds=kinds)


class TestRustSample:
    """The pattern `test` in `fn test()` and two string literals."""

    def test_all_kinds(self, rust_session: SearchSession, rust_sample: bytes) -> None:
        """Every occurrence is reported in document order."""
        records = _search(rust_session, rust_sample, LiteralPattern(text="test"), ALL_KINDS)
        assert [(record.line, record.column) for record in records] == [
            (0, 3),
            (1, 13),
            (1, 17),
            (2, 13),
        ]
        assert [record.category for record in records] == [
            NodeCategory.IDENTIFIER,
            NodeCategory.STRING,
            NodeCategory.STRING,
            NodeCategory.STRING,
        ]

    def test_whole_word(self, rust_session: SearchSession, rust_sample: bytes) -> None:
        """`testtest` is not a whole-word match; `"test"` is."""
        pattern = LiteralPattern(text="test", whole_word=True)
        records = _search(rust_session, rust_sample, pattern, ALL_KINDS)
        assert [record.line for record in records] == [0, 2]

    def test_identifiers_only_by_default(
        self, rust_session: SearchSession, rust_sample: bytes
    ) -> None:
        """Strings are not searched unless asked for."""
        records = _search(rust_session, rust_sample, LiteralPattern(text="test"), NodeKinds())
        assert [(record.line, record.column) for record in records] == [(0, 3)]

    def test_record_fields(self, rust_session: SearchSession, rust_sample: bytes) -> None:
        """Records carry the whole line and a highlight over the match."""
        records = _search(rust_session, rust_sample, LiteralPattern(text="test"), ALL_KINDS)
        last = records[-1]
        assert last.line_text == '    let s = "test";'
        assert last.byte_column == 13
        assert last.length == 4
        assert last.highlights == ((13, 17),)
        assert last.path == PATH
        assert not last.is_structural

    @pytest.mark.parametrize(
        ("text", "policy", "expected"),
        [
            pytest.param("TEST", CasePolicy.INSENSITIVE, 4, id="insensitive"),
            pytest.param("TEST", CasePolicy.SMART, 0, id="smart-upper"),
            pytest.param("test", CasePolicy.SMART, 4, id="smart-lower"),
            pytest.param("Test", CasePolicy.SENSITIVE, 0, id="sensitive"),
        ],
    )
    def test_case_policy(
        self,
        rust_session: SearchSession,
        rust_sample: bytes,
        text: str,
        policy: CasePolicy,
        expected: int,
    ) -> None:
        """Case policy decides whether letter case must agree."""
        pattern = LiteralPattern(text=text, case_policy=policy)
        assert len(_search(rust_session, rust_sample, pattern, ALL_KINDS)) == expected


class TestTokens:
    """Token-level behavior."""

    def test_comment(self, rust_session: SearchSession) -> None:
        """Comments are searched when enabled, and only then."""
        source = b"// test here\nfn main() {}\n"
        kinds = NodeKinds(identifier=False, comment=True)
        records = _search(rust_session, source, LiteralPattern(text="test"), kinds)
        assert [(record.line, record.column, record.category) for record in records] == [
            (0, 3, NodeCategory.COMMENT)
        ]
        assert _search(rust_session, source, LiteralPattern(text="test"), NodeKinds()) == []

    def test_match_inside_multiline_token(self, rust_session: SearchSession) -> None:
        """A match on a later line of a token reports that line and its own column."""
        source = b"fn main() {}\n/* first\n  test */\n"
        kinds = NodeKinds(identifier=False, comment=True)
        records = _search(rust_session, source, LiteralPattern(text="test"), kinds)
        assert len(records) == 1
        record = records[0]
        assert (record.line, record.column, record.byte_column) == (2, 2, 2)
        assert record.line_text == "  test */"

    def test_multibyte_columns(self, rust_session: SearchSession) -> None:
        """Columns count characters; byte columns count bytes."""
        source = 'const S: &str = "é test";\n'.encode()
        kinds = NodeKinds(identifier=False, string=True)
        records = _search(rust_session, source, LiteralPattern(text="test"), kinds)
        assert [(record.column, record.byte_column) for record in records] == [(19, 20)]

    def test_syntax_errors_still_searched(self, rust_session: SearchSession) -> None:
        """A partial tree is searched rather than rejected."""
        source = b"fn test( {\n"
        records = _search(rust_session, source, LiteralPattern(text="test"), NodeKinds())
        assert [record.line for record in records] == [0]


class TestUndecodableTokens:
    """Tokens that are not UTF-8 are skipped; the rest of the file is still searched."""

    SOURCE = b"// bad \xff test\nfn test() {}\n// test ok\n"

    def test_walk_continues(
        self, rust_session: SearchSession, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Matches after the bad comment are reported and the skip is logged."""
        kinds = NodeKinds(identifier=True, comment=True)
        with caplog.at_level(logging.WARNING, logger="syngrep"):
            records = _search(rust_session, self.SOURCE, LiteralPattern(text="test"), kinds)
        assert [(record.line, record.category) for record in records] == [
            (1, NodeCategory.IDENTIFIER),
            (2, NodeCategory.COMMENT),
        ]
        assert "Skipping token in main.rs" in caplog.text

    def test_direct_search_literal(
        self, rust_session: SearchSession, rust_profile: GrammarProfile
    ) -> None:
        """The walk works on a tree directly, without the session's dispatch."""
        tree = rust_session.parse(self.SOURCE)
        records = search_literal(
            tree,
            self.SOURCE,
            LiteralPattern(text="test"),
            path=PATH,
            profile=rust_profile,
            kinds=NodeKinds(identifier=False, comment=True),
        )
        assert [record.line for record in records] == [2]
