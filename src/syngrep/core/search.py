# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Search orchestration: walk one file's tree and emit match records.

A literal search walks the whole tree once, classifying each node and matching the pattern
inside every token of an enabled category. A structural search runs one query over the
tree. Both produce `MatchRecord`s in document order.
"""

from __future__ import annotations

import logging

from collections.abc import Mapping
from pathlib import Path
from typing import Annotated

import tree_sitter

from pydantic import ConfigDict, Field, NonNegativeInt

from syngrep._common import BasedModel
from syngrep.core.matcher import LiteralPattern, find_spans
from syngrep.core.nodes import NodeCategory, NodeKinds, classify, node_text
from syngrep.core.position import LineIndex, token_line_col
from syngrep.core.query import (
    CompiledQuery,
    StructuralQuery,
    filter_groups,
    highlight_ranges,
    run_query,
)
from syngrep.exceptions import ParseFailureError, TokenDecodeError
from syngrep.grammar.registry import GrammarProfile


logger = logging.getLogger(__name__)

type MatchSpec = LiteralPattern | StructuralQuery

_ATOMIC_CATEGORIES = frozenset({NodeCategory.COMMENT, NodeCategory.STRING})


class MatchRecord(BasedModel):
    """One reported occurrence."""

    model_config = BasedModel.model_config | ConfigDict(frozen=True)

    path: Annotated[Path, Field(description="""File the match was found in""")]
    line: Annotated[NonNegativeInt, Field(description="""0-based line of the match start""")]
    column: Annotated[
        NonNegativeInt, Field(description="""0-based column of the match start, in characters""")
    ]
    byte_column: Annotated[
        NonNegativeInt, Field(description="""0-based column of the match start, in bytes""")
    ]
    length: Annotated[NonNegativeInt, Field(description="""Byte length of the matched span""")]
    line_text: Annotated[
        str, Field(description="""The line holding the match, or the node text for queries""")
    ]
    category: NodeCategory | None = None
    """Category of the token a literal match was found in. `None` for structural matches."""
    highlights: tuple[tuple[int, int], ...] = ()
    """Byte ranges of `line_text` to highlight, sorted."""

    @property
    def is_structural(self) -> bool:
        """Whether this record came from a structural query."""
        return self.category is None


def search_literal(
    tree: tree_sitter.Tree,
    source: bytes,
    spec: LiteralPattern,
    *,
    path: Path,
    profile: GrammarProfile,
    kinds: NodeKinds,
) -> list[MatchRecord]:
    """Find every occurrence of a literal pattern in the enabled tokens of `tree`.

    Nodes are visited in pre-order, so records come out in document order. Comments and
    strings are searched as whole tokens and their children are never visited. Tokens that
    are not valid UTF-8 are logged and skipped.
    """
    lines = LineIndex(source)
    records: list[MatchRecord] = []
    case_sensitive = spec.case_sensitive
    stack: list[tree_sitter.Node] = [tree.root_node]
    while stack:
        node = stack.pop()
        category = classify(node, profile, kinds)
        if category not in _ATOMIC_CATEGORIES:
            stack.extend(reversed(node.children))
        if category is NodeCategory.OTHER or not kinds.enabled(category):
            continue
        try:
            token = node_text(node, source)
        except TokenDecodeError as e:
            logger.warning("Skipping token in %s: %s", path, e)
            continue
        spans = find_spans(
            token,
            spec.text,
            is_identifier=category is NodeCategory.IDENTIFIER,
            whole_word=spec.whole_word,
            case_sensitive=case_sensitive,
        )
        if not spans:
            continue
        row, byte_col = lines.row_col(node.start_byte)
        start_col = lines.char_column(row, byte_col)
        for start, end in spans:
            position = token_line_col(token, start_col, start)
            line = row + position.line_delta
            byte_column = (
                byte_col + position.byte_column if position.line_delta == 0 else position.byte_column
            )
            line_length = len(lines.line_bytes(line))
            records.append(
                MatchRecord(
                    path=path,
                    line=line,
                    column=position.column,
                    byte_column=byte_column,
                    length=end - start,
                    line_text=lines.line_text(line),
                    category=category,
                    highlights=((byte_column, min(byte_column + end - start, line_length)),),
                )
            )
    return records


def search_query(
    tree: tree_sitter.Tree,
    source: bytes,
    query: CompiledQuery,
    capture_filters: Mapping[str, str] | None = None,
    *,
    path: Path,
) -> list[MatchRecord]:
    """Run a structural query over `tree` and report each kept capture group.

    Each record carries the parent node's full text as `line_text`, with the other captures
    as highlights inside it.
    """
    lines = LineIndex(source)
    groups = filter_groups(run_query(query, tree.root_node), capture_filters or {}, source)
    records: list[MatchRecord] = []
    for group in groups:
        parent = group.parent.node
        try:
            text = node_text(parent, source)
        except TokenDecodeError as e:
            logger.warning("Skipping match in %s: %s", path, e)
            continue
        row, byte_col = lines.row_col(parent.start_byte)
        records.append(
            MatchRecord(
                path=path,
                line=row,
                column=lines.char_column(row, byte_col),
                byte_column=byte_col,
                length=parent.end_byte - parent.start_byte,
                line_text=text,
                highlights=tuple(highlight_ranges(group)),
            )
        )
    return records


class SearchSession:
    """A grammar loaded into a reusable parser.

    One session searches files one after another; it is not meant to be shared between
    threads.
    """

    def __init__(self, language: tree_sitter.Language, profile: GrammarProfile) -> None:
        """Create a parser for `language`."""
        self.language = language
        self.profile = profile
        self._parser = tree_sitter.Parser(language)

    def parse(self, source: bytes, *, path: Path | None = None) -> tree_sitter.Tree:
        """Parse `source` into a tree.

        Raises:
            ParseFailureError: The parser did not produce a tree.
        """
        try:
            tree = self._parser.parse(source)
        except ValueError as e:
            raise ParseFailureError(
                f"Unable to parse file: {e}", details={"file_path": str(path)}
            ) from e
        if tree is None:
            raise ParseFailureError(
                f"Parser produced no tree for {self.profile.name} source",
                details={"file_path": str(path)},
            )
        if tree.root_node.has_error:
            logger.debug("%s has syntax errors; searching the partial tree", path)
        return tree

    def search(
        self, source: bytes, spec: MatchSpec, *, path: Path, kinds: NodeKinds | None = None
    ) -> list[MatchRecord]:
        """Parse `source` and search it with `spec`."""
        tree = self.parse(source, path=path)
        match spec:
            case LiteralPattern():
                return search_literal(
                    tree, source, spec, path=path, profile=self.profile, kinds=kinds or NodeKinds()
                )
            case StructuralQuery(compiled=compiled, capture_filters=filters):
                return search_query(tree, source, compiled, filters, path=path)


__all__ = ("MatchRecord", "MatchSpec", "SearchSession", "search_literal", "search_query")
