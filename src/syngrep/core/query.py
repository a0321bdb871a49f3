# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Structural queries: compile, run, filter captures, and lay out highlights.

Queries use tree-sitter's S-expression syntax, e.g. `(function_item name: (identifier) @id)`.
Each match of a query becomes a `CaptureGroup`. The first capture of a group is its
*parent*, the node whose text is reported; later captures are highlighted inside it.
"""

from __future__ import annotations

import logging

from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import NamedTuple

import tree_sitter

from syngrep.core.nodes import node_text
from syngrep.exceptions import (
    NoCapturesError,
    QuerySyntaxError,
    TokenDecodeError,
    ValidationError,
)


logger = logging.getLogger(__name__)

ROOT_CAPTURE = "syngrep.match"
"""Name of the capture added by `compile_query(..., capture_root=True)`."""


class CompiledQuery(NamedTuple):
    """A query compiled for one grammar. Immutable, so it can be shared between searches."""

    query: tree_sitter.Query
    source: str
    capture_names: tuple[str, ...]
    """Capture names in declaration order, with the root capture (if any) first."""


class CapturedNode(NamedTuple):
    """One `(capture name, node)` pair of a match."""

    name: str
    node: tree_sitter.Node

    @property
    def is_root(self) -> bool:
        """Whether this is the capture syngrep added around the whole pattern."""
        return self.name == ROOT_CAPTURE


class CaptureGroup(NamedTuple):
    """The captures of one structural match, in query declaration order."""

    pattern_index: int
    captures: tuple[CapturedNode, ...]

    @property
    def parent(self) -> CapturedNode:
        """The capture whose node text is reported."""
        return self.captures[0]


class StructuralQuery(NamedTuple):
    """A compiled query plus the literal values its captures must have."""

    compiled: CompiledQuery
    capture_filters: Mapping[str, str] = MappingProxyType({})


def compile_query(
    source: str, language: tree_sitter.Language, *, capture_root: bool = False
) -> CompiledQuery:
    """Compile `source` for `language`.

    Args:
        source: The query text.
        language: The grammar to compile against.
        capture_root: Wrap the query's last pattern in an extra capture so each match
            reports the whole matched node, with the query's own captures highlighted.

    Raises:
        QuerySyntaxError: The query is not valid for the grammar. Nothing is run.
        NoCapturesError: The query declares no captures.
    """
    text = f"{source.rstrip()} @{ROOT_CAPTURE}" if capture_root else source
    try:
        query = tree_sitter.Query(language, text)
    except tree_sitter.QueryError as e:
        raise QuerySyntaxError(
            f"Unable to parse tree-sitter query: {e}",
            details={"query": source},
            suggestions=["Check node names against the grammar's node-types.json"],
        ) from e

    names = [query.capture_name(index) for index in range(query.capture_count)]
    if not names:
        raise NoCapturesError(
            "Query has no captures",
            details={"query": source},
            suggestions=["Add a capture like `@name` after a node, or use --whole-node"],
        )
    if ROOT_CAPTURE in names:
        names.remove(ROOT_CAPTURE)
        names.insert(0, ROOT_CAPTURE)
    return CompiledQuery(query=query, source=source, capture_names=tuple(names))


def run_query(compiled: CompiledQuery, root: tree_sitter.Node) -> list[CaptureGroup]:
    """Run a compiled query over the subtree at `root`.

    Groups come back in document order of their parent capture; matches starting at the
    same byte keep the order the tree provider produced them in.
    """
    cursor = tree_sitter.QueryCursor(compiled.query)
    groups: list[CaptureGroup] = []
    for pattern_index, captures in cursor.matches(root):
        group = tuple(
            CapturedNode(name, node)
            for name in compiled.capture_names
            for node in captures.get(name, ())
        )
        if group:
            groups.append(CaptureGroup(pattern_index, group))
    groups.sort(key=lambda group: group.parent.node.start_byte)
    return groups


def _is_reportable(capture: CapturedNode, filters: Mapping[str, str], source: bytes) -> bool:
    if (expected := filters.get(capture.name)) is None:
        return True
    try:
        return node_text(capture.node, source) == expected
    except TokenDecodeError as e:
        logger.warning("Skipping capture @%s: %s", capture.name, e)
        return False


def filter_groups(
    groups: Iterable[CaptureGroup], capture_filters: Mapping[str, str], source: bytes
) -> list[CaptureGroup]:
    """Keep the groups that have at least one reportable capture.

    A capture is reportable when there is no filter for its name, or its text equals the
    filter value exactly. Kept groups lose their non-reportable captures except the parent,
    which is always kept so there is something to show. The root capture never takes part.
    """
    if not capture_filters:
        return list(groups)
    kept: list[CaptureGroup] = []
    for group in groups:
        candidates = [capture for capture in group.captures if not capture.is_root]
        reportable = [
            capture for capture in candidates if _is_reportable(capture, capture_filters, source)
        ]
        if candidates and not reportable:
            continue
        parent, *rest = group.captures
        kept.append(
            group._replace(
                captures=(parent, *(capture for capture in rest if capture in reportable))
            )
        )
    return kept


def highlight_ranges(group: CaptureGroup) -> list[tuple[int, int]]:
    """Byte ranges to highlight inside the parent node's text.

    Sorted by start byte, then end byte. Ranges are relative to the parent's start and
    clipped to it; captures entirely outside the parent are dropped.
    """
    parent = group.parent.node
    ranges: list[tuple[int, int]] = []
    for start, end in sorted(
        (capture.node.start_byte, capture.node.end_byte) for capture in group.captures[1:]
    ):
        start = max(start, parent.start_byte)
        end = min(end, parent.end_byte)
        if start < end:
            ranges.append((start - parent.start_byte, end - parent.start_byte))
    return ranges


def parse_capture_filters(items: Sequence[str] | None) -> dict[str, str]:
    """Parse `name=value` items into a capture filter mapping. A leading `@` is allowed."""
    filters: dict[str, str] = {}
    for item in items or ():
        name, sep, value = item.partition("=")
        name = name.strip().removeprefix("@")
        if not sep or not name:
            raise ValidationError(
                f"Invalid capture filter: {item!r}",
                suggestions=["Capture filters look like NAME=VALUE, e.g. --capture id=main"],
            )
        filters[name] = value
    return filters


def check_capture_filters(filters: Mapping[str, str], compiled: CompiledQuery) -> None:
    """Reject filters naming captures the query does not declare.

    Raises:
        ValidationError: A filter names an unknown capture.
    """
    declared = [name for name in compiled.capture_names if name != ROOT_CAPTURE]
    if unknown := sorted(set(filters) - set(declared)):
        names = ", ".join(f"@{name}" for name in unknown)
        raise ValidationError(
            f"Capture filter for a capture the query does not declare: {names}",
            details={"capture": names, "query": compiled.source},
            suggestions=["The query declares: " + ", ".join(f"@{name}" for name in declared)],
        )


__all__ = (
    "ROOT_CAPTURE",
    "CaptureGroup",
    "CapturedNode",
    "CompiledQuery",
    "StructuralQuery",
    "check_capture_filters",
    "compile_query",
    "filter_groups",
    "highlight_ranges",
    "parse_capture_filters",
    "run_query",
)
