# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""The search core: node classification, matching, positions, queries and orchestration."""

from syngrep.core.matcher import CasePolicy, LiteralPattern, find_occurrences, find_spans
from syngrep.core.nodes import NodeCategory, NodeKinds, classify
from syngrep.core.position import LineIndex, TokenPosition, token_line_col
from syngrep.core.query import (
    CaptureGroup,
    CompiledQuery,
    StructuralQuery,
    compile_query,
    filter_groups,
    run_query,
)
from syngrep.core.search import MatchRecord, SearchSession, search_literal, search_query


__all__ = (
    "CasePolicy",
    "CaptureGroup",
    "CompiledQuery",
    "LineIndex",
    "LiteralPattern",
    "MatchRecord",
    "NodeCategory",
    "NodeKinds",
    "SearchSession",
    "StructuralQuery",
    "TokenPosition",
    "classify",
    "compile_query",
    "filter_groups",
    "find_occurrences",
    "find_spans",
    "run_query",
    "search_literal",
    "search_query",
)
