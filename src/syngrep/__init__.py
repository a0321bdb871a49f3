# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""syngrep: syntax-aware text search over tree-sitter syntax trees."""

from types import MappingProxyType
from typing import TYPE_CHECKING

from syngrep._lazy import LazyImports, create_lazy_dir, create_lazy_getattr
from syngrep._version import __version__
from syngrep.exceptions import (
    ConfigurationError,
    GrammarError,
    QueryError,
    SearchError,
    SyngrepError,
)
from syngrep.exceptions import ValidationError as SyngrepValidationError


if TYPE_CHECKING:
    from syngrep.core.matcher import CasePolicy, LiteralPattern
    from syngrep.core.nodes import NodeCategory, NodeKinds
    from syngrep.core.query import StructuralQuery, compile_query
    from syngrep.core.search import MatchRecord, SearchSession
    from syngrep.grammar.loader import load_language
    from syngrep.grammar.registry import GrammarProfile, get_profile


_dynamic_imports: LazyImports = MappingProxyType({
    "CasePolicy": (__spec__.parent, "core.matcher"),
    "GrammarProfile": (__spec__.parent, "grammar.registry"),
    "LiteralPattern": (__spec__.parent, "core.matcher"),
    "MatchRecord": (__spec__.parent, "core.search"),
    "NodeCategory": (__spec__.parent, "core.nodes"),
    "NodeKinds": (__spec__.parent, "core.nodes"),
    "SearchSession": (__spec__.parent, "core.search"),
    "StructuralQuery": (__spec__.parent, "core.query"),
    "compile_query": (__spec__.parent, "core.query"),
    "get_profile": (__spec__.parent, "grammar.registry"),
    "load_language": (__spec__.parent, "grammar.loader"),
})


__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)


__all__ = (
    "CasePolicy",
    "ConfigurationError",
    "GrammarError",
    "GrammarProfile",
    "LiteralPattern",
    "MatchRecord",
    "NodeCategory",
    "NodeKinds",
    "QueryError",
    "SearchError",
    "SearchSession",
    "StructuralQuery",
    "SyngrepError",
    "SyngrepValidationError",
    "__version__",
    "compile_query",
    "get_profile",
    "load_language",
)

__dir__ = create_lazy_dir(__all__, globals())
