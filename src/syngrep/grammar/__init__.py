# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Grammar profiles, entry point resolution and loading."""

from syngrep.grammar.loader import load_language, load_library_language, load_module_language
from syngrep.grammar.registry import (
    BUILTIN_GRAMMARS,
    GrammarProfile,
    available_grammars,
    get_profile,
)
from syngrep.grammar.symbols import resolve_symbol, select_language_symbol


__all__ = (
    "BUILTIN_GRAMMARS",
    "GrammarProfile",
    "available_grammars",
    "get_profile",
    "load_language",
    "load_library_language",
    "load_module_language",
    "resolve_symbol",
    "select_language_symbol",
)
