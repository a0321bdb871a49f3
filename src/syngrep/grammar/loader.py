# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Turn a grammar profile into a `tree_sitter.Language`.

Loading a shared-library grammar is a two-step protocol: `resolve_symbol` decides the entry
point by reading the symbol table, then `load_library_language` opens the library and calls
it. Only the second step runs foreign code.
"""

from __future__ import annotations

import ctypes
import importlib
import logging

from pathlib import Path

import tree_sitter

from syngrep.exceptions import GrammarLoadError
from syngrep.grammar.registry import GrammarProfile
from syngrep.grammar.symbols import resolve_symbol


logger = logging.getLogger(__name__)

_CAPSULE_NAME = b"tree_sitter.Language"

_PyCapsule_New = ctypes.pythonapi.PyCapsule_New
_PyCapsule_New.restype = ctypes.py_object
_PyCapsule_New.argtypes = (ctypes.c_void_p, ctypes.c_char_p, ctypes.c_void_p)

# libraries stay open for the life of the process; their languages point into them
_libraries: dict[Path, ctypes.CDLL] = {}


def _as_language(handle: object, origin: str) -> tree_sitter.Language:
    """Wrap a language handle, rejecting ABI versions the parser would refuse.

    `tree_sitter.Language` accepts any pointer; `tree_sitter.Parser` checks the version.
    """
    try:
        language = tree_sitter.Language(handle)
    except (TypeError, ValueError) as e:
        raise GrammarLoadError(
            f"Unusable grammar: {e}", details={"module_path": origin}
        ) from e
    version = language.abi_version
    supported = range(tree_sitter.MIN_COMPATIBLE_LANGUAGE_VERSION, tree_sitter.LANGUAGE_VERSION + 1)
    if version not in supported:
        raise GrammarLoadError(
            f"Grammar ABI version {version} is not supported "
            f"(expected {supported.start} to {supported.stop - 1})",
            details={"module_path": origin},
            suggestions=["Rebuild the grammar with a tree-sitter CLI matching py-tree-sitter"],
        )
    return language


def load_module_language(module: str, language_func: str = "language") -> tree_sitter.Language:
    """Load a grammar shipped as a Python package, like `tree_sitter_rust`."""
    try:
        language_fn = getattr(importlib.import_module(module), language_func)
    except (ImportError, AttributeError) as e:
        raise GrammarLoadError(
            f"Grammar package {module!r} is not available",
            details={"module_path": module},
            suggestions=[f"Install it with: pip install {module.replace('_', '-')}"],
        ) from e
    return _as_language(language_fn(), module)


def load_library_language(library: Path, symbol: str | None = None) -> tree_sitter.Language:
    """Load a grammar from a compiled shared library.

    Args:
        library: Path to the shared library.
        symbol: Entry point name. Looked up from the library's symbol table when `None`.
    """
    symbol = resolve_symbol(library, symbol)
    library = library.resolve()
    try:
        handle = _libraries.get(library) or ctypes.CDLL(str(library))
    except OSError as e:
        raise GrammarLoadError(
            f"Unable to load grammar library: {e}", details={"module_path": str(library)}
        ) from e
    _libraries[library] = handle

    try:
        entry_point = getattr(handle, symbol)
    except AttributeError as e:
        raise GrammarLoadError(
            "Grammar library has no such entry point",
            details={"module_path": str(library), "symbol": symbol},
            suggestions=["Check the name passed with --lib-symbol"],
        ) from e
    entry_point.restype = ctypes.c_void_p
    entry_point.argtypes = []
    pointer = entry_point()
    if not pointer:
        raise GrammarLoadError(
            "Grammar entry point returned a null language",
            details={"module_path": str(library), "symbol": symbol},
        )
    logger.debug("Loaded %s from %s", symbol, library)
    return _as_language(_PyCapsule_New(pointer, _CAPSULE_NAME, None), str(library))


def load_language(profile: GrammarProfile) -> tree_sitter.Language:
    """Load the language a profile describes."""
    if profile.library is not None:
        return load_library_language(profile.library, profile.symbol)
    assert profile.module is not None
    return load_module_language(profile.module, profile.language_func)


__all__ = ("load_language", "load_library_language", "load_module_language")
