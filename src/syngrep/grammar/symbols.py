# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Find the language entry point of a compiled tree-sitter grammar.

A grammar library exports `tree_sitter_<name>`, and grammars with an external scanner also
export the scanner's lifecycle hooks under the same prefix. This module reads the library's
dynamic symbol table to pick the entry point. It only reads the file; no code in the library
is run.
"""

from __future__ import annotations

import logging

from collections.abc import Iterable
from pathlib import Path

from elftools.common.exceptions import ELFError
from elftools.elf.elffile import ELFFile
from elftools.elf.sections import SymbolTableSection

from syngrep.exceptions import ModuleParseError, ModuleReadError, SymbolNotFoundError


logger = logging.getLogger(__name__)

LANGUAGE_SYMBOL_PREFIX = "tree_sitter_"

SCANNER_SYMBOL_SUFFIXES: tuple[str, ...] = (
    "external_scanner_create",
    "external_scanner_deserialize",
    "external_scanner_destroy",
    "external_scanner_reset",
    "external_scanner_scan",
    "external_scanner_serialize",
)


def is_language_symbol(name: str) -> bool:
    """Whether `name` looks like a language entry point rather than a scanner hook."""
    return name.startswith(LANGUAGE_SYMBOL_PREFIX) and not name.endswith(SCANNER_SYMBOL_SUFFIXES)


def select_language_symbol(names: Iterable[str]) -> str | None:
    """Return the first language entry point in `names`, if any."""
    return next((name for name in names if is_language_symbol(name)), None)


def language_name(symbol: str) -> str:
    """`tree_sitter_rust` -> `rust`."""
    return symbol.removeprefix(LANGUAGE_SYMBOL_PREFIX)


def read_dynamic_symbols(module_path: Path) -> list[str]:
    """Return the names of the symbols a shared library defines, in table order."""
    try:
        with module_path.open("rb") as stream:
            elf = ELFFile(stream)
            section = elf.get_section_by_name(".dynsym")
            if not isinstance(section, SymbolTableSection):
                raise ModuleParseError(
                    "Grammar module has no dynamic symbol table",
                    details={"module_path": str(module_path)},
                    suggestions=["Build the grammar as a shared library (-shared -fPIC)"],
                )
            return [
                symbol.name
                for symbol in section.iter_symbols()
                if symbol.name and symbol["st_shndx"] != "SHN_UNDEF"
            ]
    except OSError as e:
        raise ModuleReadError(
            f"Unable to read grammar module: {e.strerror or e}",
            details={"module_path": str(module_path)},
        ) from e
    except ELFError as e:
        raise ModuleParseError(
            f"Unable to parse grammar module: {e}",
            details={"module_path": str(module_path)},
            suggestions=["Only ELF shared libraries (.so) can be inspected"],
        ) from e


def resolve_symbol(module_path: Path | str, explicit_symbol: str | None = None) -> str:
    """Decide which symbol of `module_path` returns the grammar's language handle.

    An explicit symbol is returned as given; it is checked only when the library is loaded.
    Otherwise the first exported `tree_sitter_*` name that is not a scanner hook wins.

    Raises:
        ModuleReadError: The file could not be read.
        ModuleParseError: The file is not an ELF shared library.
        SymbolNotFoundError: No exported name looks like a language entry point.
    """
    if explicit_symbol:
        return explicit_symbol
    module_path = Path(module_path)
    if symbol := select_language_symbol(read_dynamic_symbols(module_path)):
        logger.debug("Resolved grammar entry point %s in %s", symbol, module_path)
        return symbol
    raise SymbolNotFoundError(
        "No tree-sitter language entry point found in grammar module",
        details={"module_path": str(module_path)},
        suggestions=["Pass the entry point name explicitly with --lib-symbol"],
    )


__all__ = (
    "LANGUAGE_SYMBOL_PREFIX",
    "SCANNER_SYMBOL_SUFFIXES",
    "is_language_symbol",
    "language_name",
    "read_dynamic_symbols",
    "resolve_symbol",
    "select_language_symbol",
)
