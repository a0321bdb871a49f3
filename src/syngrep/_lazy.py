# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Lazy attribute access for package `__init__` modules.

`syngrep` re-exports its public API from the package root, but importing the root must
not import tree-sitter, pyelftools or cyclopts. Each package maps exported names to the
submodule defining them and resolves them on first access.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from importlib import import_module


type LazyImports = Mapping[str, tuple[str, str]]
"""Exported name -> (package, submodule)."""


def create_lazy_getattr(
    dynamic_imports: LazyImports, module_globals: dict[str, object], module_name: str
) -> Callable[[str], object]:
    """Build a module `__getattr__` that imports names from `dynamic_imports` on first use.

    Resolved names are stored in `module_globals`, so each is imported once.
    """

    def __getattr__(name: str) -> object:  # noqa: N807
        try:
            package, submodule = dynamic_imports[name]
        except KeyError:
            raise AttributeError(f"module {module_name!r} has no attribute {name!r}") from None
        value = getattr(import_module(f"{package}.{submodule}"), name)
        module_globals[name] = value
        return value

    __getattr__.__module__ = module_name
    return __getattr__


def create_lazy_dir(
    exported: Iterable[str], module_globals: dict[str, object]
) -> Callable[[], list[str]]:
    """Build a module `__dir__` listing lazy exports before they are imported."""

    def __dir__() -> list[str]:  # noqa: N807
        return sorted({*module_globals, *exported})

    return __dir__


__all__ = ("LazyImports", "create_lazy_dir", "create_lazy_getattr")
