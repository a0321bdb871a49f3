# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""CLI interface for syngrep."""

from types import MappingProxyType
from typing import TYPE_CHECKING

from syngrep._lazy import LazyImports, create_lazy_dir, create_lazy_getattr


if TYPE_CHECKING:
    from syngrep.cli.__main__ import app, main, run_search


_dynamic_imports: LazyImports = MappingProxyType({
    "app": (__spec__.parent, "__main__"),
    "main": (__spec__.parent, "__main__"),
    "run_search": (__spec__.parent, "__main__"),
})


__getattr__ = create_lazy_getattr(_dynamic_imports, globals(), __name__)


__all__ = ("app", "main", "run_search")

__dir__ = create_lazy_dir(__all__, globals())
