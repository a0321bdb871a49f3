# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Grammar profiles: where a grammar comes from and which node kinds it uses."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Annotated, Self

from pydantic import BeforeValidator, ConfigDict, Field, model_validator

from syngrep._common import BasedModel
from syngrep.exceptions import ConfigurationError


def normalize_extensions(value: object) -> object:
    """`"rs,.ML"` or `[".rs", "ml"]` -> `("rs", "ml")`."""
    if isinstance(value, str):
        value = value.split(",")
    if isinstance(value, list | tuple | set | frozenset):
        return tuple(str(ext).strip().lstrip(".").lower() for ext in value if str(ext).strip())
    return value


def _normalize_kinds(value: object) -> object:
    if isinstance(value, str):
        return frozenset(kind.strip() for kind in value.split(",") if kind.strip())
    return value


type Extensions = Annotated[tuple[str, ...], BeforeValidator(normalize_extensions)]
type KindNames = Annotated[frozenset[str], BeforeValidator(_normalize_kinds)]

DEFAULT_COMMENT_KINDS: frozenset[str] = frozenset({"comment", "line_comment", "block_comment"})
DEFAULT_STRING_KINDS: frozenset[str] = frozenset({"string", "string_literal"})


class GrammarProfile(BasedModel):
    """Everything syngrep needs to know about one grammar.

    A grammar comes either from a Python package exposing a language function (`module`)
    or from a compiled shared library (`library`), never both.
    """

    model_config = BasedModel.model_config | ConfigDict(frozen=True)

    name: Annotated[str, Field(description="""Grammar name, like `rust`""")]
    extensions: Annotated[
        Extensions, Field(description="""File extensions searched in directories""")
    ] = ()
    comment_kinds: Annotated[
        KindNames, Field(description="""Node kinds that are comments""")
    ] = DEFAULT_COMMENT_KINDS
    string_kinds: Annotated[
        KindNames, Field(description="""Node kinds that are string literals""")
    ] = DEFAULT_STRING_KINDS
    module: Annotated[
        str | None, Field(description="""Python module providing the grammar""")
    ] = None
    language_func: Annotated[
        str, Field(description="""Function in `module` returning the language handle""")
    ] = "language"
    library: Annotated[
        Path | None, Field(description="""Shared library holding the compiled grammar""")
    ] = None
    symbol: Annotated[
        str | None,
        Field(description="""Entry point in `library`. Looked up from its symbol table if unset."""),
    ] = None

    @model_validator(mode="after")
    def _check_source(self) -> Self:
        if (self.module is None) == (self.library is None):
            raise ValueError(
                f"grammar {self.name!r} needs exactly one of `module` or `library`"
            )
        return self

    def matches_file(self, path: Path) -> bool:
        """Whether a file found while walking a directory belongs to this grammar."""
        return path.suffix.lstrip(".").lower() in self.extensions


BUILTIN_GRAMMARS: MappingProxyType[str, GrammarProfile] = MappingProxyType({
    "rust": GrammarProfile(
        name="rust",
        extensions=("rs",),
        comment_kinds=frozenset({"line_comment", "block_comment"}),
        string_kinds=frozenset({"string_literal", "raw_string_literal"}),
        module="tree_sitter_rust",
    ),
    "ocaml": GrammarProfile(
        name="ocaml",
        extensions=("ml",),
        comment_kinds=frozenset({"comment"}),
        string_kinds=frozenset({"string"}),
        module="tree_sitter_ocaml",
        language_func="language_ocaml",
    ),
    "python": GrammarProfile(
        name="python",
        extensions=("py", "pyi"),
        comment_kinds=frozenset({"comment"}),
        string_kinds=frozenset({"string"}),
        module="tree_sitter_python",
    ),
})


def available_grammars(extra: Mapping[str, GrammarProfile] | None = None) -> dict[str, GrammarProfile]:
    """Built-in grammars overlaid with configured ones."""
    return {**BUILTIN_GRAMMARS, **(extra or {})}


def get_profile(name: str, extra: Mapping[str, GrammarProfile] | None = None) -> GrammarProfile:
    """Look up a grammar profile by name, preferring configured grammars over built-ins."""
    grammars = available_grammars(extra)
    if profile := grammars.get(name.strip().lower()):
        return profile
    raise ConfigurationError(
        f"Unknown grammar: {name!r}",
        suggestions=[
            f"Available grammars: {', '.join(sorted(grammars))}",
            "Add a [grammars.<name>] table to syngrep.toml, or pass --lib with a compiled grammar",
        ],
    )


__all__ = (
    "BUILTIN_GRAMMARS",
    "DEFAULT_COMMENT_KINDS",
    "DEFAULT_STRING_KINDS",
    "GrammarProfile",
    "available_grammars",
    "get_profile",
    "normalize_extensions",
)
