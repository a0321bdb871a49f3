# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for grammar profiles and loading failures."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pydantic
import pytest

import tree_sitter

from syngrep.exceptions import ConfigurationError, GrammarLoadError, ModuleParseError
from syngrep.grammar.loader import load_library_language, load_module_language
from syngrep.grammar.registry import (
    BUILTIN_GRAMMARS,
    GrammarProfile,
    available_grammars,
    get_profile,
)


pytestmark = [pytest.mark.unit]


class TestGrammarProfile:
    """Profile validation."""

    def test_extensions_normalized(self) -> None:
        """Extensions lose their dots and case."""
        profile = GrammarProfile(name="lua", module="tree_sitter_lua", extensions=[".LUA", "luau"])
        assert profile.extensions == ("lua", "luau")
        assert profile.matches_file(Path("init.Lua"))
        assert not profile.matches_file(Path("init.py"))

    def test_kinds_from_comma_string(self) -> None:
        """Kind names may be given as one comma-separated string."""
        profile = GrammarProfile(name="lua", module="m", comment_kinds="comment, block_comment")
        assert profile.comment_kinds == frozenset({"comment", "block_comment"})

    @pytest.mark.parametrize(
        "sources",
        [
            pytest.param({}, id="neither"),
            pytest.param({"module": "m", "library": "/tmp/m.so"}, id="both"),
        ],
    )
    def test_exactly_one_source(self, sources: dict[str, str]) -> None:
        """A grammar comes from a module or a library, never both."""
        with pytest.raises(pydantic.ValidationError):
            _ = GrammarProfile(name="broken", **sources)


class TestRegistry:
    """Looking up profiles."""

    def test_builtins(self) -> None:
        """Rust, OCaml and Python are built in."""
        assert set(BUILTIN_GRAMMARS) == {"rust", "ocaml", "python"}
        assert get_profile("Rust").extensions == ("rs",)
        assert get_profile("ocaml").language_func == "language_ocaml"

    def test_configured_grammars_override(self) -> None:
        """Configured grammars win over built-ins of the same name."""
        custom = GrammarProfile(name="rust", library=Path("/opt/rust.so"), extensions=["rs"])
        assert get_profile("rust", {"rust": custom}) is custom
        assert set(available_grammars({"lua": custom})) == {"rust", "ocaml", "python", "lua"}

    def test_unknown(self) -> None:
        """Unknown names list what is available."""
        with pytest.raises(ConfigurationError) as exc_info:
            _ = get_profile("cobol")
        assert any("rust" in suggestion for suggestion in exc_info.value.suggestions)


class TestLoaderFailures:
    """Loading errors are grammar errors."""

    def test_missing_module(self) -> None:
        """A grammar package that is not installed."""
        with pytest.raises(GrammarLoadError) as exc_info:
            _ = load_module_language("tree_sitter_does_not_exist")
        assert "pip install tree-sitter-does-not-exist" in exc_info.value.suggestions[0]

    def test_library_symbol_resolution_runs_first(self, tmp_path: Path) -> None:
        """The symbol table is read before anything is loaded."""
        library = tmp_path / "fake.so"
        library.write_bytes(b"\x00" * 64)
        with pytest.raises(ModuleParseError):
            _ = load_library_language(library)

    def test_unloadable_library(self, tmp_path: Path) -> None:
        """A file that is not a loadable library fails to open."""
        library = tmp_path / "fake.so"
        library.write_bytes(b"\x00" * 64)
        with pytest.raises(GrammarLoadError):
            _ = load_library_language(library, "tree_sitter_fake")


class TestAbiVersion:
    """Grammars the parser would refuse are rejected when loaded."""

    @pytest.mark.parametrize(
        "version",
        [
            pytest.param(tree_sitter.MIN_COMPATIBLE_LANGUAGE_VERSION - 1, id="too-old"),
            pytest.param(tree_sitter.LANGUAGE_VERSION + 1, id="too-new"),
        ],
    )
    def test_incompatible_version(self, monkeypatch: pytest.MonkeyPatch, version: int) -> None:
        """An out-of-range ABI version is a grammar error, not a parser crash later."""
        monkeypatch.setattr(
            tree_sitter, "Language", lambda handle: SimpleNamespace(abi_version=version)
        )
        with pytest.raises(GrammarLoadError, match=f"ABI version {version}"):
            _ = load_module_language("tree_sitter_rust")

    def test_compatible_version(self) -> None:
        """The bundled grammars load and can be given to a parser."""
        language = load_module_language("tree_sitter_rust")
        assert (
            tree_sitter.MIN_COMPATIBLE_LANGUAGE_VERSION
            <= language.abi_version
            <= tree_sitter.LANGUAGE_VERSION
        )
        _ = tree_sitter.Parser(language)
