# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Global pytest configuration and fixtures for syngrep tests."""

from __future__ import annotations

import logging
import os

from collections.abc import Iterator
from pathlib import Path

import pytest

import tree_sitter

from syngrep.config.settings import reset_settings
from syngrep.core.search import SearchSession
from syngrep.grammar.loader import load_language
from syngrep.grammar.registry import BUILTIN_GRAMMARS, GrammarProfile


RUST_SAMPLE = 'fn test() {\n    let s = "testtest";\n    let s = "test";\n}\n'
"""Small Rust file with the pattern `test` in an identifier and in two strings."""

NESTED_FUNCTIONS = "fn outer() {\n    fn inner() {}\n}\n"


@pytest.fixture(autouse=True)
def isolated_test_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Ensure all tests run in an isolated environment.

    This autouse fixture prevents tests from touching real user configs by:
    - Removing SYNGREP_* environment variables
    - Pointing the user config directory at a temporary directory
    - Running from an empty working directory
    - Resetting settings and the syngrep logger between tests
    """
    for key in list(os.environ):
        if key.startswith("SYNGREP_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    reset_settings()
    yield
    reset_settings()
    syngrep_logger = logging.getLogger("syngrep")
    syngrep_logger.handlers.clear()
    syngrep_logger.propagate = True
    syngrep_logger.setLevel(logging.NOTSET)


@pytest.fixture(scope="session")
def rust_profile() -> GrammarProfile:
    """The built-in Rust grammar profile."""
    return BUILTIN_GRAMMARS["rust"]


@pytest.fixture(scope="session")
def rust_language(rust_profile: GrammarProfile) -> tree_sitter.Language:
    """The Rust language from the tree-sitter-rust wheel."""
    return load_language(rust_profile)


@pytest.fixture
def rust_session(rust_language: tree_sitter.Language, rust_profile: GrammarProfile) -> SearchSession:
    """A parser session for Rust."""
    return SearchSession(rust_language, rust_profile)


@pytest.fixture
def rust_file(tmp_path: Path) -> Path:
    """A Rust source file holding `RUST_SAMPLE`."""
    path = tmp_path / "src" / "main.rs"
    path.parent.mkdir(parents=True)
    path.write_text(RUST_SAMPLE, encoding="utf-8")
    return path


@pytest.fixture
def rust_sample() -> bytes:
    """`RUST_SAMPLE` as bytes."""
    return RUST_SAMPLE.encode("utf-8")


@pytest.fixture
def nested_functions() -> bytes:
    """A Rust function with a nested function."""
    return NESTED_FUNCTIONS.encode("utf-8")
