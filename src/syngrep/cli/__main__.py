# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""syngrep CLI entrypoint."""

from __future__ import annotations

import logging
import sys

from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

import cyclopts
import pydantic

from cyclopts import App, Parameter
from rich.console import Console

from syngrep import __version__
from syngrep.config.logging import setup_logger
from syngrep.config.settings import SyngrepSettings, get_settings
from syngrep.core.matcher import CasePolicy, LiteralPattern
from syngrep.core.query import (
    StructuralQuery,
    check_capture_filters,
    compile_query,
    parse_capture_filters,
)
from syngrep.core.search import MatchSpec, SearchSession
from syngrep.engine.discovery import FileDiscoveryService
from syngrep.engine.runner import SearchRunner, SearchStats
from syngrep.exceptions import SyngrepError, ValidationError
from syngrep.grammar.loader import load_language
from syngrep.grammar.registry import GrammarProfile, get_profile, normalize_extensions
from syngrep.ui.report import MatchReporter
from syngrep.ui.status_display import get_display


if TYPE_CHECKING:
    import tree_sitter


logger = logging.getLogger(__name__)

app = App(
    "syngrep",
    help="syngrep: grep that knows which tokens are identifiers, strings and comments.",
    default_parameter=Parameter(negative=()),
    version=__version__,
)


def _settings_overrides(
    *,
    nocolor: bool,
    nogroup: bool,
    column: bool,
    case: CasePolicy | None,
    word: bool,
    kinds: str | None,
    log_level: str | None,
) -> dict[str, Any]:
    """Only flags that were given override config files and the environment."""
    overrides: dict[str, Any] = {}
    if nocolor:
        overrides["color"] = False
    if nogroup:
        overrides["group"] = False
    if column:
        overrides["column"] = True
    if word:
        overrides["whole_word"] = True
    if case is not None:
        overrides["case_policy"] = case
    if kinds is not None:
        overrides["node_kinds"] = kinds
    if log_level is not None:
        overrides["log_level"] = log_level
    return overrides


def _resolve_profile(
    settings: SyngrepSettings,
    *,
    lang: str | None,
    lib: Path | None,
    lib_symbol: str | None,
    ext: list[str] | None,
) -> GrammarProfile:
    if lang and lib:
        raise ValidationError("Pass either --lang or --lib, not both")
    if lib is not None:
        try:
            return GrammarProfile(
                name=lib.stem, library=lib, symbol=lib_symbol, extensions=ext or ()
            )
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid grammar options: {e}") from e
    if not lang:
        raise ValidationError(
            "No language specified",
            suggestions=["Pass --lang rust|ocaml|python, or --lib with a compiled grammar"],
        )
    profile = get_profile(lang, settings.grammars)
    if ext:
        profile = profile.model_copy(update={"extensions": normalize_extensions(ext)})
    return profile


def _build_spec(
    settings: SyngrepSettings,
    language: tree_sitter.Language,
    *,
    pattern: str | None,
    query: str | None,
    whole_node: bool,
    capture: list[str] | None,
) -> MatchSpec:
    if query is not None:
        compiled = compile_query(query, language, capture_root=whole_node)
        filters = parse_capture_filters(capture)
        check_capture_filters(filters, compiled)
        return StructuralQuery(compiled=compiled, capture_filters=filters)
    if capture:
        raise ValidationError("--capture only applies to structural queries (--query)")
    if pattern is None:
        raise ValidationError(
            "A pattern or a query is required",
            suggestions=["Pass a PATTERN, or a structural query with --query / --query-file"],
        )
    try:
        return LiteralPattern(
            text=pattern, case_policy=settings.case_policy, whole_word=settings.whole_word
        )
    except pydantic.ValidationError as e:
        raise ValidationError("The search pattern must not be empty") from e


def run_search(
    settings: SyngrepSettings,
    *,
    pattern: str | None,
    path: Path,
    query: str | None = None,
    lang: str | None = None,
    lib: Path | None = None,
    lib_symbol: str | None = None,
    ext: list[str] | None = None,
    whole_node: bool = False,
    capture: list[str] | None = None,
    console: Console | None = None,
) -> SearchStats:
    """Resolve the grammar and the search spec, then search every discovered file.

    Every fatal problem (bad arguments, grammar, or query) is raised before the first file
    is read.
    """
    profile = _resolve_profile(settings, lang=lang, lib=lib, lib_symbol=lib_symbol, ext=ext)
    language = load_language(profile)
    spec = _build_spec(
        settings, language, pattern=pattern, query=query, whole_node=whole_node, capture=capture
    )
    files = FileDiscoveryService(profile, settings).discover(path)
    reporter = MatchReporter(
        console
        or Console(highlight=False, markup=False, soft_wrap=True, no_color=not settings.color),
        settings.styles,
        color=settings.color,
        group=settings.group,
        column=settings.column,
    )
    runner = SearchRunner(SearchSession(language, profile), spec, reporter, kinds=settings.node_kinds)
    return runner.run(files)


@app.default
def search(
    pattern: Annotated[
        str | None, cyclopts.Parameter(help="Literal text to find. Omit it with --query.")
    ] = None,
    path: Annotated[
        Path | None,
        cyclopts.Parameter(help="File or directory to search. Defaults to the current directory."),
    ] = None,
    /,
    *,
    lang: Annotated[
        str | None,
        cyclopts.Parameter(name=["--lang", "-l"], help="Grammar to use: rust, ocaml, python"),
    ] = None,
    lib: Annotated[
        Path | None,
        cyclopts.Parameter(name="--lib", help="Compiled tree-sitter grammar (.so) to use"),
    ] = None,
    lib_symbol: Annotated[
        str | None,
        cyclopts.Parameter(
            name="--lib-symbol", help="Entry point of --lib, if not the one its symbols suggest"
        ),
    ] = None,
    ext: Annotated[
        list[str] | None,
        cyclopts.Parameter(name="--ext", help="File extension searched in directories"),
    ] = None,
    kinds: Annotated[
        str | None,
        cyclopts.Parameter(
            name=["--kinds", "-k"], help="Node kinds to search: identifier,string,comment"
        ),
    ] = None,
    word: Annotated[
        bool, cyclopts.Parameter(name=["--word", "-w"], help="Only match whole words")
    ] = False,
    case: Annotated[
        CasePolicy | None,
        cyclopts.Parameter(name="--case", help="Case policy: smart, sensitive or insensitive"),
    ] = None,
    query: Annotated[
        str | None,
        cyclopts.Parameter(
            name=["--query", "-q"],
            help="Structural query, e.g. '(function_item name: (identifier) @id)'",
        ),
    ] = None,
    query_file: Annotated[
        Path | None, cyclopts.Parameter(name="--query-file", help="Read the query from a file")
    ] = None,
    whole_node: Annotated[
        bool,
        cyclopts.Parameter(
            name="--whole-node", help="Report whole matched nodes with captures highlighted"
        ),
    ] = False,
    capture: Annotated[
        list[str] | None,
        cyclopts.Parameter(name="--capture", help="Only report captures with this text: NAME=VALUE"),
    ] = None,
    column: Annotated[
        bool, cyclopts.Parameter(name="--column", help="Print column numbers")
    ] = False,
    nogroup: Annotated[
        bool, cyclopts.Parameter(name="--nogroup", help="Prefix each match with its file path")
    ] = False,
    nocolor: Annotated[bool, cyclopts.Parameter(name="--nocolor", help="Disable colors")] = False,
    config: Annotated[
        Path | None, cyclopts.Parameter(name="--config", help="Read settings from this TOML file")
    ] = None,
    log_level: Annotated[
        str | None, cyclopts.Parameter(name="--log-level", help="Log level for diagnostics")
    ] = None,
) -> None:
    """Search source files for a literal pattern or a structural query."""
    if query is not None and query_file is not None:
        raise ValidationError("Pass either --query or --query-file, not both")
    if query_file is not None:
        try:
            query = query_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ValidationError(
                f"Unable to read query file: {e}", details={"file_path": str(query_file)}
            ) from e
    if query is not None and pattern is not None:
        if path is not None:
            raise ValidationError(
                "Pass either a PATTERN or a query, not both",
                suggestions=["With --query, the only positional argument is the PATH"],
            )
        pattern, path = None, Path(pattern)

    settings = get_settings(
        config,
        **_settings_overrides(
            nocolor=nocolor,
            nogroup=nogroup,
            column=column,
            case=case,
            word=word,
            kinds=kinds,
            log_level=log_level,
        ),
    )
    _ = setup_logger(level=settings.log_level)
    stats = run_search(
        settings,
        pattern=pattern,
        path=path or Path(),
        query=query,
        lang=lang,
        lib=lib,
        lib_symbol=lib_symbol,
        ext=ext,
        whole_node=whole_node,
        capture=capture,
    )
    if stats.total_errors:
        logger.warning("%d files could not be searched", stats.total_errors)


def main() -> None:
    """Main CLI entry point."""
    display = get_display()
    try:
        app()
    except SyngrepError as e:
        display.print_exception(e)
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()


__all__ = ("app", "main", "run_search", "search")
