# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Unified exception hierarchy for syngrep.

Errors fall into two groups. Fatal errors (`ConfigurationError`, `ValidationError`,
`QueryError`, `GrammarError`) describe a search that is not well-formed and abort the run
before any file is searched. `SearchError` subclasses are local to one file or one token;
they are logged and the search moves on.
"""

from __future__ import annotations

from typing import Any


class SyngrepError(Exception):
    """Base exception for all syngrep errors.

    Provides structured error information including details and suggestions
    for resolution.
    """

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        """Initialize syngrep error.

        Args:
            message: Human-readable error message
            details: Additional context about the error
            suggestions: Actionable suggestions for resolving the error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        """Return descriptive error message with context details."""
        parts = [self.message]
        if self.details:
            detail_parts = [
                f"{key.replace('_', ' ')}: {self.details[key]}"
                for key in ("file_path", "module_path", "symbol", "capture", "line_number")
                if key in self.details
            ]
            if detail_parts:
                parts.append(f"({', '.join(detail_parts)})")
        return " ".join(parts)


class ConfigurationError(SyngrepError):
    """Configuration and settings errors.

    Raised when there are issues with configuration files, environment variables,
    or settings validation.
    """


class ValidationError(SyngrepError):
    """Input validation errors.

    Raised for malformed user input, like an empty search pattern or a capture
    filter without a value.
    """


class QueryError(SyngrepError):
    """Structural query errors. Always fatal: a bad query is never partially run."""


class QuerySyntaxError(QueryError):
    """The structural query could not be compiled for the grammar."""


class NoCapturesError(QueryError):
    """The structural query declares no captures, so nothing could be reported."""


class GrammarError(SyngrepError):
    """Grammar resolution and loading errors.

    Raised before any file is processed when the requested grammar cannot be made
    available.
    """


class SymbolNotFoundError(GrammarError):
    """No language entry point could be found in a grammar module."""


class ModuleReadError(GrammarError):
    """A grammar module could not be read from disk."""


class ModuleParseError(GrammarError):
    """A grammar module is not a shared object whose symbol table we can read."""


class GrammarLoadError(GrammarError):
    """A grammar module could not be loaded or its entry point could not be called."""


class DiscoveryError(SyngrepError):
    """The search path could not be walked. Fatal, like a bad grammar."""


class SearchError(SyngrepError):
    """Errors local to a single file or token. Logged and skipped."""


class ParseFailureError(SearchError):
    """The tree provider could not build a tree for a file."""


class TokenDecodeError(SearchError):
    """A node's byte range is not valid UTF-8 text."""


__all__ = (
    "ConfigurationError",
    "DiscoveryError",
    "GrammarError",
    "GrammarLoadError",
    "ModuleParseError",
    "ModuleReadError",
    "NoCapturesError",
    "ParseFailureError",
    "QueryError",
    "QuerySyntaxError",
    "SearchError",
    "SymbolNotFoundError",
    "SyngrepError",
    "TokenDecodeError",
    "ValidationError",
)
