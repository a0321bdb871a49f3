# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Literal pattern matching inside single tokens.

Offsets returned here are UTF-8 byte offsets into the original token text, so they can be
handed straight to `token_line_col` and used to slice source bytes for highlighting.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import ConfigDict, Field, ValidationInfo, field_validator

from syngrep._common import BasedModel, BaseEnum


class CasePolicy(str, BaseEnum):
    """How a literal pattern treats letter case."""

    SMART = "smart"
    """Case-sensitive only if the pattern contains an uppercase character."""
    SENSITIVE = "sensitive"
    INSENSITIVE = "insensitive"

    __slots__ = ()


class LiteralPattern(BasedModel):
    """A literal search pattern.

    When the pattern is matched case-insensitively its text is lowercased here, once, so
    the matcher never folds it again.
    """

    model_config = BasedModel.model_config | ConfigDict(frozen=True)

    case_policy: CasePolicy = CasePolicy.SMART
    whole_word: bool = False
    text: Annotated[str, Field(min_length=1, description="""The text to search for""")]

    @field_validator("text")
    @classmethod
    def _fold_text(cls, value: str, info: ValidationInfo) -> str:
        policy = info.data.get("case_policy", CasePolicy.SMART)
        if policy is CasePolicy.INSENSITIVE or (
            policy is CasePolicy.SMART and not any(char.isupper() for char in value)
        ):
            return value.lower()
        return value

    @property
    def case_sensitive(self) -> bool:
        """Whether matching compares case."""
        match self.case_policy:
            case CasePolicy.SENSITIVE:
                return True
            case CasePolicy.INSENSITIVE:
                return False
            case _:
                return any(char.isupper() for char in self.text)


def _is_word_char(char: str) -> bool:
    return char.isascii() and char.isalpha()


def check_word_bounds(text: str, match_begin: int, match_end: int) -> bool:
    """Return True if `text[match_begin:match_end]` is not glued to letters on either side.

    Indices are character indices into `text`. The start and end of `text` count as
    boundaries.
    """
    if match_begin > 0 and _is_word_char(text[match_begin - 1]):
        return False
    return not (match_end < len(text) and _is_word_char(text[match_end]))


def _fold(token: str) -> tuple[str, list[int] | None]:
    """Lowercase `token`, with an index map back to it when lowercasing changes its length."""
    folded = token.lower()
    if len(folded) == len(token):
        return folded, None
    pieces: list[str] = []
    index_map: list[int] = []
    for index, char in enumerate(token):
        lowered = char.lower()
        pieces.append(lowered)
        index_map.extend([index] * len(lowered))
    index_map.append(len(token))
    return "".join(pieces), index_map


def _byte_offset(token: str, index: int) -> int:
    if token.isascii():
        return index
    return len(token[:index].encode("utf-8"))


def find_spans(
    token: str, pattern: str, *, is_identifier: bool, whole_word: bool, case_sensitive: bool
) -> list[tuple[int, int]]:
    """Find every occurrence of `pattern` in `token` as `(start, end)` byte spans.

    Occurrences are leftmost-first and never overlap. A whole-word identifier must match the
    entire token. Otherwise, with `whole_word`, occurrences touching an ASCII letter are
    dropped.
    """
    if not case_sensitive:
        assert pattern == pattern.lower(), "case-insensitive patterns must be lowercased first"
        haystack, index_map = _fold(token)
    else:
        haystack, index_map = token, None

    if is_identifier and whole_word:
        return [(0, len(token.encode("utf-8")))] if haystack == pattern else []
    if not pattern:
        return []

    spans: list[tuple[int, int]] = []
    start = haystack.find(pattern)
    while start != -1:
        end = start + len(pattern)
        if not whole_word or check_word_bounds(haystack, start, end):
            orig_start, orig_end = (
                (index_map[start], index_map[end]) if index_map else (start, end)
            )
            spans.append((_byte_offset(token, orig_start), _byte_offset(token, orig_end)))
        start = haystack.find(pattern, end)
    return spans


def find_occurrences(
    token: str, pattern: str, *, is_identifier: bool, whole_word: bool, case_sensitive: bool
) -> list[int]:
    """Return the start byte offsets of every occurrence of `pattern` in `token`.

    Matching `"te"` against `"tey te tey"` gives `[0, 4, 7]`; with `whole_word` it gives
    `[4]`.
    """
    return [
        start
        for start, _ in find_spans(
            token,
            pattern,
            is_identifier=is_identifier,
            whole_word=whole_word,
            case_sensitive=case_sensitive,
        )
    ]


__all__ = (
    "CasePolicy",
    "LiteralPattern",
    "check_word_bounds",
    "find_occurrences",
    "find_spans",
)
