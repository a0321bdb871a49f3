# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""Tests for capture filtering and highlight layout, without a grammar."""

from __future__ import annotations

from typing import NamedTuple

import pytest

from syngrep.core.query import (
    ROOT_CAPTURE,
    CaptureGroup,
    CapturedNode,
    filter_groups,
    highlight_ranges,
    parse_capture_filters,
)
from syngrep.exceptions import ValidationError


pytestmark = [pytest.mark.unit]

SOURCE = b"fn main() { helper(); }"


class Span(NamedTuple):
    """Stands in for a node; only byte offsets are read."""

    type: str
    start_byte: int
    end_byte: int


def _capture(name: str, text: str) -> CapturedNode:
    start = SOURCE.decode().index(text)
    return CapturedNode(name, Span("node", start, start + len(text)))  # type: ignore[arg-type]


def _group(*captures: CapturedNode) -> CaptureGroup:
    return CaptureGroup(0, captures)


class TestFilterGroups:
    """A group survives if any capture is reportable."""

    def test_no_filters_keeps_everything(self) -> None:
        """Without filters nothing is dropped."""
        groups = [_group(_capture("fn", "main"))]
        assert filter_groups(groups, {}, SOURCE) == groups

    def test_matching_filter_keeps_group(self) -> None:
        """A capture whose text equals its filter is reportable."""
        groups = [_group(_capture("fn", "main")), _group(_capture("fn", "helper"))]
        kept = filter_groups(groups, {"fn": "main"}, SOURCE)
        assert [group.parent.node.start_byte for group in kept] == [3]

    def test_filter_is_case_sensitive(self) -> None:
        """Filter values are compared exactly."""
        assert filter_groups([_group(_capture("fn", "main"))], {"fn": "Main"}, SOURCE) == []

    def test_unfiltered_capture_keeps_group(self) -> None:
        """A capture with no filter is always reportable."""
        group = _group(_capture("item", "fn main() { helper(); }"), _capture("fn", "main"))
        kept = filter_groups([group], {"fn": "nope"}, SOURCE)
        assert len(kept) == 1
        # the failing capture is no longer highlighted
        assert [capture.name for capture in kept[0].captures] == ["item"]

    def test_root_capture_does_not_count(self) -> None:
        """The synthetic whole-node capture never keeps a group by itself."""
        group = _group(_capture(ROOT_CAPTURE, "fn main() { helper(); }"), _capture("fn", "main"))
        assert filter_groups([group], {"fn": "nope"}, SOURCE) == []
        kept = filter_groups([group], {"fn": "main"}, SOURCE)
        assert [capture.name for capture in kept[0].captures] == [ROOT_CAPTURE, "fn"]


class TestHighlightRanges:
    """Later captures become highlights relative to the parent."""

    def test_relative_and_sorted(self) -> None:
        """Ranges are relative to the parent start and sorted."""
        group = _group(
            _capture(ROOT_CAPTURE, "main() { helper(); }"),
            _capture("call", "helper"),
            _capture("fn", "main"),
        )
        assert highlight_ranges(group) == [(0, 4), (9, 15)]

    def test_ties_sort_by_end(self) -> None:
        """Ranges starting together are ordered by end."""
        group = _group(
            _capture(ROOT_CAPTURE, "fn main() { helper(); }"),
            _capture("call", "helper()"),
            _capture("fn", "helper"),
        )
        assert highlight_ranges(group) == [(12, 18), (12, 20)]

    def test_ranges_outside_parent_clipped_or_dropped(self) -> None:
        """Captures are clipped to the parent, or dropped when fully outside it."""
        group = _group(
            _capture("body", "{ helper(); }"),
            _capture("fn", "main"),
            _capture("call", "helper(); }"),
            CapturedNode("tail", Span("node", 20, 30)),  # type: ignore[arg-type]
        )
        assert highlight_ranges(group) == [(2, 13), (10, 13)]

    def test_single_capture_has_no_highlights(self) -> None:
        """A lone parent has nothing to highlight."""
        assert highlight_ranges(_group(_capture("fn", "main"))) == []


class TestParseCaptureFilters:
    """`NAME=VALUE` parsing for the command line."""

    def test_parse(self) -> None:
        """Values may contain `=` and may be empty."""
        assert parse_capture_filters(["id=main", "@op=a=b", "empty="]) == {
            "id": "main",
            "op": "a=b",
            "empty": "",
        }

    def test_none(self) -> None:
        """No items, no filters."""
        assert parse_capture_filters(None) == {}

    @pytest.mark.parametrize("item", ["novalue", "=value", "@=x"])
    def test_malformed(self, item: str) -> None:
        """Items need a name and an `=`."""
        with pytest.raises(ValidationError):
            _ = parse_capture_filters([item])
