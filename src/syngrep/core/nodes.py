# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Classify syntax-tree nodes into searchable categories."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Protocol, Self

from pydantic import ConfigDict

from syngrep._common import BasedModel, BaseEnum
from syngrep.exceptions import TokenDecodeError, ValidationError


if TYPE_CHECKING:
    from syngrep.grammar.registry import GrammarProfile


class SyntaxNode(Protocol):
    """The slice of `tree_sitter.Node` the search core reads."""

    @property
    def type(self) -> str: ...

    @property
    def start_byte(self) -> int: ...

    @property
    def end_byte(self) -> int: ...

    @property
    def child_count(self) -> int: ...

    @property
    def children(self) -> Sequence[SyntaxNode]: ...


class NodeCategory(str, BaseEnum):
    """What kind of token a node is, for literal search."""

    IDENTIFIER = "identifier"
    STRING = "string"
    COMMENT = "comment"
    OTHER = "other"

    __slots__ = ()


class NodeKinds(BasedModel):
    """Which node categories a literal search looks in."""

    model_config = BasedModel.model_config | ConfigDict(frozen=True)

    identifier: bool = True
    string: bool = False
    comment: bool = False

    @classmethod
    def parse(cls, value: str | Iterable[str]) -> Self:
        """Build from a comma-separated list like `"string,identifier"`."""
        names = value.split(",") if isinstance(value, str) else value
        selected: set[NodeCategory] = set()
        for name in (n.strip() for n in names):
            if not name:
                continue
            try:
                category = NodeCategory.from_string(name)
            except ValueError as e:
                raise ValidationError(
                    f"Unknown node kind: {name!r}",
                    suggestions=["Use a comma-separated list of: identifier, string, comment"],
                ) from e
            if category is NodeCategory.OTHER:
                raise ValidationError(f"Node kind {name!r} can't be searched")
            selected.add(category)
        if not selected:
            raise ValidationError("At least one node kind must be selected")
        return cls(
            identifier=NodeCategory.IDENTIFIER in selected,
            string=NodeCategory.STRING in selected,
            comment=NodeCategory.COMMENT in selected,
        )

    def enabled(self, category: NodeCategory) -> bool:
        """Whether nodes of `category` should be searched."""
        match category:
            case NodeCategory.IDENTIFIER:
                return self.identifier
            case NodeCategory.STRING:
                return self.string
            case NodeCategory.COMMENT:
                return self.comment
            case _:
                return False

    def __str__(self) -> str:
        return ",".join(
            category.value
            for category in (NodeCategory.IDENTIFIER, NodeCategory.STRING, NodeCategory.COMMENT)
            if self.enabled(category)
        )


def classify(node: SyntaxNode, profile: GrammarProfile, kinds: NodeKinds) -> NodeCategory:
    """Classify `node` using only its kind name and whether it has children.

    Comment and string kind names come from the grammar profile. Any other leaf is an
    identifier-like token, but only when identifier search is enabled.
    """
    kind = node.type
    if kind in profile.comment_kinds:
        return NodeCategory.COMMENT
    if kind in profile.string_kinds:
        return NodeCategory.STRING
    if node.child_count == 0 and kinds.identifier:
        return NodeCategory.IDENTIFIER
    return NodeCategory.OTHER


def node_text(node: SyntaxNode, source: bytes) -> str:
    """Decode the source text a node spans.

    Raises:
        TokenDecodeError: The span is not valid UTF-8.
    """
    try:
        return source[node.start_byte : node.end_byte].decode("utf-8")
    except UnicodeDecodeError as e:
        raise TokenDecodeError(
            f"Token is not valid UTF-8: {e.reason}",
            details={"node_kind": node.type, "start_byte": node.start_byte},
        ) from e


__all__ = ("NodeCategory", "NodeKinds", "SyntaxNode", "classify", "node_text")
