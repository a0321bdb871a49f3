# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Foundational model and enum classes shared across syngrep."""

from __future__ import annotations

from enum import Enum, unique
from typing import Any, Self, cast

import textcase

from pydantic import BaseModel, ConfigDict
from pydantic.fields import ComputedFieldInfo, FieldInfo


def _generate_title(model: type[Any]) -> str:
    """Generate a title for a model."""
    model_name = model.__name__ if hasattr(model, "__name__") else str(model)
    return textcase.title(model_name.replace("Model", ""))


def _generate_field_title(name: str, info: FieldInfo | ComputedFieldInfo) -> str:
    """Generate a title for a model field."""
    if titled := info.title:
        return titled
    if aliased := getattr(info, "alias", None):
        return textcase.sentence(aliased)
    return textcase.sentence(name)


class BasedModel(BaseModel):
    """A baser `BaseModel` for all models in syngrep."""

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        cache_strings="all",
        field_title_generator=_generate_field_title,
        model_title_generator=_generate_title,
        serialize_by_alias=True,
        use_attribute_docstrings=True,
        validate_by_alias=True,
        validate_by_name=True,
    )


@unique
class BaseEnum(Enum):
    """String enum with forgiving lookups.

    `from_string` accepts the member name or value in any case, with dashes, spaces or
    underscores, so CLI and config values like `Case-Sensitive` or `case_sensitive` resolve
    to the same member.
    """

    @staticmethod
    def _deconstruct_string(value: str) -> list[str]:
        """Deconstruct a string into its component parts."""
        value = value.strip().lower().replace("-", "_").replace(" ", "_")
        for underscore_length in range(4, 0, -1):
            value = value.replace("_" * underscore_length, "_")
        return [v for v in value.split("_") if v]

    @property
    def aka(self) -> tuple[str, ...]:
        """Return the alternate spellings of the member."""
        variations: set[str] = set()
        for s in (self.name, str(self.value)):
            variations |= {
                s,
                textcase.snake(s),
                textcase.kebab(s),
                textcase.camel(s),
                textcase.sentence(s),
            }
        return tuple(sorted({v.lower() for v in variations if v}))

    @classmethod
    def aliases(cls) -> dict[str, Self]:
        """Map every alternate spelling to its member."""
        alias_map: dict[str, Self] = {}
        for member in cls:
            for alias in member.aka:
                alias_map.setdefault(alias, member)
        return alias_map

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Convert a string to the corresponding enum member."""
        if literal_value := next(
            (
                member
                for member in cls
                if str(member.value).lower() == str(value).lower()
                or member.name.lower() == str(value).lower()
            ),
            None,
        ):
            return cast(Self, literal_value)
        if found_member := cls.aliases().get(str(value).lower()):
            return found_member
        value_parts = cls._deconstruct_string(value)
        if found_member := next(
            (member for member in cls if cls._deconstruct_string(member.name) == value_parts), None
        ):
            return found_member
        raise ValueError(f"{value} is not a valid {cls.__qualname__} member")

    def __str__(self) -> str:
        """Return the string representation of the enum member."""
        return str(self.value)


__all__ = ("BaseEnum", "BasedModel")
