# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Layered settings for syngrep.

Command-line flags override everything. Below them come `SYNGREP_*` environment variables,
then a `syngrep.toml` (or `.syngrep.toml`) in the working directory, then the user's
`syngrep.toml` in their config directory, then the defaults here.

A config file looks like:

```toml
column = true
node_kinds = "identifier,comment"

[styles]
match = "bold red"

[grammars.lua]
library = "/usr/local/lib/lua.so"
extensions = ["lua"]
comment_kinds = ["comment"]
string_kinds = ["string"]
```
"""

from __future__ import annotations

import logging
import os
import platform

from collections.abc import Callable
from pathlib import Path
from typing import Annotated, Any, Literal, Self, cast

from pydantic import (
    BeforeValidator,
    Field,
    FilePath,
    PositiveInt,
    field_validator,
)
from pydantic.fields import ComputedFieldInfo, FieldInfo
from pydantic_settings import (
    BaseSettings,
    EnvSettingsSource,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)
from rich.errors import StyleSyntaxError
from rich.style import Style

from syngrep._common import BasedModel
from syngrep.core.matcher import CasePolicy
from syngrep.core.nodes import NodeKinds
from syngrep.exceptions import ConfigurationError, SyngrepError
from syngrep.grammar.registry import GrammarProfile


logger = logging.getLogger(__name__)

type LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_MAX_FILE_SIZE = 8 * 1024 * 1024


def get_user_config_dir(*, base_only: bool = False) -> Path:
    """Get the user configuration directory based on the operating system."""
    if (system := platform.system()) == "Windows":
        config_dir = Path(os.getenv("APPDATA", Path("~\\AppData\\Roaming").expanduser()))
    elif system == "Darwin":
        config_dir = Path.home() / "Library" / "Application Support"
    else:
        config_dir = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
    return config_dir if base_only else config_dir / "syngrep"


def _parse_node_kinds(value: Any) -> Any:
    if isinstance(value, str | list | tuple | set | frozenset):
        try:
            return NodeKinds.parse(value)
        except SyngrepError as e:
            raise ValueError(e.message) from e
    return value


def _parse_case_policy(value: Any) -> Any:
    return CasePolicy.from_string(value) if isinstance(value, str) else value


def _parse_log_level(value: Any) -> Any:
    if isinstance(value, int):
        return logging.getLevelName(value)
    return value.strip().upper() if isinstance(value, str) else value


class ReportStyles(BasedModel):
    """Rich style strings used by the terminal reporter."""

    file_path: Annotated[str, Field(description="""Style of file headers""")] = "bold green"
    line_number: Annotated[str, Field(description="""Style of line and column numbers""")] = (
        "bold yellow"
    )
    match: Annotated[str, Field(description="""Style of highlighted matches""")] = (
        "black on yellow"
    )

    @field_validator("file_path", "line_number", "match")
    @classmethod
    def _check_style(cls, value: str) -> str:
        try:
            _ = Style.parse(value)
        except StyleSyntaxError as e:
            raise ValueError(f"invalid style {value!r}: {e}") from e
        return value


class SyngrepSettings(BaseSettings):
    """Main configuration model following pydantic-settings patterns.

    Configuration precedence (highest to lowest):
    1. Direct initialization arguments (command-line flags)
    2. Environment variables (SYNGREP_*)
    3. An explicit config file, or `syngrep.toml` / `.syngrep.toml` in the working directory
    4. User config (SYSTEM_USER_CONFIG_DIR/syngrep/syngrep.toml)
    5. Defaults
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
        field_title_generator=cast(
            Callable[[str, FieldInfo | ComputedFieldInfo], str],
            BasedModel.model_config["field_title_generator"],  # type: ignore
        ),
        nested_model_default_partial_update=True,
        env_ignore_empty=True,
        env_nested_delimiter="__",
        env_prefix="SYNGREP_",
        str_strip_whitespace=True,
        title="syngrep Settings",
        use_attribute_docstrings=True,
        validate_assignment=True,
        populate_by_name=True,
    )

    color: Annotated[bool, Field(description="""Colorize output""")] = True
    column: Annotated[bool, Field(description="""Print 1-based column numbers""")] = False
    group: Annotated[
        bool, Field(description="""Group matches under a file header instead of prefixing paths""")
    ] = True
    case_policy: Annotated[
        CasePolicy,
        BeforeValidator(_parse_case_policy),
        Field(description="""How literal patterns treat letter case"""),
    ] = CasePolicy.SMART
    node_kinds: Annotated[
        NodeKinds,
        NoDecode,
        BeforeValidator(_parse_node_kinds),
        Field(description="""Node categories searched by literal patterns"""),
    ] = NodeKinds()
    whole_word: Annotated[bool, Field(description="""Only report whole-word matches""")] = False
    log_level: Annotated[
        LogLevel, BeforeValidator(_parse_log_level), Field(description="""Log level""")
    ] = "WARNING"
    ignore_hidden: Annotated[
        bool, Field(description="""Skip hidden files and directories when walking""")
    ] = True
    read_git_ignore: Annotated[
        bool, Field(description="""Respect .gitignore files when walking""")
    ] = True
    max_file_size: Annotated[
        PositiveInt | None, Field(description="""Skip files larger than this many bytes""")
    ] = DEFAULT_MAX_FILE_SIZE
    styles: Annotated[ReportStyles, Field(description="""Reporter styles""")] = ReportStyles()
    grammars: Annotated[
        dict[str, GrammarProfile],
        Field(description="""Additional grammars, keyed by name. Override built-ins by name."""),
    ] = {}

    @field_validator("grammars", mode="before")
    @classmethod
    def _name_grammars(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {
            str(name).lower(): {"name": str(name).lower(), **profile}
            if isinstance(profile, dict)
            else profile
            for name, profile in value.items()
        }

    @classmethod
    def from_config(cls, path: FilePath, **kwargs: Any) -> Self:
        """Create a settings instance from a specific TOML config file.

        The file takes the place of the working-directory and user config files.
        """
        if path.suffix.lower() != ".toml":
            raise ConfigurationError(
                f"Unsupported configuration file format: {path.suffix}",
                details={"file_path": str(path)},
                suggestions=["syngrep reads TOML config files"],
            )
        if not path.is_file():
            raise ConfigurationError(
                "Config file does not exist", details={"file_path": str(path)}
            )
        cls.model_config["toml_file"] = path
        return cls(**kwargs)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the sources of settings.

        Configuration precedence (highest to lowest):
        1. init_settings - Direct initialization arguments
        2. env_settings - Environment variables (SYNGREP_*)
        3. An explicit `toml_file`, if set by `from_config`; otherwise:
            - syngrep.toml
            - .syngrep.toml
            - SYSTEM_USER_CONFIG_DIR/syngrep/syngrep.toml
        """
        if explicit := settings_cls.model_config.get("toml_file"):
            locations = [Path(explicit)]  # type: ignore[arg-type]
        else:
            locations = [
                Path("syngrep.toml"),
                Path(".syngrep.toml"),
                get_user_config_dir() / "syngrep.toml",
            ]
        return (
            init_settings,
            EnvSettingsSource(
                settings_cls,
                env_prefix="SYNGREP_",
                case_sensitive=False,
                env_nested_delimiter="__",
                env_parse_enums=True,
                env_ignore_empty=True,
            ),
            *(TomlConfigSettingsSource(settings_cls, location) for location in locations),
        )


_settings: SyngrepSettings | None = None
"""The global settings instance. Use `get_settings()` to access it."""


def get_settings(config_file: FilePath | None = None, **overrides: Any) -> SyngrepSettings:
    """Get the global settings instance.

    The instance is created on first use. Passing a config file or overrides rebuilds it.
    """
    global _settings
    if config_file is not None or overrides or _settings is None:
        try:
            _settings = (
                SyngrepSettings.from_config(config_file, **overrides)
                if config_file is not None
                else SyngrepSettings(**overrides)
            )
        except ValueError as e:
            # pydantic's ValidationError is a ValueError
            raise ConfigurationError(
                f"Invalid settings: {e}",
                suggestions=["Check syngrep.toml and SYNGREP_* environment variables"],
            ) from e
        logger.debug("Loaded settings: %s", _settings.model_dump(mode="json"))
    return _settings


def reset_settings() -> None:
    """Drop the global settings so the next `get_settings()` reloads them."""
    global _settings
    _settings = None
    SyngrepSettings.model_config.pop("toml_file", None)


__all__ = (
    "DEFAULT_MAX_FILE_SIZE",
    "LogLevel",
    "ReportStyles",
    "SyngrepSettings",
    "get_settings",
    "get_user_config_dir",
    "reset_settings",
)
