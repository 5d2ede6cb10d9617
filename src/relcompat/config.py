# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders for the compatibility resolver."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .candidates import DEFAULT_RELEASE_PREFIXES
from .descriptors import OBJECT_TYPE, parse_type
from .errors import ConfigError, DescriptorError

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
STANDALONE_FILENAME: Final[str] = "relcompat.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "relcompat"


class OutputConfig(BaseModel):
    """Configuration for console rendering."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    format: Literal["table", "json"] = "table"
    color: bool = True
    emoji: bool = True
    verbose: bool = False


class ResolverConfig(BaseModel):
    """Inputs and knobs for one resolver invocation."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    release_prefixes: list[str] = Field(default_factory=lambda: list(DEFAULT_RELEASE_PREFIXES))
    root_type: str = OBJECT_TYPE
    catalogue: Path | None = None
    scope: Path | None = None
    exclude: list[str] = Field(default_factory=list)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("release_prefixes")
    @classmethod
    def _require_prefixes(cls, value: list[str]) -> list[str]:
        if not value or any(not prefix for prefix in value):
            raise ValueError("release_prefixes must contain at least one non-empty prefix")
        return value

    @field_validator("root_type")
    @classmethod
    def _validate_root_type(cls, value: str) -> str:
        try:
            return parse_type(value)
        except DescriptorError as exc:
            raise ValueError(str(exc)) from exc

    def resolved(self, base_dir: Path) -> ResolverConfig:
        """Return a copy whose relative paths are anchored at ``base_dir``."""

        updates: dict[str, Path] = {}
        for key in ("catalogue", "scope"):
            value: Path | None = getattr(self, key)
            if value is not None and not value.is_absolute():
                updates[key] = base_dir / value
        return self.model_copy(update=updates) if updates else self


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def config_from_mapping(data: Mapping[str, Any], *, source: str = "<config>") -> ResolverConfig:
    """Validate ``data`` into a :class:`ResolverConfig`.

    Raises:
        ConfigError: If the mapping contains unknown keys or invalid values.
    """

    try:
        return ResolverConfig.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {source}:\n{exc}") from exc


def load_config_file(path: Path) -> ResolverConfig:
    """Load a configuration file.

    ``pyproject.toml`` files are read from the ``[tool.relcompat]`` table;
    any other TOML file is treated as a standalone configuration document.

    Args:
        path: TOML file to read.

    Returns:
        ResolverConfig: Validated configuration with paths anchored at the file's directory.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated.
    """

    document = _read_toml(path)
    if path.name == PYPROJECT_FILENAME:
        tool_section = document.get(PYPROJECT_TOOL_KEY, {})
        section = tool_section.get(PYPROJECT_SECTION_KEY, {}) if isinstance(tool_section, Mapping) else {}
    else:
        section = document
    if not isinstance(section, Mapping):
        raise ConfigError(f"Configuration at {path} must be a table")
    return config_from_mapping(section, source=str(path)).resolved(path.parent)


def discover_config(project_root: Path) -> ResolverConfig:
    """Locate and load configuration for ``project_root``.

    ``relcompat.toml`` takes precedence over ``pyproject.toml``. Built-in
    defaults are returned when neither file exists.
    """

    for filename in (STANDALONE_FILENAME, PYPROJECT_FILENAME):
        candidate = project_root / filename
        if candidate.is_file():
            return load_config_file(candidate)
    return ResolverConfig()


__all__ = [
    "OutputConfig",
    "ResolverConfig",
    "config_from_mapping",
    "discover_config",
    "load_config_file",
]
