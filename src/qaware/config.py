# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model and loaders for the qaware build integration."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from .constants import DEFAULT_SOURCE_SETS, TOOL_NAMES

CONFIG_FILENAME: Final[str] = "qaware.toml"
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "qaware"


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class QualityConfig(BaseModel):
    """Project-wide settings declared on the root project.

    Field names are snake_case; the camelCase spellings used by existing build
    scripts (``javaVersion``, ``checkstyleToolVersion`` ...) are accepted too.
    """

    model_config = ConfigDict(validate_assignment=True, populate_by_name=True, extra="forbid")

    java_version: str = Field(default="1.8", alias="javaVersion")
    checkstyle_tool_version: str = Field(default="8.0", alias="checkstyleToolVersion")
    checkstyle_override_path: str | None = Field(default=None, alias="checkstyleOverridePath")
    checkstyle_suppressions_path: str | None = Field(default=None, alias="checkstyleSuppressionsPath")
    pmd_tool_version: str = Field(default="5.8.1", alias="pmdToolVersion")
    findbugs_tool_version: str = Field(default="3.0.1", alias="findbugsToolVersion")
    modules: list[str] = Field(default_factory=list)
    source_sets: list[str] = Field(default_factory=lambda: list(DEFAULT_SOURCE_SETS))
    module_source_sets: dict[str, list[str]] = Field(default_factory=dict)
    module_overrides: dict[str, dict[str, str]] = Field(default_factory=dict)
    fail_on_violations: bool = Field(default=False, alias="failOnViolations")
    tool_commands: dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("tool_commands", "module_overrides")
    @classmethod
    def _known_tools(cls, value: dict[str, Any], info: ValidationInfo) -> dict[str, Any]:
        if info.field_name == "tool_commands":
            unknown = sorted(set(value) - set(TOOL_NAMES))
        else:
            unknown = sorted({tool for entry in value.values() for tool in entry} - set(TOOL_NAMES))
        if unknown:
            raise ValueError(f"unknown tool(s): {', '.join(unknown)}")
        return value

    @field_validator("source_sets")
    @classmethod
    def _non_empty_source_sets(cls, value: list[str]) -> list[str]:
        if any(not name.strip() for name in value):
            raise ValueError("source set names must be non-empty")
        return value

    def tool_version(self, tool: str) -> str:
        """Return the configured version of *tool*."""
        versions = {
            "checkstyle": self.checkstyle_tool_version,
            "pmd": self.pmd_tool_version,
            "findbugs": self.findbugs_tool_version,
        }
        try:
            return versions[tool]
        except KeyError as exc:
            raise ConfigError(f"Unknown analysis tool '{tool}'") from exc

    def module_override(self, module_path: str, tool: str) -> str | None:
        return self.module_overrides.get(module_path, {}).get(tool)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def config_from_mapping(data: Mapping[str, Any], *, source: str = "<mapping>") -> QualityConfig:
    """Validate *data* into a :class:`QualityConfig`, wrapping validation errors."""

    try:
        return QualityConfig.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {source}: {exc}") from exc


def load_config(root: Path, *, config_file: Path | None = None) -> QualityConfig:
    """Load configuration for the project rooted at *root*.

    ``qaware.toml`` wins over ``[tool.qaware]`` in ``pyproject.toml``; when
    neither exists the defaults apply.

    Args:
        root: Root project directory.
        config_file: Explicit configuration file overriding discovery.

    Returns:
        QualityConfig: Validated configuration.

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values.
    """

    if config_file is not None:
        if not config_file.is_file():
            raise ConfigError(f"Configuration file not found: {config_file}")
        return config_from_mapping(_read_toml(config_file), source=str(config_file))

    candidate = root / CONFIG_FILENAME
    if candidate.is_file():
        return config_from_mapping(_read_toml(candidate), source=str(candidate))

    pyproject = root / PYPROJECT_FILENAME
    if pyproject.is_file():
        document = _read_toml(pyproject)
        section = document.get(PYPROJECT_TOOL_KEY, {}).get(PYPROJECT_SECTION_KEY)
        if section is not None:
            if not isinstance(section, Mapping):
                raise ConfigError(f"[tool.{PYPROJECT_SECTION_KEY}] in {pyproject} must be a table")
            return config_from_mapping(section, source=str(pyproject))

    return QualityConfig()


__all__ = ["ConfigError", "QualityConfig", "config_from_mapping", "load_config"]
