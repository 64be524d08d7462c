# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared CLI helpers: options, logger adapter and context loading."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from ..config import ConfigError, QualityConfig, load_config
from ..logging import fail as core_fail
from ..logging import info as core_info
from ..logging import ok as core_ok
from ..logging import warn as core_warn

RootOption = Annotated[
    Path,
    typer.Option("--root", "-r", help="Root project directory.", file_okay=False, resolve_path=True),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Explicit qaware TOML file.", dir_okay=False),
]
EmojiOption = Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji in output.")]


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around the console helpers respecting CLI emoji settings."""

    console: Console
    use_emoji: bool

    def fail(self, message: str) -> None:
        core_fail(message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        core_warn(message, use_emoji=self.use_emoji)

    def ok(self, message: str) -> None:
        core_ok(message, use_emoji=self.use_emoji)

    def info(self, message: str) -> None:
        core_info(message, use_emoji=self.use_emoji)

    def echo(self, message: str) -> None:
        self.console.print(message, markup=False, emoji=False, highlight=False, soft_wrap=True)


def build_cli_logger(*, emoji: bool, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` configured for the provided emoji preference."""

    console = Console(no_color=no_color, highlight=False)
    return CLILogger(console=console, use_emoji=emoji)


def load_cli_config(root: Path, config_file: Path | None, *, logger: CLILogger) -> QualityConfig:
    """Load configuration for *root*, converting errors to :class:`CLIError`."""

    if not root.is_dir():
        logger.fail(f"Project root does not exist: {root}")
        raise CLIError(f"Project root does not exist: {root}")
    try:
        return load_config(root, config_file=config_file)
    except ConfigError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc)) from exc


__all__ = [
    "CLIError",
    "CLILogger",
    "ConfigOption",
    "EmojiOption",
    "RootOption",
    "build_cli_logger",
    "load_cli_config",
]
