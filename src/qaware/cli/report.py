# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""``qaware report``: aggregate existing reports and print the gate verdict."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config import ConfigError
from ..gate import QualityGate
from ..plugin import load_project
from ..reports import ReportAggregator, ReportParseError
from .shared import CLIError, ConfigOption, EmojiOption, RootOption, build_cli_logger, load_cli_config

FailOption = Annotated[
    bool,
    typer.Option("--fail", help="Exit non-zero when violations are found, regardless of configuration."),
]


def report_command(
    root: RootOption = Path(),
    config_file: ConfigOption = None,
    emoji: EmojiOption = True,
    fail: FailOption = False,
) -> None:
    """Summarise the violations recorded in the latest reports of every module."""

    logger = build_cli_logger(emoji=emoji)
    try:
        config = load_cli_config(root, config_file, logger=logger)
        project = load_project(root, config)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    except ConfigError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc

    try:
        result = ReportAggregator().collect_tree(project)
    except ReportParseError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc

    outcome = QualityGate().decide(result)
    if outcome.passed:
        logger.ok(outcome.summary_text)
        raise typer.Exit(code=0)
    logger.echo(outcome.summary_text)
    counts = ", ".join(f"{tool}={count}" for tool, count in result.by_tool().items())
    logger.warn(f"{outcome.violation_count} violation(s): {counts}")
    raise typer.Exit(code=1 if fail or config.fail_on_violations else 0)


def register(app: typer.Typer) -> None:
    """Register the ``report`` command on *app*."""

    app.command("report")(report_command)


__all__ = ["register", "report_command"]
