# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""``qaware check``: configure every module, run the tools, apply the gate."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..build import BuildConfigurationError
from ..config import ConfigError
from ..constants import TOOL_NAMES
from ..plugin import apply_to_directory
from ..resources import ResourceNotFoundError
from ..tools import AnalysisTool, RecordingTool
from .shared import CLIError, ConfigOption, EmojiOption, RootOption, build_cli_logger, load_cli_config

DryRunOption = Annotated[
    bool,
    typer.Option("--dry-run", help="Provision and plan every step without starting the analysis tools."),
]
GateOption = Annotated[
    bool | None,
    typer.Option(
        "--fail-on-violations/--no-fail-on-violations",
        help="Override whether aggregated violations fail the build.",
        show_default=False,
    ),
]


def check_command(
    root: RootOption = Path(),
    config_file: ConfigOption = None,
    emoji: EmojiOption = True,
    dry_run: DryRunOption = False,
    fail_on_violations: GateOption = None,
) -> None:
    """Analyse every module of the project and decide the build verdict."""

    logger = build_cli_logger(emoji=emoji)
    try:
        config = load_cli_config(root, config_file, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    if fail_on_violations is not None:
        config.fail_on_violations = fail_on_violations

    tools: dict[str, AnalysisTool] | None = None
    if dry_run:
        tools = {name: RecordingTool(name) for name in TOOL_NAMES}
    try:
        plugin = apply_to_directory(root, config, tools=tools, use_emoji=emoji)
    except (ConfigError, ResourceNotFoundError, BuildConfigurationError) as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc

    if dry_run:
        for run in plugin.runs:
            logger.echo(f"{run.step_name} ruleset={run.ruleset.resolved} report={run.xml_report}")

    result = plugin.run()
    if not result.succeeded:
        for failure in result.failures:
            logger.fail(f"{failure.step}: {failure.message}")
        raise typer.Exit(code=1)
    logger.ok(f"Build succeeded ({len(result.executed)} steps)")
    raise typer.Exit(code=0)


def register(app: typer.Typer) -> None:
    """Register the ``check`` command on *app*."""

    app.command("check")(check_command)


__all__ = ["check_command", "register"]
