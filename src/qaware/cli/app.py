# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

import typer

from . import check, provision, report

app = typer.Typer(
    name="qaware",
    help="Run Checkstyle, PMD and FindBugs across every module and gate the build.",
    no_args_is_help=True,
    add_completion=False,
)
check.register(app)
provision.register(app)
report.register(app)

__all__ = ["app"]
