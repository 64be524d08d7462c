# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""``qaware provision``: write the bundled rulesets into ``code-quality/``."""

from __future__ import annotations

from pathlib import Path

import typer

from ..modules import build_module_tree
from ..resources import ResourceNotFoundError, ResourceResolver
from .shared import EmojiOption, RootOption, build_cli_logger


def provision_command(root: RootOption = Path(), emoji: EmojiOption = True) -> None:
    """Materialise every bundled resource, replacing previously provisioned copies."""

    logger = build_cli_logger(emoji=emoji)
    if not root.is_dir():
        logger.fail(f"Project root does not exist: {root}")
        raise typer.Exit(code=1)
    resolver = ResourceResolver()
    try:
        paths = resolver.provision_all(build_module_tree(root))
    except ResourceNotFoundError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc
    for path in paths:
        logger.echo(str(path))
    logger.ok(f"Provisioned {len(paths)} file(s); they are regenerated on every run")
    raise typer.Exit(code=0)


def register(app: typer.Typer) -> None:
    """Register the ``provision`` command on *app*."""

    app.command("provision")(provision_command)


__all__ = ["provision_command", "register"]
