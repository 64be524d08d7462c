# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Module tree construction and leaf traversal."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .config import ConfigError
from .constants import DEFAULT_SOURCE_SETS
from .models import ROOT_PATH, ProjectNode

ModuleAction = Callable[[ProjectNode], None]


def iter_leaves(root: ProjectNode) -> Iterator[ProjectNode]:
    """Yield every buildable node under *root*, parents before children."""

    stack = [root]
    while stack:
        node = stack.pop()
        if node.leaf:
            yield node
        stack.extend(reversed(node.children))


class ModuleWalker:
    """Apply a configuration action uniformly to every leaf module."""

    def for_each_leaf(self, root: ProjectNode, action: ModuleAction) -> None:
        """Invoke *action* once per leaf node of the tree rooted at *root*.

        Grouping nodes are skipped and a tree without leaves is a no-op.
        """

        for node in iter_leaves(root):
            action(node)


@dataclass
class _DraftNode:
    segments: tuple[str, ...]
    declared: bool = False
    children: dict[str, _DraftNode] = field(default_factory=dict)


def _split_include(include: str) -> tuple[str, ...]:
    raw = include.strip()
    if raw.startswith(ROOT_PATH):
        raw = raw[1:]
    segments = tuple(part.strip() for part in raw.split(":"))
    if not raw or any(not part for part in segments):
        raise ConfigError(f"Invalid module declaration '{include}'")
    return segments


def _module_path(segments: Sequence[str]) -> str:
    return ROOT_PATH + ":".join(segments)


def build_module_tree(
    root_dir: Path,
    includes: Iterable[str] = (),
    *,
    source_sets: Sequence[str] = DEFAULT_SOURCE_SETS,
    module_source_sets: Mapping[str, Sequence[str]] | None = None,
) -> ProjectNode:
    """Build the immutable module tree from a declared include list.

    Includes use ``settings.gradle`` notation (``"core"``, ``"services:api"``).
    Every declared path is buildable; undeclared intermediate segments become
    grouping nodes. Without declarations the root itself is the single leaf.

    Args:
        root_dir: Directory of the root project.
        includes: Declared module paths in declaration order.
        source_sets: Default source sets of every module.
        module_source_sets: Per-module source-set overrides keyed by module path.

    Returns:
        ProjectNode: Root of the constructed tree.

    Raises:
        ConfigError: If a declaration contains empty path segments.
    """

    root_dir = root_dir.resolve()
    overrides = dict(module_source_sets or {})
    draft_root = _DraftNode(segments=())
    for include in includes:
        current = draft_root
        segments = _split_include(include)
        for depth in range(1, len(segments) + 1):
            name = segments[depth - 1]
            current = current.children.setdefault(name, _DraftNode(segments=segments[:depth]))
        current.declared = True

    def freeze(draft: _DraftNode, *, leaf: bool) -> ProjectNode:
        path = _module_path(draft.segments)
        children = tuple(freeze(child, leaf=child.declared) for child in draft.children.values())
        return ProjectNode(
            path=path,
            directory=root_dir.joinpath(*draft.segments),
            root_dir=root_dir,
            children=children,
            leaf=leaf,
            source_sets=tuple(overrides.get(path, source_sets)),
        )

    return freeze(draft_root, leaf=not draft_root.children)


__all__ = ["ModuleAction", "ModuleWalker", "build_module_tree", "iter_leaves"]
