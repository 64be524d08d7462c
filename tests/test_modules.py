# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for module tree construction and leaf traversal."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from qaware.config import ConfigError
from qaware.models import ProjectNode
from qaware.modules import ModuleWalker, build_module_tree, iter_leaves


def _node(tmp_path: Path, path: str, *children: ProjectNode, leaf: bool = True) -> ProjectNode:
    return ProjectNode(path=path, directory=tmp_path, root_dir=tmp_path, children=children, leaf=leaf)


def test_walker_visits_each_leaf_once_parent_first(tmp_path: Path) -> None:
    tree = _node(
        tmp_path,
        ":",
        _node(tmp_path, ":a", _node(tmp_path, ":a:x"), _node(tmp_path, ":a:y")),
        _node(tmp_path, ":group", _node(tmp_path, ":group:deep", _node(tmp_path, ":group:deep:z")), leaf=False),
        _node(tmp_path, ":b"),
        leaf=False,
    )
    visited: list[str] = []

    ModuleWalker().for_each_leaf(tree, lambda node: visited.append(node.path))

    assert visited == [":a", ":a:x", ":a:y", ":group:deep", ":group:deep:z", ":b"]


def test_walker_skips_grouping_nodes(tmp_path: Path) -> None:
    tree = _node(tmp_path, ":", _node(tmp_path, ":services", _node(tmp_path, ":services:api"), leaf=False), leaf=False)

    visited = [node.path for node in iter_leaves(tree)]

    assert visited == [":services:api"]


def test_walker_on_empty_tree_is_noop(tmp_path: Path) -> None:
    tree = _node(tmp_path, ":", leaf=False)
    calls: list[ProjectNode] = []

    ModuleWalker().for_each_leaf(tree, calls.append)

    assert calls == []


def test_walker_is_stable_across_calls(tmp_path: Path) -> None:
    tree = build_module_tree(tmp_path, ["core", "services:api", "services:web", "tools"])
    walker = ModuleWalker()

    first: list[str] = []
    second: list[str] = []

    walker.for_each_leaf(tree, lambda node: first.append(node.path))
    walker.for_each_leaf(tree, lambda node: second.append(node.path))

    assert first == second == [":core", ":services:api", ":services:web", ":tools"]


def test_build_module_tree_creates_grouping_nodes(tmp_path: Path) -> None:
    tree = build_module_tree(tmp_path, [":services:api", "core"])

    assert tree.path == ":"
    assert tree.leaf is False
    services, core = tree.children
    assert services.path == ":services"
    assert services.leaf is False
    assert services.directory == tmp_path.resolve() / "services"
    assert [child.path for child in services.children] == [":services:api"]
    assert services.children[0].directory == tmp_path.resolve() / "services" / "api"
    assert core.leaf is True
    assert core.name == "core"


def test_build_module_tree_without_modules_makes_root_a_leaf(tmp_path: Path) -> None:
    tree = build_module_tree(tmp_path)

    assert tree.leaf is True
    assert [node.path for node in iter_leaves(tree)] == [":"]


def test_declared_parent_stays_buildable(tmp_path: Path) -> None:
    tree = build_module_tree(tmp_path, ["app", "app:plugins", "app"])

    assert [node.path for node in iter_leaves(tree)] == [":app", ":app:plugins"]


def test_module_source_set_overrides(tmp_path: Path) -> None:
    tree = build_module_tree(
        tmp_path,
        ["core", "it"],
        source_sets=("main",),
        module_source_sets={":it": ["main", "integrationTest"]},
    )

    core, integration = tree.children
    assert core.source_sets == ("main",)
    assert integration.source_sets == ("main", "integrationTest")


@pytest.mark.parametrize("declaration", ["", ":", "a::b", "a:"])
def test_invalid_declarations_raise(tmp_path: Path, declaration: str) -> None:
    with pytest.raises(ConfigError):
        build_module_tree(tmp_path, [declaration])


def test_project_node_is_immutable(tmp_path: Path) -> None:
    tree = build_module_tree(tmp_path, ["core"])

    with pytest.raises(ValidationError):
        tree.leaf = True  # type: ignore[misc]
