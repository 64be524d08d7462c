# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Bundled ruleset lookup and provisioning into the analysed project.

Files under ``<root>/code-quality/`` are regenerated on every run: the copy
always matches the version bundled with the installed release, so edits made
in place are overwritten. Projects that need custom rules point an override
at a file outside that directory instead.
"""

from __future__ import annotations

from collections.abc import Iterable
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

from .constants import BUNDLED_RESOURCE_PACKAGE, BUNDLED_RESOURCE_ROOT, BUNDLED_RESOURCES, CODE_QUALITY_DIR
from .models import ProjectNode, ResourceSpec


class ResourceNotFoundError(LookupError):
    """Raised when a bundled resource is missing; indicates a packaging defect."""

    def __init__(self, logical_path: str, reason: str = "not part of the bundled resource set") -> None:
        super().__init__(f"Bundled resource '{logical_path}' {reason}")
        self.logical_path = logical_path


class BundledResources:
    """Enumerated table of resources shipped inside the package."""

    def __init__(
        self,
        names: Iterable[str] = BUNDLED_RESOURCES,
        *,
        base: Traversable | None = None,
    ) -> None:
        self._names = tuple(names)
        self._base = base or resources.files(BUNDLED_RESOURCE_PACKAGE).joinpath(BUNDLED_RESOURCE_ROOT)

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    def __contains__(self, logical_path: object) -> bool:
        return logical_path in self._names

    def read_bytes(self, logical_path: str) -> bytes:
        """Return the bytes of *logical_path*.

        Raises:
            ResourceNotFoundError: If the path is not enumerated or its file is
                absent from the installed package.
        """

        if logical_path not in self._names:
            raise ResourceNotFoundError(logical_path)
        entry = self._base
        for part in logical_path.split("/"):
            entry = entry.joinpath(part)
        if not entry.is_file():
            raise ResourceNotFoundError(logical_path, "is missing from the installed package")
        return entry.read_bytes()


def provisioned_path(project: ProjectNode, logical_path: str) -> Path:
    """Return where *logical_path* is materialised for *project*."""

    return project.root_dir / CODE_QUALITY_DIR / logical_path


class ResourceResolver:
    """Resolve the effective path of a ruleset, provisioning bundled defaults.

    Resolution is cached per (root, logical path, override) so one build copies
    each bundled file at most once. Create a fresh resolver per build.
    """

    def __init__(self, bundle: BundledResources | None = None) -> None:
        self._bundle = bundle or BundledResources()
        self._cache: dict[tuple[Path, str, str | None], Path] = {}

    @property
    def bundle(self) -> BundledResources:
        return self._bundle

    def resolve(self, project: ProjectNode, logical_path: str, override: str | None = None) -> Path:
        """Return the absolute path of the file the tool should read.

        A non-empty *override* is joined onto the root directory as given; its
        existence is not checked. Otherwise the bundled copy is written to
        ``<root>/code-quality/<logical_path>``, replacing whatever is there.

        Raises:
            ResourceNotFoundError: If no override is given and the bundled
                resource cannot be located.
        """

        key = (project.root_dir, logical_path, override or None)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        if override:
            resolved = project.root_dir / override
        else:
            resolved = self._provision(project, logical_path)
        self._cache[key] = resolved
        return resolved

    def resolve_spec(self, project: ProjectNode, spec: ResourceSpec) -> ResourceSpec:
        """Return a copy of *spec* carrying its resolved path."""

        return spec.model_copy(update={"resolved": self.resolve(project, spec.logical_path, spec.override)})

    def provision_all(self, project: ProjectNode) -> list[Path]:
        """Materialise every bundled resource for *project*."""

        return [self.resolve(project, name) for name in self._bundle.names]

    def _provision(self, project: ProjectNode, logical_path: str) -> Path:
        payload = self._bundle.read_bytes(logical_path)
        target = provisioned_path(project, logical_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(payload)
        return target


__all__ = ["BundledResources", "ResourceNotFoundError", "ResourceResolver", "provisioned_path"]
