"""Hierarchical package repository and its JSON loader.

The repository is a tree keyed by attribute path segments. Interior nodes
are package sets, leaves are :class:`RepositoryPackage` records. Lookups
only read declarative metadata; nothing is built or downloaded.

On disk a repository is a JSON object. A mapping that carries a ``meta``
mapping is a package, any other mapping is a package set::

    {
      "hello": {"meta": {"mainProgram": "hello", "license": {"free": true}}},
      "python313Packages": {"numpy": {"meta": {"description": "..."}}}
    }
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from deferred_apps.errors import ConfigError, PackageNotFoundError
from deferred_apps.models import License, RepositoryPackage

PackageTree = Mapping[str, "PackageTree | RepositoryPackage"]


class PackageRepository:
    def __init__(self, tree: PackageTree) -> None:
        self._tree = tree

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> PackageRepository:
        return cls(_parse_set(payload, prefix=()))

    def lookup(self, path: Sequence[str]) -> RepositoryPackage | None:
        node: PackageTree | RepositoryPackage = self._tree
        for segment in path:
            if isinstance(node, RepositoryPackage):
                return None
            child = node.get(segment)
            if child is None:
                return None
            node = child
        return node if isinstance(node, RepositoryPackage) else None

    def require(self, path: Sequence[str]) -> RepositoryPackage:
        package = self.lookup(path)
        if package is not None:
            return package
        dotted = ".".join(path)
        if len(path) > 1:
            hint = f"Nested package path checked: {' -> '.join(path)}"
        else:
            hint = "Check the spelling or configure the app manually with an explicit executable."
        raise PackageNotFoundError(
            f"Package '{dotted}' not found in the package repository.",
            hint=hint,
            context={"package": dotted, "checked_path": " -> ".join(path)},
        )


def load_repository(path: str | Path) -> PackageRepository:
    repo_path = Path(path)
    try:
        raw = repo_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigError(
            "Package repository file does not exist.",
            context={"path": str(repo_path)},
        ) from exc
    return parse_repository(raw)


def parse_repository(raw: str) -> PackageRepository:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError("Invalid package repository JSON.", hint=str(exc)) from exc
    if not isinstance(payload, dict):
        raise ConfigError("Invalid package repository payload type.")
    return PackageRepository.from_mapping(payload)


def parse_licenses(value: Any, *, where: str) -> tuple[License, ...]:
    """Parse a ``license`` value that may be a single mapping or a list."""
    if value is None:
        return ()
    items = value if isinstance(value, list) else [value]
    licenses: list[License] = []
    for item in items:
        if not isinstance(item, dict):
            raise ConfigError("Invalid license entry.", context={"package": where})
        free = item.get("free", True)
        if not isinstance(free, bool):
            raise ConfigError("License `free` marker must be a boolean.", context={"package": where})
        licenses.append(License(free=free))
    return tuple(licenses)


def _parse_set(payload: Mapping[str, Any], *, prefix: tuple[str, ...]) -> PackageTree:
    tree: dict[str, PackageTree | RepositoryPackage] = {}
    for key, value in payload.items():
        path = (*prefix, key)
        if not isinstance(value, dict):
            # Non-mapping attributes (versions, flags) are not addressable packages.
            continue
        meta = value.get("meta")
        if isinstance(meta, dict):
            tree[key] = _parse_package(meta, path=path)
        else:
            tree[key] = _parse_set(value, prefix=path)
    return tree


def _parse_package(meta: Mapping[str, Any], *, path: tuple[str, ...]) -> RepositoryPackage:
    where = ".".join(path)
    return RepositoryPackage(
        attr_path=path,
        main_program=_optional_str(meta, "mainProgram", where=where),
        description=_optional_str(meta, "description", where=where),
        licenses=parse_licenses(meta.get("license"), where=where),
    )


def _optional_str(payload: Mapping[str, Any], key: str, *, where: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"Invalid `{key}` value.", context={"package": where})
    return value
