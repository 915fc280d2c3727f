"""Core typed dataclasses for package references and launch descriptors."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import cbor2

SourceKind = Literal["name-reference", "direct-reference", "override"]

DEFAULT_DESCRIPTION = "Application"
DEFAULT_CATEGORIES = ("Application",)
DEFAULT_REPOSITORY_REF = "default-registry"
UNKNOWN_SHORT_NAME = "unknown"


@dataclass(frozen=True, slots=True)
class License:
    free: bool = True


@dataclass(frozen=True, slots=True)
class RepositoryPackage:
    """Declarative metadata of a package stored in a repository tree."""

    attr_path: tuple[str, ...]
    main_program: str | None = None
    description: str | None = None
    licenses: tuple[License, ...] = ()


@dataclass(frozen=True, slots=True)
class DirectPackage:
    """A package object supplied by the caller instead of a repository lookup.

    ``drv_path`` and ``out_path`` are captured as plain strings; nothing is
    built when the descriptor is assembled.
    """

    drv_path: str
    out_path: str
    pname: str | None = None
    name: str | None = None
    main_program: str | None = None
    description: str | None = None
    licenses: tuple[License, ...] = ()


@dataclass(frozen=True, slots=True)
class ByName:
    path: tuple[str, ...]

    @property
    def dotted(self) -> str:
        return ".".join(self.path)


@dataclass(frozen=True, slots=True)
class Direct:
    package: DirectPackage


PackageReference = ByName | Direct


@dataclass(frozen=True, slots=True)
class ResolvedMetadata:
    short_name: str
    executable: str
    description: str
    is_license_free: bool


@dataclass(frozen=True, slots=True)
class RegistryFetch:
    """Resolve ``attr_path`` by name against ``repository_ref`` at launch time."""

    repository_ref: str
    attr_path: str


@dataclass(frozen=True, slots=True)
class StoreRealize:
    """Realise a captured build recipe at launch time."""

    build_recipe_path: str
    output_path: str


AcquisitionStrategy = RegistryFetch | StoreRealize


@dataclass(frozen=True, slots=True)
class AppRequest:
    """Caller options for a single deferred app.

    Exactly one of ``name`` and ``package`` must be set; the assembler
    reports the other combinations.
    """

    name: str | None = None
    package: DirectPackage | None = None
    identifier_override: str | None = None
    executable: str | None = None
    display_name: str | None = None
    description: str | None = None
    icon: str | None = None
    categories: tuple[str, ...] = DEFAULT_CATEGORIES
    create_terminal_command: bool = True
    allow_unfree: bool = False
    create_persistence_root: bool = False
    repository_ref: str | None = None


@dataclass(frozen=True, slots=True)
class PreDescriptor:
    reference: PackageReference
    identifier: str
    executable: str | None = None
    create_terminal_command: bool = True
    source: SourceKind = "name-reference"


@dataclass(frozen=True, slots=True)
class CollisionMember:
    identifier: str
    source: SourceKind


CollisionGroups = dict[str, tuple[CollisionMember, ...]]


@dataclass(frozen=True, slots=True)
class LaunchDescriptor:
    identifier: str
    executable: str
    terminal_command: str
    display_name: str
    description: str
    icon_path: str
    categories: frozenset[str]
    create_terminal_command: bool
    acquisition_strategy: AcquisitionStrategy
    requires_elevated_evaluation: bool
    create_persistence_root: bool
    schema_version: int = 1

    def to_json(self, path: str | Path | None = None) -> str:
        encoded = json.dumps(self.to_payload(), indent=2, sort_keys=True) + "\n"
        if path is not None:
            Path(path).write_text(encoded, encoding="utf-8")
        return encoded

    def to_cbor(self, path: str | Path | None = None) -> bytes:
        encoded = cbor2.dumps(self.to_payload(), canonical=True)
        if path is not None:
            Path(path).write_bytes(encoded)
        return encoded

    def digest(self) -> str:
        return hashlib.sha256(self.to_cbor()).hexdigest()

    def to_payload(self) -> dict[str, object]:
        return {
            "schema_version": self.schema_version,
            "identifier": self.identifier,
            "executable": self.executable,
            "terminal_command": self.terminal_command,
            "display_name": self.display_name,
            "description": self.description,
            "icon_path": self.icon_path,
            "categories": sorted(self.categories),
            "create_terminal_command": self.create_terminal_command,
            "acquisition": _strategy_payload(self.acquisition_strategy),
            "requires_elevated_evaluation": self.requires_elevated_evaluation,
            "create_persistence_root": self.create_persistence_root,
        }


def _strategy_payload(strategy: AcquisitionStrategy) -> dict[str, str]:
    if isinstance(strategy, RegistryFetch):
        return {
            "kind": "registry-fetch",
            "repository_ref": strategy.repository_ref,
            "attr_path": strategy.attr_path,
        }
    return {
        "kind": "store-realize",
        "build_recipe_path": strategy.build_recipe_path,
        "output_path": strategy.output_path,
    }
