"""Metadata extraction from package references (no build required)."""

from __future__ import annotations

from collections.abc import Iterable

from deferred_apps.models import (
    DEFAULT_DESCRIPTION,
    UNKNOWN_SHORT_NAME,
    ByName,
    Direct,
    DirectPackage,
    License,
    PackageReference,
    ResolvedMetadata,
)
from deferred_apps.names import normalize_name
from deferred_apps.repository import PackageRepository


def resolve_metadata(
    reference: PackageReference,
    *,
    repository: PackageRepository,
    executable: str | None = None,
    description: str | None = None,
) -> ResolvedMetadata:
    """Produce a uniform metadata record for either reference kind.

    Explicit ``executable``/``description`` win over declared values; empty
    strings count as unset everywhere.
    Raises :class:`PackageNotFoundError` for a ``ByName`` miss.
    """
    if isinstance(reference, Direct):
        package = reference.package
        short_name = short_name_of(package)
        return ResolvedMetadata(
            short_name=short_name,
            executable=_first(executable, package.main_program, short_name),
            description=_first(description, package.description, DEFAULT_DESCRIPTION),
            is_license_free=is_license_free(package.licenses),
        )

    found = repository.require(reference.path)
    return ResolvedMetadata(
        short_name=reference.path[-1],
        executable=_first(executable, found.main_program, reference.path[-1]),
        description=_first(description, found.description, DEFAULT_DESCRIPTION),
        is_license_free=is_license_free(found.licenses),
    )


def resolve_executable(
    reference: PackageReference,
    *,
    repository: PackageRepository,
    executable: str | None = None,
) -> str:
    """Executable name only, as :func:`resolve_metadata` would report it.

    An explicit ``executable`` skips the repository lookup entirely.
    """
    if executable:
        return executable
    if isinstance(reference, ByName):
        found = repository.require(reference.path)
        return _first(found.main_program, reference.path[-1])
    package = reference.package
    return _first(package.main_program, short_name_of(package))


def short_name_of(package: DirectPackage) -> str:
    if package.pname:
        return package.pname
    if package.name:
        return normalize_name(package.name)
    return UNKNOWN_SHORT_NAME


def _first(*candidates: str | None) -> str:
    # Empty strings count as unset, same as a missing attribute.
    for candidate in candidates:
        if candidate:
            return candidate
    raise ValueError("at least one candidate must be non-empty")


def is_license_free(licenses: Iterable[License]) -> bool:
    """A package is non-free if ANY of its licenses is marked non-free."""
    return all(license_.free for license_ in licenses)
