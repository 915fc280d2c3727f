"""Batch-wide terminal command collision detection."""

from __future__ import annotations

from collections.abc import Iterable

from deferred_apps.assemble import reference_of
from deferred_apps.errors import CollisionDetectedError
from deferred_apps.metadata import resolve_executable, short_name_of
from deferred_apps.models import (
    AppRequest,
    ByName,
    CollisionGroups,
    CollisionMember,
    PreDescriptor,
    SourceKind,
)
from deferred_apps.repository import PackageRepository


def pre_descriptor(request: AppRequest) -> PreDescriptor:
    """Reduce a request to what the collision scan needs."""
    reference = reference_of(request)
    source: SourceKind
    if request.identifier_override is not None:
        identifier = request.identifier_override
        source = "override"
    elif isinstance(reference, ByName):
        identifier = reference.dotted
        source = "name-reference"
    else:
        identifier = short_name_of(reference.package)
        source = "direct-reference"
    return PreDescriptor(
        reference=reference,
        identifier=identifier,
        executable=request.executable,
        create_terminal_command=request.create_terminal_command,
        source=source,
    )


def terminal_command_of(entry: PreDescriptor, *, repository: PackageRepository) -> str:
    executable = resolve_executable(
        entry.reference,
        repository=repository,
        executable=entry.executable,
    )
    return executable.lower()


def detect_collisions(
    entries: Iterable[PreDescriptor],
    *,
    repository: PackageRepository,
) -> CollisionGroups | None:
    """Group entries by terminal command; ``None`` when every command is unique."""
    grouped: dict[str, list[CollisionMember]] = {}
    for entry in entries:
        if not entry.create_terminal_command:
            continue
        command = terminal_command_of(entry, repository=repository)
        grouped.setdefault(command, []).append(
            CollisionMember(identifier=entry.identifier, source=entry.source),
        )

    duplicates = {
        command: tuple(members) for command, members in grouped.items() if len(members) > 1
    }
    return duplicates or None


def format_collisions(groups: CollisionGroups) -> str:
    lines = [
        "Terminal command collision detected!",
        "Multiple packages would create the same terminal command:",
    ]
    for command, members in groups.items():
        apps = ", ".join(f"'{member.identifier}' ({member.source})" for member in members)
        lines.append(f"  '{command}' -> {apps}")
    return "\n".join(lines)


def ensure_no_collisions(
    entries: Iterable[PreDescriptor],
    *,
    repository: PackageRepository,
) -> None:
    groups = detect_collisions(entries, repository=repository)
    if groups is None:
        return
    raise CollisionDetectedError(
        format_collisions(groups),
        groups=groups,
        hint="Set create_terminal_command=False for some packages, or override the executable.",
        context={"commands": ", ".join(groups), "operation": "detect_collisions"},
    )
