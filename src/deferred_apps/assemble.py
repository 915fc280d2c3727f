"""Launch descriptor assembly for a single deferred app."""

from __future__ import annotations

from deferred_apps.config import BuildConfig
from deferred_apps.errors import AmbiguousReferenceError, MissingReferenceError
from deferred_apps.icons import resolve_icon
from deferred_apps.identifiers import split_identifier, validate_identifier
from deferred_apps.metadata import resolve_metadata, short_name_of
from deferred_apps.models import (
    AcquisitionStrategy,
    AppRequest,
    ByName,
    Direct,
    LaunchDescriptor,
    PackageReference,
    RegistryFetch,
    StoreRealize,
)
from deferred_apps.names import display_name
from deferred_apps.policy import ensure_unfree_allowed, requires_elevated_evaluation
from deferred_apps.repository import PackageRepository


def reference_of(request: AppRequest) -> PackageReference:
    """Select the request's single package reference."""
    if request.name is not None and request.package is not None:
        raise AmbiguousReferenceError(
            "Cannot provide both a package name and a package object.",
            hint="Use one or the other.",
            context={"name": request.name, "operation": "assemble"},
        )
    if request.package is not None:
        return Direct(package=request.package)
    if request.name is not None:
        return ByName(path=split_identifier(request.name))
    raise MissingReferenceError(
        "Must provide either a package name or a package object.",
        context={"operation": "assemble"},
    )


def identifier_of(request: AppRequest, reference: PackageReference) -> str:
    if request.identifier_override is not None:
        return validate_identifier(request.identifier_override)
    if isinstance(reference, ByName):
        return reference.dotted
    return validate_identifier(short_name_of(reference.package))


def assemble(
    request: AppRequest,
    *,
    repository: PackageRepository,
    config: BuildConfig,
) -> LaunchDescriptor:
    """Build the immutable launch descriptor for ``request``.

    Failures surface in pipeline order: reference selection, identifier
    validation, repository lookup, license policy. Icon lookup never fails.
    """
    reference = reference_of(request)
    identifier = identifier_of(request, reference)

    metadata = resolve_metadata(
        reference,
        repository=repository,
        executable=request.executable,
        description=request.description,
    )
    ensure_unfree_allowed(
        reference=reference,
        metadata=metadata,
        identifier=identifier,
        allow_unfree=request.allow_unfree,
    )

    icon_path = resolve_icon(
        config.icon_theme.root,
        request.icon if request.icon is not None else identifier,
        metadata.executable,
        explicit_path=request.icon,
    )

    return LaunchDescriptor(
        identifier=identifier,
        executable=metadata.executable,
        terminal_command=metadata.executable.lower(),
        display_name=(
            request.display_name if request.display_name is not None else display_name(identifier)
        ),
        description=metadata.description,
        icon_path=icon_path,
        categories=frozenset(request.categories),
        create_terminal_command=request.create_terminal_command,
        acquisition_strategy=_strategy(request, reference, config),
        requires_elevated_evaluation=requires_elevated_evaluation(
            reference=reference,
            metadata=metadata,
            allow_unfree=request.allow_unfree,
        ),
        create_persistence_root=request.create_persistence_root,
    )


def _strategy(
    request: AppRequest,
    reference: PackageReference,
    config: BuildConfig,
) -> AcquisitionStrategy:
    if isinstance(reference, Direct):
        return StoreRealize(
            build_recipe_path=reference.package.drv_path,
            output_path=reference.package.out_path,
        )
    return RegistryFetch(
        repository_ref=request.repository_ref or config.repository_ref,
        attr_path=reference.dotted,
    )
