"""Batch drivers.

Every driver is two-phase: all requests are reduced to pre-descriptors and
scanned for terminal command collisions first, and only a clean batch is
assembled. A collision therefore fails the whole batch before any
descriptor exists.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from deferred_apps.assemble import assemble
from deferred_apps.collisions import ensure_no_collisions, pre_descriptor
from deferred_apps.config import AppsConfig, BuildConfig
from deferred_apps.errors import CollisionDetectedError
from deferred_apps.models import AppRequest, DirectPackage, LaunchDescriptor
from deferred_apps.observability import StructuredLogger
from deferred_apps.repository import PackageRepository


def check_collisions(
    requests: Sequence[AppRequest],
    *,
    repository: PackageRepository,
    logger: StructuredLogger | None = None,
) -> None:
    """Run the batch-wide collision scan without assembling anything."""
    entries = [pre_descriptor(request) for request in requests]
    try:
        ensure_no_collisions(entries, repository=repository)
    except CollisionDetectedError as exc:
        if logger is not None:
            logger.collided(exc.groups)
        raise


def assemble_many(
    requests: Sequence[AppRequest],
    *,
    repository: PackageRepository,
    config: BuildConfig,
    logger: StructuredLogger | None = None,
) -> list[LaunchDescriptor]:
    check_collisions(requests, repository=repository, logger=logger)

    descriptors: list[LaunchDescriptor] = []
    for request in requests:
        descriptor = assemble(request, repository=repository, config=config)
        if logger is not None:
            logger.assembled(descriptor)
        descriptors.append(descriptor)
    return descriptors


def assemble_names(
    names: Iterable[str],
    *,
    repository: PackageRepository,
    config: BuildConfig,
    logger: StructuredLogger | None = None,
) -> list[LaunchDescriptor]:
    requests = [AppRequest(name=name) for name in names]
    return assemble_many(requests, repository=repository, config=config, logger=logger)


def assemble_names_from(
    repository_ref: str,
    names: Iterable[str],
    *,
    repository: PackageRepository,
    config: BuildConfig,
    logger: StructuredLogger | None = None,
) -> list[LaunchDescriptor]:
    requests = [AppRequest(name=name, repository_ref=repository_ref) for name in names]
    return assemble_many(requests, repository=repository, config=config, logger=logger)


def assemble_packages(
    packages: Iterable[DirectPackage],
    *,
    repository: PackageRepository,
    config: BuildConfig,
    logger: StructuredLogger | None = None,
) -> list[LaunchDescriptor]:
    requests = [AppRequest(package=package) for package in packages]
    return assemble_many(requests, repository=repository, config=config, logger=logger)


def requests_from_config(config: AppsConfig) -> list[AppRequest]:
    """Expand the option set into one request per app.

    Order: plain names, direct packages, extra apps by name, extra apps by
    package. Extra apps shadow a plain name with the same key, and extra
    apps with a package use their key as the identifier.
    """
    standard = [
        AppRequest(
            name=name,
            allow_unfree=config.allow_unfree,
            create_persistence_root=config.create_persistence_root,
            repository_ref=config.repository_ref,
        )
        for name in config.apps
        if name not in config.extra_apps
    ]
    packages = [
        AppRequest(package=package, create_persistence_root=config.create_persistence_root)
        for package in config.packages
    ]

    by_name: list[AppRequest] = []
    by_package: list[AppRequest] = []
    for key, extra in config.extra_apps.items():
        persistence_root = (
            extra.create_persistence_root
            if extra.create_persistence_root is not None
            else config.create_persistence_root
        )
        if extra.package is not None:
            by_package.append(
                AppRequest(
                    package=extra.package,
                    identifier_override=key,
                    executable=extra.executable,
                    display_name=extra.display_name,
                    description=extra.description,
                    icon=extra.icon,
                    categories=extra.categories,
                    create_terminal_command=extra.create_terminal_command,
                    create_persistence_root=persistence_root,
                ),
            )
            continue
        by_name.append(
            AppRequest(
                name=key,
                executable=extra.executable,
                display_name=extra.display_name,
                description=extra.description,
                icon=extra.icon,
                categories=extra.categories,
                create_terminal_command=extra.create_terminal_command,
                allow_unfree=(
                    extra.allow_unfree if extra.allow_unfree is not None else config.allow_unfree
                ),
                create_persistence_root=persistence_root,
                repository_ref=extra.repository_ref or config.repository_ref,
            ),
        )
    return standard + packages + by_name + by_package


def assemble_config(
    config: AppsConfig,
    *,
    repository: PackageRepository,
    logger: StructuredLogger | None = None,
) -> list[LaunchDescriptor]:
    return assemble_many(
        requests_from_config(config),
        repository=repository,
        config=config.build_config(),
        logger=logger,
    )
