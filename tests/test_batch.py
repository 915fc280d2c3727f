from pathlib import Path

import pytest

from deferred_apps.batch import (
    assemble_config,
    assemble_many,
    assemble_names,
    assemble_names_from,
    assemble_packages,
    requests_from_config,
)
from deferred_apps.config import AppsConfig, BuildConfig, ExtraApp, IconTheme
from deferred_apps.errors import CollisionDetectedError, UnfreeNotAllowedError
from deferred_apps.models import AppRequest, DirectPackage, RegistryFetch, StoreRealize
from deferred_apps.observability import StructuredLogger
from deferred_apps.repository import PackageRepository


def test_assemble_names(repository: PackageRepository, build_config: BuildConfig) -> None:
    descriptors = assemble_names(
        ["hello", "obs-studio"],
        repository=repository,
        config=build_config,
    )
    assert [d.terminal_command for d in descriptors] == ["hello", "obs"]


def test_assemble_names_rejects_duplicates(
    repository: PackageRepository, build_config: BuildConfig
) -> None:
    with pytest.raises(CollisionDetectedError):
        assemble_names(["hello", "hello"], repository=repository, config=build_config)


def test_collision_aborts_before_any_assembly(
    repository: PackageRepository, build_config: BuildConfig
) -> None:
    # spotify alone would fail the license check; the collision must win.
    logger = StructuredLogger()
    with pytest.raises(CollisionDetectedError):
        assemble_many(
            [
                AppRequest(name="spotify"),
                AppRequest(name="app1", executable="same"),
                AppRequest(name="app2", executable="same"),
            ],
            repository=repository,
            config=build_config,
            logger=logger,
        )
    (error,) = logger.records_at("error")
    assert error["operation"] == "detect_collisions"
    assert error["extra"] == {"commands": ["same"]}
    assert not [record for record in logger.records if record["operation"] == "assemble"]


def test_assemble_names_from_sets_repository_ref(
    repository: PackageRepository, build_config: BuildConfig
) -> None:
    (descriptor,) = assemble_names_from(
        "github:NixOS/nixpkgs/nixos-unstable",
        ["hello"],
        repository=repository,
        config=build_config,
    )
    assert descriptor.acquisition_strategy == RegistryFetch(
        repository_ref="github:NixOS/nixpkgs/nixos-unstable",
        attr_path="hello",
    )


def test_assemble_packages(
    repository: PackageRepository, build_config: BuildConfig, hello_package: DirectPackage
) -> None:
    (descriptor,) = assemble_packages([hello_package], repository=repository, config=build_config)
    assert isinstance(descriptor.acquisition_strategy, StoreRealize)

    with pytest.raises(CollisionDetectedError):
        assemble_packages(
            [hello_package, hello_package],
            repository=repository,
            config=build_config,
        )


def test_logger_records_assembly_and_icon_fallback(
    repository: PackageRepository, build_config: BuildConfig
) -> None:
    logger = StructuredLogger()
    with pytest.warns(UserWarning):
        assemble_names(["hello", "bc"], repository=repository, config=build_config, logger=logger)

    assert [record["identifier"] for record in logger.records_at("info")] == ["hello", "bc"]
    (warning,) = logger.records_at("warning")
    assert warning["identifier"] == "bc"
    assert warning["extra"] == {"icon": "bc"}


def test_requests_from_config_applies_precedence(hello_package: DirectPackage) -> None:
    config = AppsConfig(
        apps=("hello", "spotify"),
        packages=(hello_package,),
        extra_apps={
            "spotify": ExtraApp(create_terminal_command=False, allow_unfree=True),
            "hello-unstable": ExtraApp(package=hello_package, executable="hello-dev"),
        },
        repository_ref="nixpkgs",
        create_persistence_root=True,
    )
    requests = requests_from_config(config)

    assert [(r.name, r.identifier_override) for r in requests] == [
        ("hello", None),
        (None, None),
        ("spotify", None),
        (None, "hello-unstable"),
    ]
    standard, package, extra_name, extra_package = requests
    assert standard.repository_ref == "nixpkgs"
    assert standard.allow_unfree is False
    assert package.create_persistence_root is True
    assert extra_name.allow_unfree is True
    assert extra_name.create_terminal_command is False
    assert extra_package.executable == "hello-dev"
    assert extra_package.allow_unfree is False


def test_assemble_config_end_to_end(
    repository: PackageRepository, theme_dir: Path, hello_package: DirectPackage
) -> None:
    config = AppsConfig(
        apps=("obs-studio", "spotify"),
        extra_apps={"hello-unstable": ExtraApp(package=hello_package)},
        allow_unfree=True,
        icon_theme=IconTheme(package_dir=theme_dir),
    )
    descriptors = assemble_config(config, repository=repository)

    assert [d.identifier for d in descriptors] == ["obs-studio", "spotify", "hello-unstable"]
    spotify = descriptors[1]
    assert spotify.requires_elevated_evaluation is True
    assert spotify.icon_path.endswith("48x48/apps/spotify.svg")


def test_assemble_config_enforces_global_unfree_policy(
    repository: PackageRepository, theme_dir: Path
) -> None:
    config = AppsConfig(apps=("spotify",), icon_theme=IconTheme(package_dir=theme_dir))
    with pytest.raises(UnfreeNotAllowedError):
        assemble_config(config, repository=repository)
