"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from deferred_apps.config import BuildConfig, IconTheme
from deferred_apps.models import DirectPackage, License
from deferred_apps.repository import PackageRepository

REPOSITORY = {
    "hello": {
        "meta": {
            "mainProgram": "hello",
            "description": "Program that produces a familiar, friendly greeting",
            "license": {"free": True},
        },
    },
    "obs-studio": {
        "meta": {"mainProgram": "obs", "description": "Free and open source software for video"},
    },
    "cowsay": {"meta": {"mainProgram": "cowsay", "license": [{"free": True}]}},
    "tree": {"meta": {"mainProgram": "tree"}},
    "bc": {"meta": {"description": "GNU software calculator"}},
    "libvirt-glib": {"meta": {}},
    "curl": {"meta": {"mainProgram": "curl", "license": [{"free": True}, {"free": True}]}},
    "coreutils": {"meta": {"license": {"shortName": "gpl3Plus"}}},
    "spotify": {"meta": {"mainProgram": "spotify", "license": {"free": False}}},
    "discord": {"meta": {"mainProgram": "Discord", "license": [{"free": True}, {"free": False}]}},
    "python313Packages": {
        "version": "3.13",
        "numpy": {"meta": {"description": "Scientific tools for Python"}},
    },
}


@pytest.fixture
def repository() -> PackageRepository:
    return PackageRepository.from_mapping(REPOSITORY)


@pytest.fixture
def theme_dir(tmp_path: Path) -> Path:
    """Icon theme package laid out as ``share/icons/Papirus-Dark/<size>/apps``."""
    package_dir = tmp_path / "papirus"
    root = package_dir / "share" / "icons" / "Papirus-Dark"
    for size, names in {
        "64x64": ("hello",),
        "scalable": ("hello", "obs"),
        "48x48": ("spotify",),
        "16x16": ("tree",),
    }.items():
        apps = root / size / "apps"
        apps.mkdir(parents=True, exist_ok=True)
        for name in names:
            (apps / f"{name}.svg").write_text("<svg/>", encoding="utf-8")
    return package_dir


@pytest.fixture
def build_config(theme_dir: Path) -> BuildConfig:
    return BuildConfig(icon_theme=IconTheme(package_dir=theme_dir))


@pytest.fixture
def hello_package() -> DirectPackage:
    return DirectPackage(
        drv_path="/nix/store/aaaa-hello-2.12.1.drv",
        out_path="/nix/store/bbbb-hello-2.12.1",
        pname="hello",
        name="hello-2.12.1",
        main_program="hello",
        description="Program that produces a familiar, friendly greeting",
        licenses=(License(free=True),),
    )


@pytest.fixture
def repository_file(tmp_path: Path) -> Path:
    path = tmp_path / "packages.json"
    path.write_text(json.dumps(REPOSITORY), encoding="utf-8")
    return path
