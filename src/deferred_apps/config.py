"""Configuration objects and the JSON configuration loader.

``BuildConfig`` is threaded explicitly through every pipeline call.
``AppsConfig`` mirrors the user-facing option set (apps, packages, extra
apps and their global defaults) and is consumed by the batch drivers.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from deferred_apps.errors import ConfigError
from deferred_apps.models import DEFAULT_CATEGORIES, DEFAULT_REPOSITORY_REF, DirectPackage
from deferred_apps.repository import parse_licenses

DEFAULT_ICON_THEME_DIR = Path("/run/current-system/sw")
DEFAULT_ICON_THEME_NAME = "Papirus-Dark"


@dataclass(frozen=True, slots=True)
class IconTheme:
    package_dir: Path = DEFAULT_ICON_THEME_DIR
    name: str = DEFAULT_ICON_THEME_NAME

    @property
    def root(self) -> Path:
        return self.package_dir / "share" / "icons" / self.name


@dataclass(frozen=True, slots=True)
class BuildConfig:
    icon_theme: IconTheme = field(default_factory=IconTheme)
    repository_ref: str = DEFAULT_REPOSITORY_REF


@dataclass(frozen=True, slots=True)
class ExtraApp:
    """Manually configured app. ``None`` flags fall back to the global value."""

    package: DirectPackage | None = None
    executable: str | None = None
    display_name: str | None = None
    description: str | None = None
    icon: str | None = None
    categories: tuple[str, ...] = DEFAULT_CATEGORIES
    create_terminal_command: bool = True
    allow_unfree: bool | None = None
    create_persistence_root: bool | None = None
    repository_ref: str | None = None


@dataclass(frozen=True, slots=True)
class AppsConfig:
    apps: tuple[str, ...] = ()
    packages: tuple[DirectPackage, ...] = ()
    extra_apps: Mapping[str, ExtraApp] = field(default_factory=dict)
    repository_ref: str = DEFAULT_REPOSITORY_REF
    allow_unfree: bool = False
    create_persistence_root: bool = False
    icon_theme: IconTheme = field(default_factory=IconTheme)

    def build_config(self) -> BuildConfig:
        return BuildConfig(icon_theme=self.icon_theme, repository_ref=self.repository_ref)


def load_config(path: str | Path) -> AppsConfig:
    config_path = Path(path)
    try:
        raw = config_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigError(
            "Configuration file does not exist.",
            context={"path": str(config_path)},
        ) from exc
    return parse_config(raw)


def parse_config(raw: str) -> AppsConfig:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError("Invalid configuration JSON.", hint=str(exc)) from exc

    if not isinstance(payload, dict):
        raise ConfigError("Invalid configuration payload type.")

    extra_raw = payload.get("extraApps", {})
    if not isinstance(extra_raw, dict):
        raise ConfigError("Invalid configuration `extraApps` value.")
    packages_raw = payload.get("packages", [])
    if not isinstance(packages_raw, list):
        raise ConfigError("Invalid configuration `packages` value.")

    return AppsConfig(
        apps=_str_list(payload, "apps"),
        packages=tuple(_parse_package(item, where="packages") for item in packages_raw),
        extra_apps={key: _parse_extra_app(key, value) for key, value in extra_raw.items()},
        repository_ref=_str(payload, "repositoryRef", default=DEFAULT_REPOSITORY_REF),
        allow_unfree=_bool(payload, "allowUnfree", default=False),
        create_persistence_root=_bool(payload, "createPersistenceRoot", default=False),
        icon_theme=_parse_icon_theme(payload.get("iconTheme")),
    )


def _parse_icon_theme(value: Any) -> IconTheme:
    if value is None:
        return IconTheme()
    if not isinstance(value, dict):
        raise ConfigError("Invalid configuration `iconTheme` value.")
    return IconTheme(
        package_dir=Path(_str(value, "package", default=str(DEFAULT_ICON_THEME_DIR))),
        name=_str(value, "name", default=DEFAULT_ICON_THEME_NAME),
    )


def _parse_extra_app(key: str, value: Any) -> ExtraApp:
    if not isinstance(value, dict):
        raise ConfigError("Invalid extra app entry.", context={"app": key})
    package_raw = value.get("package")
    return ExtraApp(
        package=None if package_raw is None else _parse_package(package_raw, where=key),
        executable=_optional_str(value, "exe"),
        display_name=_optional_str(value, "desktopName"),
        description=_optional_str(value, "description"),
        icon=_optional_str(value, "icon"),
        categories=(
            _str_list(value, "categories") if "categories" in value else DEFAULT_CATEGORIES
        ),
        create_terminal_command=_bool(value, "createTerminalCommand", default=True),
        allow_unfree=_optional_bool(value, "allowUnfree"),
        create_persistence_root=_optional_bool(value, "createPersistenceRoot"),
        repository_ref=_optional_str(value, "repositoryRef"),
    )


def _parse_package(value: Any, *, where: str) -> DirectPackage:
    if not isinstance(value, dict):
        raise ConfigError("Invalid package entry.", context={"app": where})
    meta = value.get("meta", {})
    if not isinstance(meta, dict):
        raise ConfigError("Invalid package `meta` value.", context={"app": where})
    drv_path = _optional_str(value, "drvPath")
    out_path = _optional_str(value, "outPath")
    if not drv_path or not out_path:
        raise ConfigError(
            "Direct package entries require `drvPath` and `outPath`.",
            hint="Export the package's derivation and output paths into the configuration.",
            context={"app": where},
        )
    return DirectPackage(
        drv_path=drv_path,
        out_path=out_path,
        pname=_optional_str(value, "pname"),
        name=_optional_str(value, "name"),
        main_program=_optional_str(meta, "mainProgram"),
        description=_optional_str(meta, "description"),
        licenses=parse_licenses(meta.get("license"), where=where),
    )


def _str(payload: Mapping[str, Any], key: str, *, default: str) -> str:
    value = payload.get(key, default)
    if not isinstance(value, str) or not value:
        raise ConfigError(f"Invalid configuration `{key}` value.")
    return value


def _optional_str(payload: Mapping[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"Invalid configuration `{key}` value.")
    return value


def _bool(payload: Mapping[str, Any], key: str, *, default: bool) -> bool:
    value = payload.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"Invalid configuration `{key}` value.")
    return value


def _optional_bool(payload: Mapping[str, Any], key: str) -> bool | None:
    value = payload.get(key)
    if value is not None and not isinstance(value, bool):
        raise ConfigError(f"Invalid configuration `{key}` value.")
    return value


def _str_list(payload: Mapping[str, Any], key: str) -> tuple[str, ...]:
    value = payload.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"Invalid configuration `{key}` value.")
    return tuple(value)
