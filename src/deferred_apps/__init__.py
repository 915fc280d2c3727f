"""Public package entrypoint for deferred app launchers."""

from .assemble import assemble
from .batch import (
    assemble_config,
    assemble_many,
    assemble_names,
    assemble_names_from,
    assemble_packages,
    check_collisions,
)
from .collisions import detect_collisions, ensure_no_collisions, pre_descriptor
from .config import AppsConfig, BuildConfig, ExtraApp, IconTheme, load_config
from .errors import (
    AmbiguousReferenceError,
    CollisionDetectedError,
    ConfigError,
    DeferredAppsError,
    EmitError,
    InvalidIdentifierError,
    MissingReferenceError,
    PackageNotFoundError,
    UnfreeNotAllowedError,
)
from .icons import IconNotFoundWarning, resolve_icon
from .identifiers import validate_identifier
from .metadata import resolve_metadata
from .models import (
    AppRequest,
    ByName,
    Direct,
    DirectPackage,
    LaunchDescriptor,
    License,
    RegistryFetch,
    ResolvedMetadata,
    StoreRealize,
)
from .names import display_name, normalize_name
from .repository import PackageRepository, load_repository

__all__ = [
    "AmbiguousReferenceError",
    "AppRequest",
    "AppsConfig",
    "BuildConfig",
    "ByName",
    "CollisionDetectedError",
    "ConfigError",
    "DeferredAppsError",
    "Direct",
    "DirectPackage",
    "EmitError",
    "ExtraApp",
    "IconNotFoundWarning",
    "IconTheme",
    "InvalidIdentifierError",
    "LaunchDescriptor",
    "License",
    "MissingReferenceError",
    "PackageNotFoundError",
    "PackageRepository",
    "RegistryFetch",
    "ResolvedMetadata",
    "StoreRealize",
    "UnfreeNotAllowedError",
    "assemble",
    "assemble_config",
    "assemble_many",
    "assemble_names",
    "assemble_names_from",
    "assemble_packages",
    "check_collisions",
    "detect_collisions",
    "display_name",
    "ensure_no_collisions",
    "load_config",
    "load_repository",
    "normalize_name",
    "pre_descriptor",
    "resolve_icon",
    "resolve_metadata",
    "validate_identifier",
]
