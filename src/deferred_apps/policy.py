"""License policy enforcement helpers."""

from __future__ import annotations

from deferred_apps.errors import UnfreeNotAllowedError
from deferred_apps.models import ByName, PackageReference, ResolvedMetadata


def ensure_unfree_allowed(
    *,
    reference: PackageReference,
    metadata: ResolvedMetadata,
    identifier: str,
    allow_unfree: bool,
) -> None:
    """Reject unfree name references unless the caller opted in.

    Direct references are exempt: their license decision was made when the
    caller constructed the package object.
    """
    if not isinstance(reference, ByName) or metadata.is_license_free or allow_unfree:
        return
    raise UnfreeNotAllowedError(
        f"Package '{identifier}' is unfree.",
        hint="Set allow_unfree=True to enable it (launches use impure evaluation).",
        context={"identifier": identifier, "package": reference.dotted, "operation": "assemble"},
    )


def requires_elevated_evaluation(
    *,
    reference: PackageReference,
    metadata: ResolvedMetadata,
    allow_unfree: bool,
) -> bool:
    return isinstance(reference, ByName) and not metadata.is_license_free and allow_unfree
