"""Validation helpers for dotted package identifiers."""

from __future__ import annotations

from deferred_apps.errors import InvalidIdentifierError


def validate_identifier(value: str) -> str:
    """Return ``value`` unchanged if it is a well-formed dotted identifier.

    Accepts flat names (``hello``) and nested package-set paths
    (``python313Packages.numpy``). Every segment is checked before the
    value is returned.
    """
    if value == "":
        raise InvalidIdentifierError(
            "Identifier cannot be empty.",
            context={"operation": "validate_identifier"},
        )
    if value.startswith("."):
        raise _invalid(value, "Identifier cannot start with '.'.")
    if value.endswith("."):
        raise _invalid(value, "Identifier cannot end with '.'.")

    for segment in value.split("."):
        if segment == "":
            raise _invalid(value, "Identifier segments cannot be empty.")
        if "/" in segment:
            raise _invalid(value, "Identifier cannot contain '/'.")
        if " " in segment:
            raise _invalid(value, "Identifier cannot contain spaces.")
        if segment.startswith("-"):
            raise _invalid(value, "Identifier segments cannot start with '-'.")
    return value


def split_identifier(value: str) -> tuple[str, ...]:
    return tuple(validate_identifier(value).split("."))


def _invalid(value: str, message: str) -> InvalidIdentifierError:
    return InvalidIdentifierError(
        message,
        hint="Use a package attribute name such as `hello` or `python313Packages.numpy`.",
        context={"identifier": value, "operation": "validate_identifier"},
    )
