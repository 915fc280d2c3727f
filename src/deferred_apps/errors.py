"""Typed error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error identifiers used across API surfaces."""

    INVALID_IDENTIFIER = "E_INVALID_IDENTIFIER"
    PACKAGE_NOT_FOUND = "E_PACKAGE_NOT_FOUND"
    AMBIGUOUS_REFERENCE = "E_AMBIGUOUS_REFERENCE"
    MISSING_REFERENCE = "E_MISSING_REFERENCE"
    UNFREE_NOT_ALLOWED = "E_UNFREE_NOT_ALLOWED"
    COLLISION = "E_COLLISION"
    CONFIG = "E_CONFIG"
    EMIT = "E_EMIT"


class DeferredAppsError(Exception):
    """Base error class that carries code, optional hint, and context."""

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.context:
            for k, v in self.context.items():
                if v:
                    parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class InvalidIdentifierError(DeferredAppsError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.INVALID_IDENTIFIER, hint=hint, context=context)


class PackageNotFoundError(DeferredAppsError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.PACKAGE_NOT_FOUND, hint=hint, context=context)


class AmbiguousReferenceError(DeferredAppsError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.AMBIGUOUS_REFERENCE, hint=hint, context=context)


class MissingReferenceError(DeferredAppsError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.MISSING_REFERENCE, hint=hint, context=context)


class UnfreeNotAllowedError(DeferredAppsError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.UNFREE_NOT_ALLOWED, hint=hint, context=context)


class CollisionDetectedError(DeferredAppsError):
    """Raised when a batch would create the same terminal command twice.

    ``groups`` keeps the full collision mapping so callers can inspect every
    offending entry, not only the rendered message.
    """

    def __init__(
        self,
        message: str,
        *,
        groups: Mapping[str, tuple[object, ...]] | None = None,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.COLLISION, hint=hint, context=context)
        self.groups = dict(groups or {})


class ConfigError(DeferredAppsError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.CONFIG, hint=hint, context=context)


class EmitError(DeferredAppsError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.EMIT, hint=hint, context=context)


__all__ = [
    "AmbiguousReferenceError",
    "CollisionDetectedError",
    "ConfigError",
    "DeferredAppsError",
    "EmitError",
    "ErrorCode",
    "InvalidIdentifierError",
    "MissingReferenceError",
    "PackageNotFoundError",
    "UnfreeNotAllowedError",
]
