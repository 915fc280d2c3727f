"""Name heuristics: version stripping and launcher display names."""

from __future__ import annotations

import re
from itertools import takewhile

# Bare numbers such as ``2048`` are deliberately not versions.
_VERSION_PATTERNS = (
    re.compile(r"[0-9]+[.][0-9]+.*"),
    re.compile(r"[0-9]+(rc|alpha|beta|pre|post)[0-9]*"),
)


def is_version_part(part: str) -> bool:
    return any(pattern.fullmatch(part) for pattern in _VERSION_PATTERNS)


def normalize_name(combined: str) -> str:
    """Strip the version suffix from a ``name-version`` string.

    ``hello-2.12.1`` -> ``hello``, ``7zip-24.08`` -> ``7zip``,
    ``2048-in-terminal-1.0`` -> ``2048-in-terminal``. Parts are kept up to
    the first version-shaped part. If nothing survives, the input is
    returned unchanged.
    """
    kept = takewhile(lambda part: not is_version_part(part), combined.split("-"))
    result = "-".join(kept)
    return result if result else combined


def display_name(identifier: str) -> str:
    """``obs-studio`` -> ``Obs Studio``."""
    return " ".join(_capitalize(segment) for segment in identifier.split("-"))


def _capitalize(segment: str) -> str:
    return segment[:1].upper() + segment[1:]
