"""Build-time icon resolution against an icon theme tree.

Icons are resolved once, when the descriptor is assembled, to an absolute
path inside the configured theme. The launcher therefore does not depend on
whichever icon theme the desktop environment happens to use.
"""

from __future__ import annotations

import warnings
from pathlib import Path

# Launcher-friendly sizes first, vector before the smaller rasters.
ICON_SIZES: tuple[str, ...] = (
    "64x64",
    "scalable",
    "48x48",
    "128x128",
    "96x96",
    "256x256",
    "32x32",
    "24x24",
    "22x22",
    "16x16",
)


class IconNotFoundWarning(UserWarning):
    """Warning raised when an icon falls back to a bare theme name."""


def find_icon(theme_root: Path, name: str) -> Path | None:
    for size in ICON_SIZES:
        candidate = theme_root / size / "apps" / f"{name}.svg"
        if candidate.exists():
            return candidate.resolve()
    return None


def resolve_icon(
    theme_root: str | Path,
    primary_name: str,
    fallback_name: str,
    explicit_path: str | None = None,
) -> str:
    """Return the icon value to embed in a launcher.

    An absolute ``explicit_path`` is used as-is. Otherwise every size bucket
    is searched for ``primary_name`` and then, in a second full pass, for
    ``fallback_name``. When neither is found the bare ``primary_name`` is
    returned and an :class:`IconNotFoundWarning` is emitted.
    """
    if explicit_path is not None and explicit_path.startswith("/"):
        return explicit_path

    root = Path(theme_root)
    for name in (primary_name, fallback_name):
        found = find_icon(root, name)
        if found is not None:
            return str(found)

    warnings.warn(
        f"Icon '{primary_name}' not found in theme {root}. Desktop may show a missing icon.",
        IconNotFoundWarning,
        stacklevel=2,
    )
    return primary_name
