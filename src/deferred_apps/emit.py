"""Launcher emission: wrapper script, desktop entry, terminal command link.

Layout under the destination directory::

    libexec/deferred-<identifier>           wrapper script (0755)
    share/applications/<identifier>.desktop desktop entry
    bin/<terminal_command>                  symlink to the wrapper (optional)
"""

from __future__ import annotations

import os
import re
import shlex
import textwrap
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from deferred_apps.errors import EmitError
from deferred_apps.models import LaunchDescriptor, RegistryFetch

GC_ROOT_DIR = '"${XDG_DATA_HOME:-$HOME/.local/share}/deferred-apps/gcroots"'

_PLACEHOLDER = re.compile(r"@[a-zA-Z]+@")

# Shared notification helper; `is_available` is defined per strategy.
_NOTIFY = textwrap.dedent("""\
    maybe_notify() {
      if is_available; then
        return
      fi
      if command -v notify-send &>/dev/null; then
        notify-send \\
          --app-name="Deferred Apps" \\
          --urgency=low \\
          --icon="$ICON" \\
          "Starting $PNAME..." \\
          "Downloading application (first run only)..." &
      fi
    }
""")

REGISTRY_FETCH_TEMPLATE = textwrap.dedent("""\
    #!/usr/bin/env bash
    set -euo pipefail

    PNAME=@pname@
    ATTR=@attr@
    REPOSITORY_REF=@ref@
    EXE=@exe@
    ICON=@icon@
    NEEDS_IMPURE=@impure@
    GC_ROOT=@gcroot@
    GC_ROOT_DIR=@gcrootdir@

    is_available() {
      [ "$GC_ROOT" = "1" ] && [ -L "$GC_ROOT_DIR/$PNAME" ]
    }

    @notify@
    ensure_downloaded() {
      local build_args=("$REPOSITORY_REF#$ATTR" "--no-link" "--print-out-paths")

      if [ "$NEEDS_IMPURE" = "1" ]; then
        export NIXPKGS_ALLOW_UNFREE=1
        build_args=("--impure" "${build_args[@]}")
      fi

      local store_path
      store_path=$(nix build "${build_args[@]}" 2>/dev/null) || return 0

      if [ "$GC_ROOT" = "1" ] && [ -n "$store_path" ]; then
        mkdir -p "$GC_ROOT_DIR"
        nix-store --add-root "$GC_ROOT_DIR/$PNAME" --indirect -r "$store_path" &>/dev/null || true
      fi
    }

    maybe_notify
    ensure_downloaded

    if [ "$NEEDS_IMPURE" = "1" ]; then
      export NIXPKGS_ALLOW_UNFREE=1
      exec nix shell --impure "$REPOSITORY_REF#$ATTR" --command "$EXE" "$@"
    else
      exec nix shell "$REPOSITORY_REF#$ATTR" --command "$EXE" "$@"
    fi
""")

STORE_REALIZE_TEMPLATE = textwrap.dedent("""\
    #!/usr/bin/env bash
    set -euo pipefail

    PNAME=@pname@
    DRV_PATH=@drv@
    OUT_PATH=@out@
    EXE=@exe@
    ICON=@icon@
    GC_ROOT=@gcroot@
    GC_ROOT_DIR=@gcrootdir@

    is_available() {
      if [ "$GC_ROOT" = "1" ] && [ -L "$GC_ROOT_DIR/$PNAME" ]; then
        return 0
      fi
      [ -d "$OUT_PATH" ]
    }

    @notify@
    ensure_realized() {
      if [ ! -d "$OUT_PATH" ]; then
        if ! nix-store --realise "$DRV_PATH" >/dev/null; then
          echo "deferred-apps: Failed to realize $PNAME from $DRV_PATH" >&2
          echo "deferred-apps: Try running: nix-store --realise $DRV_PATH" >&2
          exit 1
        fi
      fi

      if [ "$GC_ROOT" = "1" ] && [ ! -L "$GC_ROOT_DIR/$PNAME" ]; then
        mkdir -p "$GC_ROOT_DIR"
        nix-store --add-root "$GC_ROOT_DIR/$PNAME" --indirect -r "$OUT_PATH" &>/dev/null || true
      fi
    }

    maybe_notify
    ensure_realized

    exec "$OUT_PATH/bin/$EXE" "$@"
""")


@dataclass(frozen=True, slots=True)
class LauncherArtifacts:
    wrapper: Path
    desktop_entry: Path
    terminal_command: Path | None = None


def wrapper_name(descriptor: LaunchDescriptor) -> str:
    return f"deferred-{descriptor.identifier}"


def render_wrapper(descriptor: LaunchDescriptor) -> str:
    strategy = descriptor.acquisition_strategy
    common = {
        "@pname@": shlex.quote(descriptor.identifier),
        "@exe@": shlex.quote(descriptor.executable),
        "@icon@": shlex.quote(descriptor.icon_path),
        "@gcroot@": _flag(descriptor.create_persistence_root),
        "@gcrootdir@": GC_ROOT_DIR,
        "@notify@": _NOTIFY,
    }
    if isinstance(strategy, RegistryFetch):
        return _substitute(
            REGISTRY_FETCH_TEMPLATE,
            {
                **common,
                "@attr@": shlex.quote(strategy.attr_path),
                "@ref@": shlex.quote(strategy.repository_ref),
                "@impure@": _flag(descriptor.requires_elevated_evaluation),
            },
        )
    return _substitute(
        STORE_REALIZE_TEMPLATE,
        {
            **common,
            "@drv@": shlex.quote(strategy.build_recipe_path),
            "@out@": shlex.quote(strategy.output_path),
        },
    )


def render_desktop_entry(descriptor: LaunchDescriptor, exec_path: str | Path) -> str:
    lines = [
        "[Desktop Entry]",
        "Type=Application",
        f"Name={descriptor.display_name}",
        f"Comment={descriptor.description}",
        f"Exec={exec_path} %U",
        f"Icon={descriptor.icon_path}",
        f"Categories={''.join(f'{category};' for category in sorted(descriptor.categories))}",
        "Terminal=false",
        "StartupNotify=true",
        f"StartupWMClass={descriptor.executable}",
    ]
    return "\n".join(lines) + "\n"


def write_launcher(descriptor: LaunchDescriptor, destination: str | Path) -> LauncherArtifacts:
    root = Path(destination)
    wrapper = root / "libexec" / wrapper_name(descriptor)
    desktop_entry = root / "share" / "applications" / f"{descriptor.identifier}.desktop"
    try:
        wrapper.parent.mkdir(parents=True, exist_ok=True)
        wrapper.write_text(render_wrapper(descriptor), encoding="utf-8")
        wrapper.chmod(0o755)

        desktop_entry.parent.mkdir(parents=True, exist_ok=True)
        desktop_entry.write_text(render_desktop_entry(descriptor, wrapper), encoding="utf-8")

        link: Path | None = None
        if descriptor.create_terminal_command:
            link = root / "bin" / descriptor.terminal_command
            link.parent.mkdir(parents=True, exist_ok=True)
            if link.is_symlink() or link.exists():
                link.unlink()
            os.symlink(wrapper, link)
    except OSError as exc:
        raise EmitError(
            "Failed to write launcher files.",
            hint=str(exc),
            context={"identifier": descriptor.identifier, "destination": str(root)},
        ) from exc
    return LauncherArtifacts(wrapper=wrapper, desktop_entry=desktop_entry, terminal_command=link)


def _flag(value: bool) -> str:
    return "1" if value else "0"


def _substitute(template: str, replacements: Mapping[str, str]) -> str:
    # Single pass, so substituted values are never rescanned.
    found = set(_PLACEHOLDER.findall(template))
    missing = found - set(replacements)
    if missing:
        raise EmitError(
            "Wrapper template has an unfilled placeholder.",
            context={"placeholders": ", ".join(sorted(missing))},
        )
    unused = set(replacements) - found
    if unused:
        raise EmitError(
            "Wrapper template is missing a placeholder.",
            context={"placeholders": ", ".join(sorted(unused))},
        )
    return _PLACEHOLDER.sub(lambda match: replacements[match.group(0)], template)
