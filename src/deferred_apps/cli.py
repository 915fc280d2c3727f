"""Command line entry point.

Usage:
    deferred-apps check --config apps.json --repository packages.json
    deferred-apps describe --config apps.json --repository packages.json
    deferred-apps build --config apps.json --repository packages.json --out result

Every subcommand accepts ``--log events.jsonl`` to keep the structured events.
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path

from deferred_apps.batch import assemble_config, check_collisions, requests_from_config
from deferred_apps.config import AppsConfig, load_config
from deferred_apps.emit import write_launcher
from deferred_apps.errors import DeferredAppsError
from deferred_apps.observability import StructuredLogger
from deferred_apps.repository import PackageRepository, load_repository


def cmd_check(
    config: AppsConfig,
    repository: PackageRepository,
    logger: StructuredLogger,
    args: argparse.Namespace,
) -> None:
    requests = requests_from_config(config)
    check_collisions(requests, repository=repository, logger=logger)
    print(f"OK: {len(requests)} apps, no terminal command collisions")


def cmd_describe(
    config: AppsConfig,
    repository: PackageRepository,
    logger: StructuredLogger,
    args: argparse.Namespace,
) -> None:
    descriptors = assemble_config(config, repository=repository, logger=logger)
    payload = [descriptor.to_payload() for descriptor in descriptors]
    print(json.dumps(payload, indent=2, sort_keys=True))


def cmd_build(
    config: AppsConfig,
    repository: PackageRepository,
    logger: StructuredLogger,
    args: argparse.Namespace,
) -> None:
    descriptors = assemble_config(config, repository=repository, logger=logger)
    for descriptor in descriptors:
        artifacts = write_launcher(descriptor, args.out / descriptor.identifier)
        print(f"{descriptor.identifier}: {artifacts.wrapper}")
    fallbacks = logger.summary()["icon_fallbacks"]
    if fallbacks:
        print(f"Icons not found in theme: {', '.join(fallbacks)}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deferred-apps",
        description="Build launchers that fetch applications on first use",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("check", "Check the app set for terminal command collisions"),
        ("describe", "Print launch descriptors as JSON"),
        ("build", "Write launcher files for every app"),
    ):
        command = sub.add_parser(name, help=help_text)
        command.add_argument("--config", required=True, help="Apps configuration (JSON)")
        command.add_argument("--repository", required=True, help="Package repository (JSON)")
        command.add_argument("--log", type=Path, help="Write structured events as JSON lines")
        if name == "build":
            command.add_argument("--out", required=True, type=Path, help="Output directory")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    commands = {"check": cmd_check, "describe": cmd_describe, "build": cmd_build}
    logger = StructuredLogger()
    try:
        config = load_config(args.config)
        repository = load_repository(args.repository)
        commands[args.command](config, repository, logger, args)
    except DeferredAppsError as exc:
        print(f"deferred-apps: {exc}", file=sys.stderr)
        return 1
    finally:
        if args.log is not None:
            logger.to_json_lines(args.log)
    return 0
