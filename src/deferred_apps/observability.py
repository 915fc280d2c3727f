"""Structured logging for batch runs.

Records are plain dicts with ``level``, ``operation``, ``identifier`` and
``message`` plus an optional ``extra`` mapping. The batch drivers emit
three kinds of events:

- ``assemble`` (info): one per descriptor, with its terminal command
- ``resolve_icon`` (warning): an icon fell back to a bare theme name
- ``detect_collisions`` (error): the batch was rejected before assembly
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from deferred_apps.models import LaunchDescriptor


@dataclass(slots=True)
class StructuredLogger:
    records: list[dict[str, Any]] = field(default_factory=list)

    def log(
        self,
        *,
        operation: str,
        identifier: str | None,
        message: str,
        level: str = "info",
        extra: dict[str, Any] | None = None,
    ) -> None:
        record: dict[str, Any] = {
            "level": level,
            "operation": operation,
            "identifier": identifier,
            "message": message,
        }
        if extra is not None:
            record["extra"] = extra
        self.records.append(record)

    def assembled(self, descriptor: LaunchDescriptor) -> None:
        if not Path(descriptor.icon_path).is_absolute():
            self.log(
                operation="resolve_icon",
                identifier=descriptor.identifier,
                message="Icon not found in theme; using bare icon name.",
                level="warning",
                extra={"icon": descriptor.icon_path},
            )
        self.log(
            operation="assemble",
            identifier=descriptor.identifier,
            message="Launch descriptor assembled.",
            extra={"terminal_command": descriptor.terminal_command},
        )

    def collided(self, commands: Iterable[str]) -> None:
        self.log(
            operation="detect_collisions",
            identifier=None,
            message="Terminal command collision detected.",
            level="error",
            extra={"commands": sorted(commands)},
        )

    def records_for(self, identifier: str) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("identifier") == identifier]

    def records_at(self, level: str) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("level") == level]

    def summary(self) -> dict[str, Any]:
        """Condense a run into what a caller usually checks afterwards."""
        return {
            "assembled": [
                record["identifier"] for record in self.records if record["operation"] == "assemble"
            ],
            "icon_fallbacks": [
                record["identifier"]
                for record in self.records
                if record["operation"] == "resolve_icon"
            ],
            "collisions": [
                command
                for record in self.records
                if record["operation"] == "detect_collisions"
                for command in record.get("extra", {}).get("commands", [])
            ],
        }

    def to_json_lines(self, path: str | Path) -> Path:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        lines = [json.dumps(record, sort_keys=True) for record in self.records]
        output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return output_path
