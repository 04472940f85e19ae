from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .results import CommandResult


@dataclass(frozen=True, slots=True)
class RenderSettings:
    output: str  # "table" | "json"
    quiet: bool
    verbosity: int


def _error_title(error_type: str) -> str:
    mapping = {
        "usage_error": "Usage error",
        "permission_denied": "Permission denied",
        "config_error": "Configuration error",
        "invalid_path": "Invalid path",
        "invalid_policy": "Invalid policy",
        "store_error": "Store error",
        "internal_error": "Internal error",
    }
    return mapping.get((error_type or "").strip(), "Error")


def _format_scalar_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        if all(isinstance(v, str) for v in value):
            return ", ".join(value)
        return f"list ({len(value):,} items)"
    if isinstance(value, dict):
        return f"object ({len(value):,} keys)"
    return str(value)


def _kv_table(obj: dict[str, Any], *, title: str | None = None) -> Table:
    table = Table(show_header=True, header_style="bold", title=title)
    table.add_column("field")
    table.add_column("value")
    for k, v in obj.items():
        table.add_row(str(k), _format_scalar_value(v))
    return table


def _render_value(value: Any, *, verbosity: int) -> Any:
    if isinstance(value, dict):
        if not value:
            return Text("(empty)")
        if verbosity >= 1:
            return Panel.fit(Text(json.dumps(value, ensure_ascii=False, indent=2)))
        return _kv_table(value)
    if isinstance(value, list):
        return Text(json.dumps(value, ensure_ascii=False))
    if value is None:
        return Text("(no value)", style="dim")
    return Text(str(value))


def _render_human_data(command: str, data: Any, *, verbosity: int) -> Any:
    if not isinstance(data, dict):
        return Panel.fit(Text(str(data) if data is not None else "OK"))

    if command == "version":
        return Text(str(data.get("version", "")), style="bold")
    if command == "read":
        return _render_value(data.get("value"), verbosity=verbosity)
    if command == "entries":
        entries = data.get("entries") or {}
        if not entries:
            return Text("(no visible fields)", style="dim")
        return _kv_table(entries, title=data.get("path") or None)
    if command == "write":
        header = Text(f"Wrote {data.get('path')}", style="bold")
        entries = data.get("entries") or {}
        return Group(header, _kv_table(entries)) if entries else header
    return _kv_table(data)


def render_result(result: CommandResult, *, settings: RenderSettings) -> int:
    stdout = Console(file=sys.stdout, force_terminal=False)
    stderr = Console(file=sys.stderr, force_terminal=False)

    if settings.output == "json":
        payload = result.model_dump(by_alias=True, mode="json")
        sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")
        return 0

    if not result.ok:
        if result.error is None:
            stderr.print("Error")
            return 0
        stderr.print(f"{_error_title(result.error.type)}: {result.error.message}")
        if settings.quiet:
            return 0
        if result.error.hint:
            stderr.print(f"Hint: {result.error.hint}")
        if result.error.details and settings.verbosity >= 1:
            stderr.print(Panel.fit(Text(json.dumps(result.error.details, indent=2))))
        return 0

    stdout.print(_render_human_data(result.command, result.data, verbosity=settings.verbosity))
    return 0
