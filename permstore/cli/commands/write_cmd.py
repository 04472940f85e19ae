from __future__ import annotations

import json
from typing import Any

import click
import rich_click

from ..context import CLIContext
from ..options import output_options, path_argument
from ..runner import CommandOutput, run_command
from ..serialization import serialize_value


def parse_value(raw: str, *, as_string: bool = False) -> Any:
    """Interpret a command-line VALUE as JSON, falling back to the literal string."""
    if as_string:
        return raw
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


@click.command(name="write", cls=rich_click.RichCommand)
@path_argument()
@click.argument("value", type=str)
@click.option("--raw", is_flag=True, help="Store VALUE as a string without JSON parsing.")
@output_options
@click.pass_obj
def write_cmd(ctx: CLIContext, path: str, value: str, raw: bool) -> None:
    """Write VALUE at PATH and show the root's visible fields.

    The store lives only for this invocation; nothing is saved.
    """

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        store = ctx.get_store()
        written = store.write(path, parse_value(value, as_string=raw))
        return CommandOutput(
            data={
                "path": path,
                "value": serialize_value(written),
                "entries": serialize_value(store.entries()),
            }
        )

    run_command(ctx, command="write", fn=fn)
