from __future__ import annotations

import click
import rich_click

from permstore.store import Store

from ..context import CLIContext
from ..errors import CLIError
from ..options import output_options, path_argument
from ..runner import CommandOutput, run_command
from ..serialization import serialize_value


@click.command(name="entries", cls=rich_click.RichCommand)
@path_argument(required=False)
@output_options
@click.pass_obj
def entries_cmd(ctx: CLIContext, path: str | None) -> None:
    """List readable fields of the root store, or of the store at PATH."""

    def fn(ctx: CLIContext, _warnings: list[str]) -> CommandOutput:
        target = ctx.get_store() if path is None else ctx.get_store().read(path)
        if isinstance(target, Store):
            entries = target.entries()
        elif isinstance(target, dict):
            entries = target
        else:
            raise CLIError(
                f"Path {path!r} does not resolve to a store or object.",
                hint=f"use `permstore read {path}` for scalar values",
                details={"path": path, "valueType": type(target).__name__},
            )
        return CommandOutput(data={"path": path, "entries": serialize_value(entries)})

    run_command(ctx, command="entries", fn=fn)
