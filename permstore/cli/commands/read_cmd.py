from __future__ import annotations

import click
import rich_click

from ..context import CLIContext
from ..options import output_options, path_argument
from ..runner import CommandOutput, run_command
from ..serialization import serialize_value


@click.command(name="read", cls=rich_click.RichCommand)
@path_argument()
@output_options
@click.pass_obj
def read_cmd(ctx: CLIContext, path: str) -> None:
    """Resolve PATH (e.g. user:name) and print its value."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        value = ctx.get_store().read(path)
        if value is None:
            warnings.append(f"Nothing stored at {path!r}")
        return CommandOutput(data={"path": path, "value": serialize_value(value)})

    run_command(ctx, command="read", fn=fn)
