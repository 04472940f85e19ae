from __future__ import annotations

import click
import rich_click

from ..context import CLIContext
from ..options import output_options
from ..runner import CommandOutput, run_command


@click.command(name="check", cls=rich_click.RichCommand)
@click.argument("field", type=str)
@output_options
@click.pass_obj
def check_cmd(ctx: CLIContext, field: str) -> None:
    """Show the effective policy of a root FIELD."""

    def fn(ctx: CLIContext, _warnings: list[str]) -> CommandOutput:
        store = ctx.get_store()
        policy = store.effective_policy(field)
        return CommandOutput(
            data={
                "field": field,
                "policy": policy.value,
                "override": store.field_policy(field) is not None,
                "read": store.allowed_to_read(field),
                "write": store.allowed_to_write(field),
            }
        )

    run_command(ctx, command="check", fn=fn)
