from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import click

from .context import CLIContext

F = TypeVar("F", bound=Callable[..., object])


def _output_callback(forced: str | None) -> Callable[[click.Context, click.Parameter, Any], Any]:
    def callback(ctx: click.Context, _param: click.Parameter, value: Any) -> Any:
        if forced is None:
            fmt = value
        else:
            fmt = forced if value else None
        if fmt and isinstance(ctx.obj, CLIContext):
            ctx.obj.output = fmt
        return value

    return callback


def output_options(fn: F) -> F:
    """Per-command `--output`/`--json`, overriding the group-level choice."""
    fn = click.option(
        "--output",
        type=click.Choice(["table", "json"]),
        default=None,
        help="Override output format for this command.",
        callback=_output_callback(None),
        expose_value=False,
    )(fn)
    fn = click.option(
        "--json",
        is_flag=True,
        help="Alias for --output json.",
        callback=_output_callback("json"),
        expose_value=False,
    )(fn)
    return fn


def path_argument(*, required: bool = True) -> Callable[[F], F]:
    """Colon-delimited store path argument."""
    return click.argument("path", type=str, required=required, metavar="PATH")
