from __future__ import annotations

from pathlib import Path

import click
import rich_click

import permstore
from permstore.config import STORE_FILE_ENV

from .context import CLIContext
from .logging import configure_logging, restore_logging


@click.group(
    name="permstore",
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    cls=rich_click.RichGroup,
)
@click.option(
    "--store",
    "store_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"JSON store document (default: ${STORE_FILE_ENV}, else the built-in sample).",
)
@click.option(
    "--output",
    type=click.Choice(["table", "json"]),
    default="table",
)
@click.option("--json", "json_flag", is_flag=True, help="Alias for --output json.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-essential stderr output.")
@click.option("-v", "verbose", count=True, help="Increase verbosity (-v, -vv).")
@click.version_option(version=permstore.__version__, prog_name="permstore")
@click.pass_context
def cli(
    click_ctx: click.Context,
    *,
    store_file: Path | None,
    output: str,
    json_flag: bool,
    quiet: bool,
    verbose: int,
) -> None:
    if click_ctx.invoked_subcommand is None:
        click.echo(click_ctx.get_help())
        raise click.exceptions.Exit(0)

    click_ctx.obj = CLIContext(
        output="json" if json_flag else output,  # type: ignore[arg-type]
        quiet=quiet,
        verbosity=verbose,
        store_file=store_file,
    )

    previous_logging = configure_logging(verbosity=verbose)
    click_ctx.call_on_close(lambda: restore_logging(previous_logging))


# Register commands
from .commands.check_cmd import check_cmd as _check_cmd  # noqa: E402
from .commands.entries_cmd import entries_cmd as _entries_cmd  # noqa: E402
from .commands.read_cmd import read_cmd as _read_cmd  # noqa: E402
from .commands.version_cmd import version_cmd as _version_cmd  # noqa: E402
from .commands.write_cmd import write_cmd as _write_cmd  # noqa: E402

cli.add_command(_version_cmd)
cli.add_command(_read_cmd)
cli.add_command(_write_cmd)
cli.add_command(_entries_cmd)
cli.add_command(_check_cmd)
