from __future__ import annotations

import click
import rich_click

from deltactl import delta

from ..context import CLIContext
from ..options import output_options, table_uri_argument
from ..runner import CommandOutput, run_command
from ._parsing import parse_key_values


@click.command(name="configure", cls=rich_click.RichCommand)
@table_uri_argument
@click.option(
    "-p",
    "--property",
    "properties",
    multiple=True,
    required=True,
    metavar="KEY=VALUE",
    help=(
        "Delta table property pair; repeat for each pair: -p a=1 -p b=2. "
        "See https://docs.delta.io/latest/table-properties.html"
    ),
)
@output_options
@click.pass_obj
def configure_cmd(ctx: CLIContext, uri: str, *, properties: tuple[str, ...]) -> None:
    """Set table properties."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        pairs = dict(parse_key_values(properties))
        table = ctx.open_table(uri, warnings=warnings)
        return CommandOutput(data=delta.set_properties(table, pairs), warnings=warnings)

    run_command(ctx, command="configure", fn=fn)
