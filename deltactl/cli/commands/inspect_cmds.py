from __future__ import annotations

import click
import rich_click

from deltactl import delta

from ..context import CLIContext
from ..options import output_options, table_uri_argument
from ..runner import CommandOutput, run_command


@click.command(name="schema", cls=rich_click.RichCommand)
@table_uri_argument
@output_options
@click.pass_obj
def schema_cmd(ctx: CLIContext, uri: str) -> None:
    """Print the schema of a table."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        table = ctx.open_table(uri, warnings=warnings)
        return CommandOutput(data=delta.schema(table), warnings=warnings)

    run_command(ctx, command="schema", fn=fn)


@click.command(name="details", cls=rich_click.RichCommand)
@table_uri_argument
@output_options
@click.pass_obj
def details_cmd(ctx: CLIContext, uri: str) -> None:
    """Print the details for a table.

    Collects the table's current state, including version, the timestamp of
    the latest commit, table metadata, and protocol configuration.
    """

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        table = ctx.open_table(uri, warnings=warnings)
        return CommandOutput(data=delta.details(table), warnings=warnings)

    run_command(ctx, command="details", fn=fn)
