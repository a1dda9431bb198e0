from __future__ import annotations

import click
import rich_click

from deltactl import delta

from ..context import CLIContext
from ..options import output_options, table_uri_argument
from ..runner import CommandOutput, run_command


@click.command(name="checkpoint", cls=rich_click.RichCommand)
@table_uri_argument
@output_options
@click.pass_obj
def checkpoint_cmd(ctx: CLIContext, uri: str) -> None:
    """Create a new checkpoint at current table version."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        table = ctx.open_table(uri, warnings=warnings)
        return CommandOutput(data={"checkpoint": delta.create_checkpoint(table)}, warnings=warnings)

    run_command(ctx, command="checkpoint", fn=fn)


@click.command(name="expire", cls=rich_click.RichCommand)
@table_uri_argument
@output_options
@click.pass_obj
def expire_cmd(ctx: CLIContext, uri: str) -> None:
    """Delete expired log files before current table version.

    The table log retention is based on the `logRetentionDuration`
    property of the table, 30 days by default.
    """

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        table = ctx.open_table(uri, warnings=warnings)
        return CommandOutput(data={"expired": delta.expire_logs(table)}, warnings=warnings)

    run_command(ctx, command="expire", fn=fn)
