from __future__ import annotations

import click
import rich_click

from deltactl import delta

from ..context import CLIContext
from ..options import output_options, table_uri_argument
from ..runner import CommandOutput, run_command
from ._parsing import parse_duration


@click.command(name="vacuum", cls=rich_click.RichCommand)
@table_uri_argument
@click.option(
    "--retention-period",
    type=str,
    default=None,
    help="Override the default retention period for which files are deleted, e.g. 7days.",
)
@click.option(
    "--no-enforce-retention",
    is_flag=True,
    help="Don't enforce the retention period.",
)
@click.option("--dry-run", is_flag=True, help="Only determine which files can be deleted.")
@click.option("--print-files", is_flag=True, help="Whether to print deleted files.")
@output_options
@click.pass_obj
def vacuum_cmd(
    ctx: CLIContext,
    uri: str,
    *,
    retention_period: str | None,
    no_enforce_retention: bool,
    dry_run: bool,
    print_files: bool,
) -> None:
    """Vacuum table files marked for removal."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        period = (
            parse_duration(retention_period, label="--retention-period")
            if retention_period is not None
            else None
        )
        if period is not None and period.total_seconds() % 3600:
            warnings.append("Retention period is rounded down to whole hours.")
        options = delta.VacuumOptions(
            enforce_retention=not no_enforce_retention,
            retention_period=period,
            dry_run=dry_run,
            print_files=print_files,
        )
        table = ctx.open_table(uri, warnings=warnings)
        return CommandOutput(data=delta.vacuum(table, options), warnings=warnings)

    run_command(ctx, command="vacuum", fn=fn)
