from __future__ import annotations

import click
import rich_click

from deltactl import delta

from ..context import CLIContext
from ..errors import CLIError
from ..options import optimize_options, output_options, table_uri_argument
from ..runner import CommandOutput, run_command
from ._parsing import parse_duration


def _optimize_options(
    *,
    target_size: int | None,
    max_spill_size: int | None,
    max_concurrent_tasks: int | None,
    min_commit_interval: str | None,
) -> delta.OptimizeOptions:
    interval = (
        parse_duration(min_commit_interval, label="--min-commit-interval")
        if min_commit_interval is not None
        else None
    )
    return delta.OptimizeOptions(
        target_size=target_size,
        max_spill_size=max_spill_size,
        max_concurrent_tasks=max_concurrent_tasks,
        min_commit_interval=interval,
    )


@click.command(name="compact", cls=rich_click.RichCommand)
@table_uri_argument
@optimize_options(zorder=False)
@output_options
@click.pass_obj
def compact_cmd(
    ctx: CLIContext,
    uri: str,
    *,
    target_size: int | None,
    max_concurrent_tasks: int | None,
    min_commit_interval: str | None,
) -> None:
    """Optimize a table with compaction."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        options = _optimize_options(
            target_size=target_size,
            max_spill_size=None,
            max_concurrent_tasks=max_concurrent_tasks,
            min_commit_interval=min_commit_interval,
        )
        table = ctx.open_table(uri, warnings=warnings)
        metrics = delta.compact(table, options)
        return CommandOutput(data={"metrics": metrics}, warnings=warnings)

    run_command(ctx, command="compact", fn=fn)


@click.command(name="zorder", cls=rich_click.RichCommand)
@table_uri_argument
@click.option(
    "-c",
    "--columns",
    "columns",
    multiple=True,
    required=True,
    help="Comma-separated list of columns to order on (repeatable).",
)
@optimize_options(zorder=True)
@output_options
@click.pass_obj
def zorder_cmd(
    ctx: CLIContext,
    uri: str,
    *,
    columns: tuple[str, ...],
    target_size: int | None,
    max_spill_size: int | None,
    max_concurrent_tasks: int | None,
    min_commit_interval: str | None,
) -> None:
    """Optimize a table with Z-ordering."""

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        column_list = [c.strip() for raw in columns for c in raw.split(",") if c.strip()]
        if not column_list:
            raise CLIError.usage(
                "--columns requires at least one column name.",
            )
        options = _optimize_options(
            target_size=target_size,
            max_spill_size=max_spill_size,
            max_concurrent_tasks=max_concurrent_tasks,
            min_commit_interval=min_commit_interval,
        )
        table = ctx.open_table(uri, warnings=warnings)
        metrics = delta.zorder(table, column_list, options)
        return CommandOutput(data={"columns": column_list, "metrics": metrics}, warnings=warnings)

    run_command(ctx, command="zorder", fn=fn)
