from __future__ import annotations

from pathlib import Path

import click
import rich_click

import deltactl

from .commands._parsing import parse_key_value
from .context import CLIContext
from .errors import CLIError
from .logging import configure_logging, restore_logging
from .paths import get_paths


def _parse_storage_options(
    _ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]
) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for value in values:
        try:
            pairs.append(parse_key_value(value))
        except CLIError as exc:
            raise click.BadParameter(exc.message) from exc
    return pairs


@click.group(
    name="deltactl",
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    cls=rich_click.RichGroup,
)
@click.option(
    "-o",
    "--storage-option",
    "storage_options",
    multiple=True,
    metavar="KEY=VALUE",
    callback=_parse_storage_options,
    help="Storage option passed to deltalake (repeatable); overrides the profile.",
)
@click.option("--profile", type=str, default=None, help="Config profile name.")
@click.option(
    "--output",
    type=click.Choice(["table", "json"]),
    default="table",
)
@click.option("--json", "json_flag", is_flag=True, help="Alias for --output json.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-essential stderr output.")
@click.option("-v", "verbose", count=True, help="Increase verbosity (-v, -vv).")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None)
@click.option("--no-log-file", is_flag=True, help="Disable file logging explicitly.")
@click.version_option(version=deltactl.__version__, prog_name="deltactl")
@click.pass_context
def cli(
    click_ctx: click.Context,
    *,
    storage_options: list[tuple[str, str]],
    profile: str | None,
    output: str,
    json_flag: bool,
    quiet: bool,
    verbose: int,
    log_file: str | None,
    no_log_file: bool,
) -> None:
    """Maintenance commands for Delta Lake tables."""
    if click_ctx.invoked_subcommand is None:
        click.echo(click_ctx.get_help())
        raise click.exceptions.Exit(0)

    out = "json" if json_flag else output
    paths = get_paths()
    effective_log_file = Path(log_file) if log_file else paths.log_file
    enable_log_file = not no_log_file

    click_ctx.obj = CLIContext(
        output=out,  # type: ignore[arg-type]
        quiet=quiet,
        verbosity=verbose,
        profile=profile,
        storage_options=storage_options,
        log_file=effective_log_file,
        enable_log_file=enable_log_file,
        _paths=paths,
    )

    previous_logging = configure_logging(
        verbosity=verbose,
        log_file=effective_log_file,
        enable_file=enable_log_file,
    )
    click_ctx.call_on_close(lambda: restore_logging(previous_logging))


# Register commands
from .commands.config_cmds import config_group as _config_group  # noqa: E402
from .commands.configure_cmd import configure_cmd as _configure_cmd  # noqa: E402
from .commands.inspect_cmds import details_cmd as _details_cmd  # noqa: E402
from .commands.inspect_cmds import schema_cmd as _schema_cmd  # noqa: E402
from .commands.log_cmds import checkpoint_cmd as _checkpoint_cmd  # noqa: E402
from .commands.log_cmds import expire_cmd as _expire_cmd  # noqa: E402
from .commands.optimize_cmds import compact_cmd as _compact_cmd  # noqa: E402
from .commands.optimize_cmds import zorder_cmd as _zorder_cmd  # noqa: E402
from .commands.vacuum_cmd import vacuum_cmd as _vacuum_cmd  # noqa: E402
from .commands.version_cmd import version_cmd as _version_cmd  # noqa: E402

cli.add_command(_compact_cmd)
cli.add_command(_zorder_cmd)
cli.add_command(_vacuum_cmd)
cli.add_command(_configure_cmd)
cli.add_command(_checkpoint_cmd)
cli.add_command(_expire_cmd)
cli.add_command(_schema_cmd)
cli.add_command(_details_cmd)
cli.add_command(_version_cmd)
cli.add_command(_config_group)


def main() -> None:
    cli(prog_name="deltactl")
