from __future__ import annotations

import os
from contextlib import suppress
from typing import Any

import click
import rich_click

from ..config import ProfileConfig, config_init_template
from ..context import CLIContext
from ..errors import CLIError
from ..logging import is_secret_key
from ..options import output_options
from ..runner import CommandOutput, run_command


def _storage_option_rows(options: dict[str, str]) -> list[str]:
    return [f"{k}={'***' if is_secret_key(k) else v}" for k, v in sorted(options.items())]


def _profile_row(name: str, profile: ProfileConfig, *, active: str) -> dict[str, Any]:
    return {
        "name": name,
        "active": name == active,
        "storageOptions": _storage_option_rows(profile.storage_options),
    }


@click.group(name="config", cls=rich_click.RichGroup)
def config_group() -> None:
    """Config file and storage profiles."""


@config_group.command(name="path", cls=rich_click.RichCommand)
@output_options
@click.pass_obj
def config_path(ctx: CLIContext) -> None:
    """Show where the config file and the log file live."""

    def fn(ctx: CLIContext, _warnings: list[str]) -> CommandOutput:
        path = ctx.paths.config_path
        return CommandOutput(
            data={
                "path": str(path),
                "exists": path.exists(),
                "logFile": str(ctx.log_file) if ctx.enable_log_file and ctx.log_file else None,
            }
        )

    run_command(ctx, command="config path", fn=fn)


@config_group.command(name="show", cls=rich_click.RichCommand)
@output_options
@click.pass_obj
def config_show(ctx: CLIContext) -> None:
    """List storage profiles; secret-looking values are masked.

    The active profile comes from --profile, then DELTACTL_PROFILE, then
    `default`.
    """

    def fn(ctx: CLIContext, warnings: list[str]) -> CommandOutput:
        cfg = ctx.load_config()
        active = ctx.effective_profile()
        rows = [_profile_row("default", cfg.default, active=active)]
        rows.extend(
            _profile_row(name, prof, active=active) for name, prof in sorted(cfg.profiles.items())
        )
        if active != "default" and active not in cfg.profiles:
            warnings.append(f"Active profile {active!r} is not defined in the config file.")
        warnings.extend(ctx.config_permission_warnings())
        return CommandOutput(data={"profiles": rows}, warnings=warnings)

    run_command(ctx, command="config show", fn=fn)


@config_group.command(name="init", cls=rich_click.RichCommand)
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
@output_options
@click.pass_obj
def config_init(ctx: CLIContext, *, force: bool) -> None:
    """Write a starter config file.

    Storage options given with -o are saved to the profile selected with
    --profile (the default profile otherwise):

    \b
        deltactl --profile minio -o AWS_ALLOW_HTTP=true config init
    """

    def fn(ctx: CLIContext, _warnings: list[str]) -> CommandOutput:
        path = ctx.paths.config_path
        overwritten = path.exists()
        if overwritten and not force:
            raise CLIError.usage(
                f"Config already exists: {path}",
                hint="Pass --force to overwrite it.",
            )

        profile = ctx.profile or "default"
        options = dict(ctx.storage_options)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(config_init_template(options, profile=profile), encoding="utf-8")
        if os.name == "posix":
            with suppress(OSError):
                path.chmod(0o600)
        return CommandOutput(
            data={
                "path": str(path),
                "overwritten": overwritten,
                "profile": profile,
                "storageOptions": _storage_option_rows(options),
            }
        )

    run_command(ctx, command="config init", fn=fn)
