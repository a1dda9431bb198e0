"""CLI configuration file (TOML) with named profiles."""

from __future__ import annotations

import json
import os
import stat
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import CLIError


@dataclass(frozen=True, slots=True)
class ProfileConfig:
    storage_options: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class LoadedConfig:
    default: ProfileConfig
    profiles: dict[str, ProfileConfig]


def _profile_from_table(table: dict[str, Any], *, where: str) -> ProfileConfig:
    raw = table.get("storage_options", {})
    if not isinstance(raw, dict):
        raise CLIError.config(
            f"Invalid config: {where}.storage_options must be a table.",
        )
    return ProfileConfig(storage_options={str(k): str(v) for k, v in raw.items()})


def load_config(path: Path) -> LoadedConfig:
    if not path.exists():
        return LoadedConfig(default=ProfileConfig(), profiles={})

    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise CLIError.config(
            f"Invalid config file {path}: {exc}",
        ) from exc

    default_table = data.get("default", {})
    if not isinstance(default_table, dict):
        raise CLIError.config(
            "Invalid config: [default] must be a table.",
        )
    profiles_table = data.get("profiles", {})
    if not isinstance(profiles_table, dict):
        raise CLIError.config(
            "Invalid config: [profiles] must be a table.",
        )

    profiles: dict[str, ProfileConfig] = {}
    for name, table in profiles_table.items():
        if not isinstance(table, dict):
            raise CLIError.config(
                f"Invalid config: [profiles.{name}] must be a table.",
            )
        profiles[str(name)] = _profile_from_table(table, where=f"profiles.{name}")

    return LoadedConfig(
        default=_profile_from_table(default_table, where="default"),
        profiles=profiles,
    )


def config_file_permission_warnings(path: Path) -> list[str]:
    """Warn when a config file holding credentials is readable by others."""
    if os.name != "posix" or not path.exists():
        return []
    mode = path.stat().st_mode
    if mode & (stat.S_IRGRP | stat.S_IROTH):
        return [
            f"Config file {path} is readable by other users; "
            "storage credentials may be exposed (chmod 600)."
        ]
    return []


def _toml_string(value: str) -> str:
    # JSON string escapes are valid TOML basic-string escapes.
    return json.dumps(value)


def config_init_template(
    storage_options: dict[str, str] | None = None, *, profile: str | None = None
) -> str:
    """
    Render a starter config file.

    Given ``storage_options`` are written to the ``[default]`` table, or to
    ``[profiles.<profile>]`` when a profile name is given; otherwise the
    tables only hold commented examples.
    """
    lines = [
        "# deltactl configuration",
        "#",
        "# Storage options are passed to deltalake when opening a table.",
        "# Values given with -o/--storage-option override these.",
        "",
    ]
    if profile is None or profile == "default":
        target = "default"
    else:
        target = f"profiles.{_toml_string(profile)}"
    lines.append(f"[{target}.storage_options]")
    if storage_options:
        lines.extend(f"{_toml_string(k)} = {_toml_string(v)}" for k, v in storage_options.items())
    else:
        lines.append('# AWS_REGION = "us-east-1"')
    if target == "default":
        lines.extend(
            [
                "",
                "# [profiles.minio.storage_options]",
                '# AWS_ENDPOINT_URL = "http://localhost:9000"',
                '# AWS_ALLOW_HTTP = "true"',
            ]
        )
    return "\n".join(lines) + "\n"
