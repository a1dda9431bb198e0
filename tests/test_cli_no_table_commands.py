"""Tests for commands that never open a table."""

from __future__ import annotations

import json
import os
import tomllib

import pytest
from click.testing import CliRunner

import deltactl
from deltactl.cli import main as cli_main
from deltactl.cli.main import cli
from deltactl.cli.paths import CliPaths


def _write_config(paths: CliPaths, text: str) -> None:
    paths.config_dir.mkdir(parents=True, exist_ok=True)
    paths.config_path.write_text(text, encoding="utf-8")
    paths.config_path.chmod(0o600)


def test_cli_no_args_shows_help() -> None:
    """Test that a bare invocation prints help."""
    runner = CliRunner()
    result = runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage:" in result.output


def test_console_entry_point_is_in_main_module(cli_paths: CliPaths) -> None:
    """Test the console script target and the patched path lookup share one module."""
    assert callable(cli_main.main)
    assert cli_main.cli is cli
    assert cli_main.get_paths() == cli_paths


def test_cli_version_option() -> None:
    """Test the eager --version flag."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert deltactl.__version__ in result.output


def test_cli_version_table_output() -> None:
    """Test the version command in table mode."""
    runner = CliRunner()
    result = runner.invoke(cli, ["version"])
    assert result.exit_code == 0
    assert deltactl.__version__ in result.output


def test_cli_version_json() -> None:
    """Test the version command's JSON envelope."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--json", "version"])
    assert result.exit_code == 0
    payload = json.loads(result.output.strip())
    assert payload["ok"] is True
    assert payload["command"] == "version"
    assert payload["data"]["version"] == deltactl.__version__
    assert "deltalakeVersion" in payload["data"]
    assert isinstance(payload["meta"]["durationMs"], int)


# =============================================================================
# config path
# =============================================================================


def test_cli_config_path_json_after_subcommand(cli_paths: CliPaths) -> None:
    """Test config path reports the config and log file locations."""
    runner = CliRunner()
    result = runner.invoke(cli, ["config", "path", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.output.strip())
    assert payload["ok"] is True
    assert payload["command"] == "config path"
    assert payload["data"] == {
        "path": str(cli_paths.config_path),
        "exists": False,
        "logFile": str(cli_paths.log_file),
    }


def test_cli_config_path_without_log_file() -> None:
    """Test that --no-log-file leaves logFile empty."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--no-log-file", "config", "path", "--json"])
    assert result.exit_code == 0
    assert json.loads(result.output.strip())["data"]["logFile"] is None


# =============================================================================
# config init
# =============================================================================


def test_cli_config_init_then_refuses_overwrite(cli_paths: CliPaths) -> None:
    """Test config init writes a template once and needs --force afterwards."""
    runner = CliRunner()
    result = runner.invoke(cli, ["config", "init", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.output.strip())
    assert payload["data"] == {
        "path": str(cli_paths.config_path),
        "overwritten": False,
        "profile": "default",
        "storageOptions": [],
    }
    text = cli_paths.config_path.read_text(encoding="utf-8")
    assert "[default.storage_options]" in text
    assert tomllib.loads(text) == {"default": {"storage_options": {}}}
    if os.name == "posix":
        assert cli_paths.config_path.stat().st_mode & 0o077 == 0

    result = runner.invoke(cli, ["config", "init", "--json"])
    assert result.exit_code == 2
    payload = json.loads(result.output.strip())
    assert payload["ok"] is False
    assert payload["error"]["type"] == "usage_error"
    assert "--force" in payload["error"]["hint"]

    result = runner.invoke(cli, ["config", "init", "--force", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.output.strip())
    assert payload["data"]["overwritten"] is True


def test_cli_config_init_saves_storage_options_to_profile(cli_paths: CliPaths) -> None:
    """Test that -o pairs are written under the selected profile."""
    runner = CliRunner()
    result = runner.invoke(
        cli,
        [
            "--profile",
            "minio",
            "-o",
            "AWS_SECRET_ACCESS_KEY=abcd1234",
            "-o",
            'AWS_ENDPOINT_URL=http://localhost:9000/"x"',
            "config",
            "init",
            "--json",
        ],
    )
    assert result.exit_code == 0
    payload = json.loads(result.output.strip())
    assert payload["data"]["profile"] == "minio"
    assert payload["data"]["storageOptions"] == [
        'AWS_ENDPOINT_URL=http://localhost:9000/"x"',
        "AWS_SECRET_ACCESS_KEY=***",
    ]
    loaded = tomllib.loads(cli_paths.config_path.read_text(encoding="utf-8"))
    assert loaded["profiles"]["minio"]["storage_options"] == {
        "AWS_SECRET_ACCESS_KEY": "abcd1234",
        "AWS_ENDPOINT_URL": 'http://localhost:9000/"x"',
    }


def test_cli_config_init_table_output(cli_paths: CliPaths) -> None:
    """Test config init in table mode."""
    runner = CliRunner()
    result = runner.invoke(cli, ["config", "init"])
    assert result.exit_code == 0
    assert "Initialized config at" in result.output


# =============================================================================
# config show
# =============================================================================

_PROFILES_TOML = (
    "[default.storage_options]\n"
    'AWS_REGION = "us-east-1"\n'
    "\n"
    "[profiles.minio.storage_options]\n"
    'AWS_ENDPOINT_URL = "http://localhost:9000"\n'
    'AWS_SECRET_ACCESS_KEY = "minio-secret"\n'
)


def test_cli_config_show_lists_profiles(cli_paths: CliPaths) -> None:
    """Test config show marks the active profile and masks secrets."""
    _write_config(cli_paths, _PROFILES_TOML)
    runner = CliRunner()
    result = runner.invoke(cli, ["--profile", "minio", "config", "show", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.output.strip())
    assert payload["warnings"] == []
    assert payload["data"]["profiles"] == [
        {"name": "default", "active": False, "storageOptions": ["AWS_REGION=us-east-1"]},
        {
            "name": "minio",
            "active": True,
            "storageOptions": [
                "AWS_ENDPOINT_URL=http://localhost:9000",
                "AWS_SECRET_ACCESS_KEY=***",
            ],
        },
    ]


def test_cli_config_show_table_output(cli_paths: CliPaths) -> None:
    """Test config show renders one row per profile without secrets."""
    _write_config(cli_paths, _PROFILES_TOML)
    runner = CliRunner()
    result = runner.invoke(cli, ["config", "show"])
    assert result.exit_code == 0
    assert "minio" in result.output
    assert "minio-secret" not in result.output


def test_cli_config_show_warns_on_undefined_profile(
    cli_paths: CliPaths, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test a warning when DELTACTL_PROFILE names a missing profile."""
    _write_config(cli_paths, _PROFILES_TOML)
    monkeypatch.setenv("DELTACTL_PROFILE", "prod")
    runner = CliRunner()
    result = runner.invoke(cli, ["config", "show", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.output.strip())
    assert payload["warnings"] == ["Active profile 'prod' is not defined in the config file."]
    assert not any(row["active"] for row in payload["data"]["profiles"])


def test_cli_config_show_without_file() -> None:
    """Test config show falls back to an empty default profile."""
    runner = CliRunner()
    result = runner.invoke(cli, ["config", "show", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.output.strip())
    assert payload["data"]["profiles"] == [
        {"name": "default", "active": True, "storageOptions": []}
    ]


# =============================================================================
# Help
# =============================================================================


@pytest.mark.parametrize("command", ["compact", "zorder", "vacuum", "configure", "details"])
def test_cli_command_help(command: str) -> None:
    """Test each table command documents its URI argument."""
    runner = CliRunner()
    result = runner.invoke(cli, [command, "--help"])
    assert result.exit_code == 0
    assert "URI" in result.output
