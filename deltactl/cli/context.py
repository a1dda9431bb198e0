from __future__ import annotations

import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from deltalake.exceptions import CommitFailedError, DeltaError, TableNotFoundError

from deltactl import delta
from deltactl.exceptions import InvalidFilterSyntax, TableUriError

from .config import LoadedConfig, ProfileConfig, config_file_permission_warnings, load_config
from .errors import EXIT_FAILURE, EXIT_NOT_FOUND, EXIT_USAGE, CLIError
from .logging import set_redaction_values
from .paths import CliPaths, get_paths
from .results import CommandMeta, CommandResult, ErrorInfo

if TYPE_CHECKING:
    from deltalake import DeltaTable

OutputFormat = Literal["table", "json"]


@dataclass
class CLIContext:
    output: OutputFormat
    quiet: bool
    verbosity: int
    profile: str | None
    storage_options: list[tuple[str, str]]
    log_file: Path | None
    enable_log_file: bool

    _paths: CliPaths = field(default_factory=get_paths)
    _loaded_config: LoadedConfig | None = None
    table_uri: str | None = None

    @property
    def paths(self) -> CliPaths:
        return self._paths

    def _config_path(self) -> Path:
        return self.paths.config_path

    def load_config(self) -> LoadedConfig:
        if self._loaded_config is None:
            self._loaded_config = load_config(self._config_path())
        return self._loaded_config

    def effective_profile(self) -> str:
        return self.profile or os.getenv("DELTACTL_PROFILE") or "default"

    def _profile_config(self) -> ProfileConfig:
        cfg = self.load_config()
        name = self.effective_profile()
        if name == "default":
            return cfg.default
        if name not in cfg.profiles:
            raise CLIError.config(
                f"Unknown profile: {name}",
                hint=f"Add a [profiles.{name}] table to {self._config_path()}.",
            )
        return cfg.profiles[name]

    def config_permission_warnings(self) -> list[str]:
        return config_file_permission_warnings(self._config_path())

    def resolve_storage_options(self, *, warnings: list[str]) -> dict[str, str]:
        prof = self._profile_config()
        options = dict(prof.storage_options)
        if options:
            warnings.extend(self.config_permission_warnings())
        # Command-line pairs override the profile, last one wins.
        options.update(self.storage_options)
        set_redaction_values(options)
        return options

    def open_table(self, location: str, *, warnings: list[str]) -> DeltaTable:
        uri = delta.ensure_table_uri(location)
        self.table_uri = uri
        storage_options = self.resolve_storage_options(warnings=warnings)
        return delta.open_table(uri, storage_options or None)


def exit_code_for_exception(exc: Exception) -> int:
    if isinstance(exc, CLIError):
        return exc.exit_code
    if isinstance(exc, (TableUriError, InvalidFilterSyntax)):
        return EXIT_USAGE
    if isinstance(exc, TableNotFoundError):
        return EXIT_NOT_FOUND
    return EXIT_FAILURE


def error_info_for_exception(exc: Exception) -> ErrorInfo:
    if isinstance(exc, CLIError):
        return ErrorInfo(
            type=exc.error_type, message=exc.message, hint=exc.hint, details=exc.details
        )
    if isinstance(exc, TableUriError):
        return ErrorInfo(
            type="usage_error",
            message=str(exc),
            hint="Pass a local table directory or a URI such as s3://bucket/path.",
            details={"location": exc.location},
        )
    if isinstance(exc, InvalidFilterSyntax):
        return ErrorInfo(type="usage_error", message=str(exc), details={"filter": exc.text})
    if isinstance(exc, TableNotFoundError):
        return ErrorInfo(type="not_found", message=str(exc))
    if isinstance(exc, CommitFailedError):
        return ErrorInfo(
            type="commit_failed",
            message=str(exc),
            hint="Another writer may have committed concurrently; retry the command.",
        )
    if isinstance(exc, DeltaError):
        return ErrorInfo(type="table_error", message=str(exc))
    return ErrorInfo(type="internal_error", message=f"{exc.__class__.__name__}: {exc}")


def build_result(
    *,
    ok: bool,
    command: str,
    started_at: float,
    data: Any | None,
    warnings: list[str],
    profile: str | None,
    table: str | None = None,
    error: ErrorInfo | None = None,
) -> CommandResult:
    duration_ms = int(max(0.0, (time.time() - started_at) * 1000))
    meta = CommandMeta(duration_ms=duration_ms, profile=profile, table=table)
    return CommandResult(
        ok=ok,
        command=command,
        data=data,
        warnings=warnings,
        meta=meta,
        error=error,
    )
