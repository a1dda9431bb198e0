"""
Table maintenance operations.

Thin wrappers over :class:`deltalake.DeltaTable`. Each function takes an open
table, invokes the matching ``deltalake`` operation and returns plain
JSON-compatible data for rendering.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from deltalake import DeltaTable

from .exceptions import TableUriError

logger = logging.getLogger(__name__)


def ensure_table_uri(location: str) -> str:
    """
    Normalize a table location.

    URIs with a scheme (``s3://``, ``gs://``, ``az://``, ``abfss://``,
    ``file://``, ``memory://``...) pass through unchanged. Anything else is a
    local path, resolved to an absolute path that must be an existing
    directory.
    """
    raw = location.strip()
    if not raw:
        raise TableUriError(location, "location is empty")

    scheme = urlsplit(raw).scheme
    # Single-letter schemes are Windows drive letters, not URIs.
    if len(scheme) > 1 and "://" in raw:
        return raw

    path = Path(raw).expanduser().resolve()
    if not path.exists():
        raise TableUriError(location, "path does not exist")
    if not path.is_dir():
        raise TableUriError(location, "path is not a directory")
    return str(path)


def open_table(uri: str, storage_options: dict[str, str] | None = None) -> DeltaTable:
    logger.info("opening table %s", uri)
    if storage_options:
        return DeltaTable(uri, storage_options=storage_options)
    return DeltaTable(uri)


@dataclass(frozen=True, slots=True)
class OptimizeOptions:
    target_size: int | None = None
    max_spill_size: int | None = None
    max_concurrent_tasks: int | None = None
    min_commit_interval: timedelta | None = None

    def to_kwargs(self, *, zorder: bool) -> dict[str, Any]:
        """Keyword arguments for ``deltalake``; unset options are left out."""
        kwargs: dict[str, Any] = {}
        if self.target_size is not None:
            kwargs["target_size"] = self.target_size
        if self.max_concurrent_tasks is not None:
            kwargs["max_concurrent_tasks"] = self.max_concurrent_tasks
        if self.min_commit_interval is not None:
            kwargs["min_commit_interval"] = self.min_commit_interval
        if zorder and self.max_spill_size is not None:
            kwargs["max_spill_size"] = self.max_spill_size
        return kwargs


@dataclass(frozen=True, slots=True)
class VacuumOptions:
    enforce_retention: bool = True
    retention_period: timedelta | None = None
    dry_run: bool = False
    print_files: bool = False


def compact(table: DeltaTable, options: OptimizeOptions | None = None) -> dict[str, Any]:
    """Bin-pack small files into larger ones."""
    kwargs = (options or OptimizeOptions()).to_kwargs(zorder=False)
    logger.info("compacting table %s (%s)", table.table_uri, kwargs or "defaults")
    metrics = table.optimize.compact(**kwargs)
    logger.debug("compaction metrics: %s", metrics)
    return dict(metrics)


def zorder(
    table: DeltaTable,
    columns: list[str],
    options: OptimizeOptions | None = None,
) -> dict[str, Any]:
    """Rewrite files Z-ordered on ``columns``."""
    if not columns:
        raise ValueError("zorder requires at least one column")
    kwargs = (options or OptimizeOptions()).to_kwargs(zorder=True)
    logger.info("z-ordering table %s on %s", table.table_uri, ", ".join(columns))
    metrics = table.optimize.z_order(columns, **kwargs)
    logger.debug("z-order metrics: %s", metrics)
    return dict(metrics)


def vacuum(table: DeltaTable, options: VacuumOptions | None = None) -> dict[str, Any]:
    """Delete files no longer referenced by the table and older than the retention period."""
    options = options or VacuumOptions()
    retention_hours: int | None = None
    if options.retention_period is not None:
        retention_hours = int(options.retention_period.total_seconds() // 3600)

    logger.info(
        "vacuuming table %s (retention_hours=%s, enforce=%s, dry_run=%s)",
        table.table_uri,
        retention_hours,
        options.enforce_retention,
        options.dry_run,
    )
    files = table.vacuum(
        retention_hours=retention_hours,
        dry_run=options.dry_run,
        enforce_retention_duration=options.enforce_retention,
    )
    result: dict[str, Any] = {"dryRun": options.dry_run, "filesDeleted": len(files)}
    if options.print_files:
        result["files"] = list(files)
    return result


def set_properties(table: DeltaTable, properties: dict[str, str]) -> dict[str, Any]:
    """Set table properties such as ``delta.logRetentionDuration``."""
    logger.info("setting %d table properties on %s", len(properties), table.table_uri)
    table.alter.set_table_properties(properties)
    return {"version": table.version(), "properties": dict(properties)}


def create_checkpoint(table: DeltaTable) -> dict[str, Any]:
    """Write a checkpoint at the current table version."""
    version = table.version()
    logger.info("creating checkpoint for %s at version %s", table.table_uri, version)
    table.create_checkpoint()
    return {"version": version}


def expire_logs(table: DeltaTable) -> dict[str, Any]:
    """
    Delete expired log files before the current table version.

    Retention follows the table's ``delta.logRetentionDuration`` property,
    30 days by default.
    """
    version = table.version()
    logger.info("expiring logs for %s before version %s", table.table_uri, version)
    table.cleanup_metadata()
    return {"version": version}


def schema(table: DeltaTable) -> dict[str, Any]:
    return json.loads(table.schema().to_json())


def _ms_to_iso(value: Any) -> str | None:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc).isoformat()


def details(table: DeltaTable) -> dict[str, Any]:
    """
    Collect the current state of a table.

    Includes the version, the timestamp of the latest commit, table metadata
    and protocol configuration.
    """
    metadata = table.metadata()
    protocol = table.protocol()
    history = table.history(limit=1)
    last_commit = history[0].get("timestamp") if history else None

    return {
        "uri": table.table_uri,
        "version": table.version(),
        "lastCommit": _ms_to_iso(last_commit),
        "metadata": {
            "id": metadata.id,
            "name": metadata.name,
            "description": metadata.description,
            "partitionColumns": list(metadata.partition_columns),
            "createdTime": _ms_to_iso(metadata.created_time),
            "configuration": dict(metadata.configuration),
        },
        "protocol": {
            "minReaderVersion": protocol.min_reader_version,
            "minWriterVersion": protocol.min_writer_version,
            "readerFeatures": list(protocol.reader_features or []),
            "writerFeatures": list(protocol.writer_features or []),
        },
    }
