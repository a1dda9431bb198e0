from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from deltactl.cli import main as cli_main
from deltactl.cli.paths import CliPaths

SCHEMA_JSON = {
    "type": "struct",
    "fields": [
        {"name": "id", "type": "long", "nullable": False, "metadata": {}},
        {"name": "region", "type": "string", "nullable": True, "metadata": {}},
    ],
}


class FakeOptimizer:
    def __init__(self, table: FakeTable) -> None:
        self._table = table

    def compact(self, **kwargs: Any) -> dict[str, Any]:
        self._table.calls.append(("compact", (), kwargs))
        return {
            "numFilesAdded": 1,
            "numFilesRemoved": 4,
            "filesAdded": {"avg": 1024.0, "max": 1024, "min": 1024, "totalFiles": 1},
            "partitionsOptimized": 1,
        }

    def z_order(self, columns: list[str], **kwargs: Any) -> dict[str, Any]:
        self._table.calls.append(("z_order", (list(columns),), kwargs))
        return {"numFilesAdded": 2, "numFilesRemoved": 6}


class FakeAlterer:
    def __init__(self, table: FakeTable) -> None:
        self._table = table

    def set_table_properties(self, properties: dict[str, str]) -> None:
        self._table.calls.append(("set_table_properties", (dict(properties),), {}))
        self._table.current_version += 1


@dataclass
class FakeTable:
    """In-memory stand-in for deltalake.DeltaTable."""

    table_uri: str = "memory:///fake"
    current_version: int = 3
    vacuum_files: list[str] = field(
        default_factory=lambda: ["part-0001.parquet", "part-0002.parquet"]
    )
    calls: list[tuple[str, tuple[Any, ...], dict[str, Any]]] = field(default_factory=list)

    @property
    def optimize(self) -> FakeOptimizer:
        return FakeOptimizer(self)

    @property
    def alter(self) -> FakeAlterer:
        return FakeAlterer(self)

    def version(self) -> int:
        return self.current_version

    def vacuum(self, **kwargs: Any) -> list[str]:
        self.calls.append(("vacuum", (), kwargs))
        return list(self.vacuum_files)

    def create_checkpoint(self) -> None:
        self.calls.append(("create_checkpoint", (), {}))

    def cleanup_metadata(self) -> None:
        self.calls.append(("cleanup_metadata", (), {}))

    def schema(self) -> SimpleNamespace:
        return SimpleNamespace(to_json=lambda: json.dumps(SCHEMA_JSON))

    def metadata(self) -> SimpleNamespace:
        return SimpleNamespace(
            id="5fba94ed-9794-4965-ba6e-6ee3c0d22af9",
            name="events",
            description=None,
            partition_columns=["region"],
            created_time=1700000000000,
            configuration={"delta.logRetentionDuration": "interval 30 days"},
        )

    def protocol(self) -> SimpleNamespace:
        return SimpleNamespace(
            min_reader_version=1,
            min_writer_version=2,
            reader_features=None,
            writer_features=None,
        )

    def history(self, limit: int | None = None) -> list[dict[str, Any]]:
        return [{"version": self.current_version, "timestamp": 1700000000000}][:limit]

    def call_names(self) -> list[str]:
        return [name for name, _args, _kwargs in self.calls]


@dataclass
class OpenedTables:
    table: FakeTable
    opened: list[tuple[str, dict[str, str] | None]] = field(default_factory=list)


@pytest.fixture(autouse=True)
def _isolated_cli_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> CliPaths:
    paths = CliPaths(config_dir=tmp_path / "config", log_dir=tmp_path / "logs")
    monkeypatch.setattr(cli_main, "get_paths", lambda: paths)
    monkeypatch.delenv("DELTACTL_PROFILE", raising=False)
    return paths


@pytest.fixture
def cli_paths(_isolated_cli_paths: CliPaths) -> CliPaths:
    return _isolated_cli_paths


@pytest.fixture
def fake_table(monkeypatch: pytest.MonkeyPatch) -> OpenedTables:
    """Replace table opening with an in-memory fake and record what was opened."""
    state = OpenedTables(table=FakeTable())

    def _open_table(uri: str, storage_options: dict[str, str] | None = None) -> FakeTable:
        state.opened.append((uri, storage_options))
        state.table.table_uri = uri
        return state.table

    monkeypatch.setattr("deltactl.delta.open_table", _open_table)
    return state


@pytest.fixture
def table_dir(tmp_path: Path) -> Path:
    path = tmp_path / "table"
    path.mkdir()
    return path.resolve()
