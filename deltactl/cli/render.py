from __future__ import annotations

import json
import re
import sys
from dataclasses import dataclass
from typing import Any, cast

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .results import CommandResult


@dataclass(frozen=True, slots=True)
class RenderSettings:
    output: str  # "table" | "json"
    quiet: bool
    verbosity: int


def _error_title(error_type: str) -> str:
    normalized = (error_type or "").strip()
    mapping = {
        "usage_error": "Usage error",
        "config_error": "Configuration error",
        "not_found": "Not found",
        "commit_failed": "Commit failed",
        "table_error": "Table error",
        "internal_error": "Internal error",
    }
    return mapping.get(normalized, "Error")


def _render_error_details(
    *,
    stderr: Console,
    command: str,
    error_type: str,
    hint: str | None,
    details: dict[str, Any] | None,
    settings: RenderSettings,
) -> None:
    if settings.quiet:
        return

    if hint:
        stderr.print(f"Hint: {hint}", markup=False, highlight=False)
    elif error_type == "usage_error":
        stderr.print(f"Hint: run `deltactl {command} --help`")

    if details and settings.verbosity >= 1:
        stderr.print(Panel.fit(Text(json.dumps(details, ensure_ascii=False, indent=2))))


_CAMEL_BREAK_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _humanize_title(value: str) -> str:
    raw = (value or "").strip()
    if not raw:
        return ""
    raw = raw.replace("_", " ").replace("-", " ").strip()
    raw = _CAMEL_BREAK_RE.sub(" ", raw)
    raw = " ".join(raw.split())
    return raw[:1].upper() + raw[1:]


def _format_scalar_value(*, key: str | None, value: Any) -> str:
    if value is None:
        return ""
    key_lower = (key or "").lower()
    if isinstance(value, list):
        if all(isinstance(v, (str, int, float)) for v in value):
            return ", ".join(str(v) for v in value)
        return f"list ({len(value):,} items)"
    if isinstance(value, dict):
        return f"object ({len(value):,} keys)"
    if isinstance(value, bool):
        return str(value)
    # Versions are identifiers, not quantities.
    if isinstance(value, int) and "version" not in key_lower:
        return f"{value:,}"
    return str(value)


def _kv_table(obj: dict[str, Any]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("field")
    table.add_column("value")
    for k, v in obj.items():
        table.add_row(Text(str(k)), Text(_format_scalar_value(key=str(k), value=v)))
    return table


def _table_from_rows(rows: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, header_style="bold")
    if not rows:
        table.add_column("result")
        table.add_row("No results")
        return table
    columns = list(rows[0].keys())
    for col in columns:
        table.add_column(col)
    for row in rows:
        table.add_row(*[Text(_format_scalar_value(key=c, value=row.get(c))) for c in columns])
    return table


def _render_section(*, title: str | None, value: Any) -> Any:
    renderables: list[Any] = []
    if title:
        renderables.append(Text(_humanize_title(title), style="bold"))

    if isinstance(value, list) and value and all(isinstance(x, dict) for x in value):
        renderables.append(_table_from_rows(cast(list[dict[str, Any]], value)))
    elif isinstance(value, list):
        renderables.append(Text("\n".join(str(x) for x in value) if value else "(none)"))
    elif isinstance(value, dict):
        scalars = {k: v for k, v in value.items() if not isinstance(v, dict)}
        nested = [(k, v) for k, v in value.items() if isinstance(v, dict)]
        if scalars:
            renderables.append(_kv_table(scalars))
        for key, sub in nested:
            renderables.append(_render_section(title=str(key), value=sub))
    else:
        renderables.append(Text(str(value)))

    return Group(*renderables) if len(renderables) > 1 else renderables[0]


def _schema_rows(fields: list[Any]) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for f in fields:
        if not isinstance(f, dict):
            continue
        field_type = f.get("type")
        if not isinstance(field_type, str):
            # Struct, array and map types are nested objects.
            field_type = json.dumps(field_type)
        rows.append({"name": f.get("name"), "type": field_type, "nullable": f.get("nullable")})
    return rows


def render_result(result: CommandResult, *, settings: RenderSettings) -> int:
    stdout = Console(file=sys.stdout, force_terminal=False)
    stderr = Console(file=sys.stderr, force_terminal=False)

    if settings.output == "json":
        payload = result.model_dump(by_alias=True, mode="json")
        sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")
        return 0

    if not result.ok:
        if result.error is not None:
            title = _error_title(result.error.type)
            stderr.print(f"{title}: {result.error.message}", markup=False, highlight=False)
            _render_error_details(
                stderr=stderr,
                command=result.command,
                error_type=result.error.type,
                hint=result.error.hint,
                details=result.error.details,
                settings=settings,
            )
        else:
            stderr.print("Error")
        return 0

    renderable: Any
    if result.command == "version" and isinstance(result.data, dict):
        renderable = Text(result.data.get("version", ""), style="bold")
    elif result.command == "config path" and isinstance(result.data, dict):
        renderable = Text(str(result.data.get("path", "")))
    elif result.command == "config init" and isinstance(result.data, dict):
        renderable = Panel.fit(Text(f"Initialized config at {result.data.get('path', '')}"))
    elif result.command == "config show" and isinstance(result.data, dict):
        renderable = _table_from_rows(result.data.get("profiles") or [])
    elif result.command == "schema" and isinstance(result.data, dict):
        fields = result.data.get("fields")
        if isinstance(fields, list):
            renderable = _table_from_rows(_schema_rows(fields))
        else:
            renderable = _render_section(title=None, value=result.data)
    elif result.data is None:
        renderable = Panel.fit(Text("OK"))
    else:
        renderable = _render_section(title=None, value=result.data)

    stdout.print(renderable)
    return 0
