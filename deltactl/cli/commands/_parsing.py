from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import timedelta

from ..errors import CLIError

_NANOS_PER_SECOND = 1_000_000_000

# humantime units, case-sensitive: "m" is minutes and "M" is months.
_DURATION_UNITS: dict[str, int] = {}
for _names, _nanos in (
    (("nsec", "ns"), 1),
    (("usec", "us"), 1_000),
    (("millis", "msec", "ms"), 1_000_000),
    (("seconds", "second", "secs", "sec", "s"), _NANOS_PER_SECOND),
    (("minutes", "minute", "mins", "min", "m"), 60 * _NANOS_PER_SECOND),
    (("hours", "hour", "hrs", "hr", "h"), 3_600 * _NANOS_PER_SECOND),
    (("days", "day", "d"), 86_400 * _NANOS_PER_SECOND),
    (("weeks", "week", "w"), 604_800 * _NANOS_PER_SECOND),
    (("months", "month", "M"), 2_630_016 * _NANOS_PER_SECOND),
    (("years", "year", "y"), 31_557_600 * _NANOS_PER_SECOND),
):
    for _name in _names:
        _DURATION_UNITS[_name] = _nanos

_DURATION_PART_RE = re.compile(r"\s*([0-9]+)\s*([A-Za-z]+)")


def parse_key_value(value: str) -> tuple[str, str]:
    """Split ``KEY=value`` at the first ``=``."""
    key, sep, rest = value.partition("=")
    if not sep:
        raise CLIError.usage(
            f"invalid KEY=value: no `=` found in `{value}`",
        )
    return key, rest


def parse_key_values(values: Iterable[str]) -> list[tuple[str, str]]:
    return [parse_key_value(v) for v in values]


def parse_duration(value: str, *, label: str) -> timedelta:
    """
    Parse a human-friendly duration such as ``7days``, ``168h`` or ``1h 30m``.

    Groups of ``<number><unit>`` are summed; whitespace between groups is
    optional. Unit names are case-sensitive: ``2M`` is two months and ``1H``
    is rejected. Precision below a microsecond is truncated.
    """
    text = value.strip()
    total_nanos = 0
    pos = 0
    matched = False
    while pos < len(text):
        m = _DURATION_PART_RE.match(text, pos)
        unit = _DURATION_UNITS.get(m.group(2)) if m else None
        if m is None or unit is None:
            raise CLIError.usage(
                f"Invalid {label} duration: {value}",
                hint="Use a number followed by a unit, e.g. 30s, 2min, 168h, 7days or 2M.",
            )
        total_nanos += int(m.group(1)) * unit
        pos = m.end()
        matched = True

    if not matched:
        raise CLIError.usage(
            f"Invalid {label} duration: {value!r} is empty",
        )
    try:
        return timedelta(microseconds=total_nanos // 1_000)
    except OverflowError:
        raise CLIError.usage(f"Invalid {label} duration: {value} is too large") from None
