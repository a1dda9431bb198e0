"""
deltactl - maintenance CLI for Delta Lake tables.

The partition filter parser is usable on its own:

    from deltactl import parse_filter

    parse_filter("region = 'us-east'").as_tuple()
    # ("region", "=", "'us-east'")
"""

from __future__ import annotations

from .exceptions import DeltactlError, InvalidFilterSyntax, TableUriError
from .filters import FilterCondition, LiteralKind, parse_filter, parse_filters

__version__ = "0.3.0"

__all__ = [
    "DeltactlError",
    "FilterCondition",
    "InvalidFilterSyntax",
    "LiteralKind",
    "TableUriError",
    "__version__",
    "parse_filter",
    "parse_filters",
]
