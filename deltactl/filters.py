"""
Partition filter parser.

Turns a single textual condition such as ``id > 200`` or
``region = 'us-east'`` into a :class:`FilterCondition` triple that can later
scope a table operation to a subset of partitions.

Grammar::

    condition := SPACE* column SPACE* operator SPACE* literal
    column    := [A-Za-z_] [A-Za-z0-9_]*
    operator  := "=" | "!=" | ">=" | ">" | "<=" | "<" | "in" | "not in"
    literal   := float | integer | "'" [A-Za-z0-9_.-]+ "'"

SPACE is a space or a tab. ``in`` and ``not in`` match in any case. Input left
over after the literal is ignored.

Example:
    from deltactl.filters import parse_filter

    cond = parse_filter("price <= 19.99")
    column, op, value = cond   # ("price", "<=", "19.99")
    cond.kind                  # LiteralKind.FLOAT
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum

from .exceptions import InvalidFilterSyntax

# Order matters: first match wins, so ">=" and "<=" must be tried before
# ">" and "<".
OPERATORS: tuple[str, ...] = ("=", "!=", ">=", ">", "<=", "<", "in", "not in")
_CASELESS_OPERATORS = frozenset(["in", "not in"])

_SPACES = " \t"

_COLUMN_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_MANTISSA_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")
_EXPONENT_MARK_RE = re.compile(r"[eE][+-]?")
_DIGITS_RE = re.compile(r"[0-9]+")
_QUOTED_RE = re.compile(r"'[A-Za-z0-9_.\-]+'")

Match = tuple[str, str]
"""A sub-parser result: (matched text, remaining input)."""


class GrammarMismatch(Exception):
    """A sub-parser found no match at the current position."""


class _Committed(GrammarMismatch):
    """
    Mismatch after a point of no return.

    Raised when a float has an exponent marker but no exponent digits; the
    remaining literal alternatives are not tried.
    """


class LiteralKind(Enum):
    """Lexical type of a literal; the target column's type is never consulted."""

    FLOAT = "float"
    INTEGER = "integer"
    STRING = "string"

    @classmethod
    def of(cls, literal: str) -> LiteralKind:
        if literal.startswith("'"):
            return cls.STRING
        if _DIGITS_RE.fullmatch(literal):
            return cls.INTEGER
        return cls.FLOAT


@dataclass(frozen=True)
class FilterCondition:
    """A parsed ``column operator literal`` condition."""

    column: str
    operator: str
    value: str

    @property
    def kind(self) -> LiteralKind:
        return LiteralKind.of(self.value)

    def as_tuple(self) -> tuple[str, str, str]:
        return (self.column, self.operator, self.value)

    def __iter__(self) -> Iterator[str]:
        return iter(self.as_tuple())

    def to_string(self) -> str:
        return f"{self.column} {self.operator} {self.value}"

    def __str__(self) -> str:
        return self.to_string()


def _skip_spaces(text: str) -> str:
    return text.lstrip(_SPACES)


def column_name(text: str) -> Match:
    """Match the longest identifier at the start of ``text``."""
    m = _COLUMN_RE.match(text)
    if m is None:
        raise GrammarMismatch
    return m.group(), text[m.end() :]


def filter_operator(text: str) -> Match:
    """
    Match one operator, skipping spaces on both sides.

    The returned token keeps the input's casing (``IN`` stays ``IN``).
    """
    rest = _skip_spaces(text)
    for op in OPERATORS:
        head = rest[: len(op)]
        if head == op or (
            op in _CASELESS_OPERATORS and head.isascii() and head.lower() == op
        ):
            return head, _skip_spaces(rest[len(op) :])
    raise GrammarMismatch


def _float_literal(text: str) -> Match:
    m = _MANTISSA_RE.match(text)
    if m is None:
        raise GrammarMismatch
    end = m.end()
    mark = _EXPONENT_MARK_RE.match(text, end)
    if mark is not None:
        exponent = _DIGITS_RE.match(text, mark.end())
        if exponent is None:
            raise _Committed
        end = exponent.end()
    return text[:end], text[end:]


def _integer_literal(text: str) -> Match:
    m = _DIGITS_RE.match(text)
    if m is None:
        raise GrammarMismatch
    return m.group(), text[m.end() :]


def _string_literal(text: str) -> Match:
    # Quotes are kept: "'2021-01-01'" matches as "'2021-01-01'".
    m = _QUOTED_RE.match(text)
    if m is None:
        raise GrammarMismatch
    return m.group(), text[m.end() :]


_LITERALS: tuple[Callable[[str], Match], ...] = (
    _float_literal,  # 42.42, tried first so "1.42" is not read as "1"
    _integer_literal,  # 123
    _string_literal,  # 'some_string'
)


def filter_field(text: str) -> Match:
    """Match a float, integer or single-quoted string literal."""
    for alternative in _LITERALS:
        try:
            return alternative(text)
        except _Committed:
            raise
        except GrammarMismatch:
            continue
    raise GrammarMismatch


def parse_filter(text: str) -> FilterCondition:
    """
    Parse a partition filter such as ``id > 200``.

    Raises:
        InvalidFilterSyntax: If any part of the condition fails to match.
    """
    try:
        column, rest = column_name(_skip_spaces(text))
        operator, rest = filter_operator(rest)
        value, _rest = filter_field(_skip_spaces(rest))
    except GrammarMismatch:
        raise InvalidFilterSyntax(text) from None
    return FilterCondition(column, operator, value)


def parse_filters(texts: Iterable[str]) -> list[FilterCondition]:
    """Parse several conditions, failing on the first invalid one."""
    return [parse_filter(text) for text in texts]
