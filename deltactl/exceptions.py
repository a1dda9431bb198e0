"""Exceptions raised by deltactl."""

from __future__ import annotations


class DeltactlError(Exception):
    """Base class for deltactl errors."""


class InvalidFilterSyntax(DeltactlError, ValueError):
    """
    A partition filter could not be parsed.

    The message always repeats the full input; no position or
    expected-token information is kept.
    """

    def __init__(self, text: str) -> None:
        super().__init__(f"invalid partition filter: {text}")
        self.text = text


class TableUriError(DeltactlError):
    """A table location could not be resolved to a usable URI."""

    def __init__(self, location: str, reason: str) -> None:
        super().__init__(f"invalid table URI {location!r}: {reason}")
        self.location = location
        self.reason = reason
