"""Errors reported to the user through the command result envelope."""

from __future__ import annotations

from typing import Any

from deltactl.exceptions import DeltactlError

EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_NOT_FOUND = 4


class CLIError(DeltactlError):
    """
    A command failure rendered as ``<Title>: <message>`` instead of a traceback.

    ``error_type`` selects the title and ends up in the JSON envelope's
    ``error.type``; ``hint`` is printed on its own line in table output.
    """

    def __init__(
        self,
        message: str,
        *,
        exit_code: int = EXIT_FAILURE,
        error_type: str = "error",
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code
        self.error_type = error_type
        self.hint = hint
        self.details = details

    @classmethod
    def usage(
        cls, message: str, *, hint: str | None = None, details: dict[str, Any] | None = None
    ) -> CLIError:
        """A bad argument or option value."""
        return cls(
            message, exit_code=EXIT_USAGE, error_type="usage_error", hint=hint, details=details
        )

    @classmethod
    def config(
        cls, message: str, *, hint: str | None = None, details: dict[str, Any] | None = None
    ) -> CLIError:
        """A broken config file or an unknown storage profile."""
        return cls(
            message, exit_code=EXIT_USAGE, error_type="config_error", hint=hint, details=details
        )

    def __str__(self) -> str:
        return self.message
