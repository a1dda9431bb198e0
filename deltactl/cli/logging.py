from __future__ import annotations

import logging
import logging.handlers
import re
from dataclasses import dataclass
from pathlib import Path

_REDACTED = "***"
_SECRET_KEY_RE = re.compile(r"secret|key|token|password|sas", re.IGNORECASE)
# Values shorter than this are never redacted.
_MIN_SECRET_LENGTH = 4
_secret_values: set[str] = set()


def is_secret_key(key: str) -> bool:
    return _SECRET_KEY_RE.search(key) is not None


def set_redaction_values(storage_options: dict[str, str]) -> None:
    """Remember values of secret-looking storage options so logs never show them."""
    for key, value in storage_options.items():
        if len(value) >= _MIN_SECRET_LENGTH and is_secret_key(key):
            _secret_values.add(value)


def clear_redaction_values() -> None:
    _secret_values.clear()


class _RedactFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not _secret_values:
            return True
        message = record.getMessage()
        redacted = message
        for secret in _secret_values:
            redacted = redacted.replace(secret, _REDACTED)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


@dataclass(frozen=True, slots=True)
class LoggingState:
    level: int
    propagate: bool
    handlers: list[logging.Handler]


def _stderr_level(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(
    *,
    verbosity: int,
    log_file: Path | None,
    enable_file: bool,
) -> LoggingState:
    root = logging.getLogger("deltactl")
    previous = LoggingState(
        level=root.level, propagate=root.propagate, handlers=list(root.handlers)
    )

    for handler in list(root.handlers):
        root.removeHandler(handler)

    redact = _RedactFilter()
    stderr_handler = logging.StreamHandler()
    stderr_handler.setLevel(_stderr_level(verbosity))
    stderr_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    stderr_handler.addFilter(redact)
    root.addHandler(stderr_handler)
    root.setLevel(logging.DEBUG)
    root.propagate = False

    if enable_file and log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
            )
        except OSError as exc:
            root.warning("cannot open log file %s: %s", log_file, exc)
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            )
            file_handler.addFilter(redact)
            root.addHandler(file_handler)

    return previous


def restore_logging(state: LoggingState) -> None:
    clear_redaction_values()
    root = logging.getLogger("deltactl")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in state.handlers:
        root.addHandler(handler)
    root.setLevel(state.level)
    root.propagate = state.propagate
