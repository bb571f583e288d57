"""
Secure Logging Module
=====================

Logging for the crypto services, with key material scrubbed before any
handler sees a record.

What gets scrubbed:
- "base64:" key values (app, signing and hashing keys)
- hex runs long enough to be a key or key-pair line
- long base64 runs (raw keys, private halves)
- assignments such as signing_key=... or secret: ...

Components log through their module logger (logging.getLogger(__name__)),
which sits under the "securecrypt" logger configured here.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final, NamedTuple, Optional, Pattern

if TYPE_CHECKING:
    from securecrypt.core.config import LoggingConfig


class Redaction(NamedTuple):
    label: str
    pattern: Pattern[str]


_REDACTIONS: Final[tuple[Redaction, ...]] = (
    Redaction("app_key", re.compile(r"base64:[A-Za-z0-9+/_\-]+={0,2}")),
    Redaction(
        "secret",
        re.compile(r"(?i)(secret|private[_-]?key|signing[_-]?key|hashing[_-]?key)\s*[=:]\s*[\"']?[^\s\"']+[\"']?"),
    ),
    Redaction("key", re.compile(r"(?i)\bkey\s*[=:]\s*[\"']?[^\s\"']+[\"']?")),
    # 40+ chars covers a base64 256-bit key
    Redaction("base64_secret", re.compile(r"[A-Za-z0-9+/]{40,}={0,2}")),
    # 32+ hex chars covers a 128-bit key
    Redaction("hex_secret", re.compile(r"(?i)(?:0x)?[a-f0-9]{32,}")),
)

REDACTED: Final[str] = "[REDACTED]"

CONSOLE_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"


def redact_key_material(text: str, extra: tuple[Pattern[str], ...] = ()) -> str:
    """Replace anything shaped like key material with a labelled marker."""
    for label, pattern in _REDACTIONS:
        text = pattern.sub(f"{label}={REDACTED}", text)
    for pattern in extra:
        text = pattern.sub(REDACTED, text)
    return text


class SecureLogFilter(logging.Filter):
    """
    Scrubs the message and string arguments of every record.

    Path arguments are left as they are. Never drops a record.
    """

    def __init__(self, name: str = "", additional_patterns: Optional[list[Pattern[str]]] = None) -> None:
        super().__init__(name)
        self._extra = tuple(additional_patterns or ())

    def _scrub(self, value: Any) -> Any:
        return redact_key_material(value, self._extra) if isinstance(value, str) else value

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self._scrub(record.msg)

        if isinstance(record.args, dict):
            record.args = {k: self._scrub(v) for k, v in record.args.items()}
        elif isinstance(record.args, tuple):
            record.args = tuple(self._scrub(arg) for arg in record.args)

        return True


class StructuredLogFormatter(logging.Formatter):
    """One JSON object per line, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class SecureRotatingFileHandler(RotatingFileHandler):
    """Rotating log file whose directory is created owner-only."""

    def __init__(self, filename: str | Path, maxBytes: int, backupCount: int) -> None:
        if ".." in Path(filename).parts:
            raise ValueError("Log path cannot contain path traversal sequences")

        path = Path(filename).resolve()
        path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        super().__init__(str(path), maxBytes=maxBytes, backupCount=backupCount, encoding="utf-8")


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    return handler


def _file_handler(path: Path, max_size: int, backup_count: int, as_json: bool) -> logging.Handler:
    handler = SecureRotatingFileHandler(path, maxBytes=max_size, backupCount=backup_count)
    if as_json:
        handler.setFormatter(StructuredLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def get_secure_logger(
    name: str,
    log_dir: Optional[Path] = None,
    level: str = "INFO",
    enable_console: bool = True,
    enable_file: bool = False,
    enable_json: bool = False,
    max_file_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Get a logger whose handlers scrub key material.

    A logger that already has handlers is returned unchanged.

    Args:
        name: Logger name
        log_dir: Directory for the rotating log file
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        enable_console: Log to stderr
        enable_file: Log to <log_dir>/<name>.log
        enable_json: Write the file as JSON lines
        max_file_size: Bytes before the file rotates
        backup_count: Rotated files to keep
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(level.upper())

    handlers: list[logging.Handler] = []
    if enable_console:
        handlers.append(_console_handler())
    if enable_file and log_dir:
        log_file = Path(log_dir) / f"{name.replace('.', '_')}.log"
        handlers.append(_file_handler(log_file, max_file_size, backup_count, enable_json))

    scrubber = SecureLogFilter()
    for handler in handlers:
        handler.addFilter(scrubber)
        logger.addHandler(handler)

    # Records stop here so they are never emitted unscrubbed by a parent
    logger.propagate = False
    return logger


def configure_logging(settings: LoggingConfig, name: str = "securecrypt") -> logging.Logger:
    """(Re)configure the package logger from a LoggingConfig section."""
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    return get_secure_logger(
        name,
        log_dir=settings.log_dir,
        level=settings.level,
        enable_console=settings.enable_console,
        enable_file=settings.enable_file,
        enable_json=settings.enable_json,
        max_file_size=settings.max_file_size_bytes,
        backup_count=settings.backup_count,
    )
