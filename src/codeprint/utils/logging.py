"""Logging setup for the codeprint CLI.

Three output modes:
- Human mode: [LEVEL] message (colored if TTY)
- Verbose mode: [LEVEL][HH:MM:SS] message
- CI/JSON mode: {"level":"...","ts":"...","msg":"...", ...}

Log records go to stderr so that command output on stdout (profiles,
fingerprints, generated code) stays machine-readable.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TextIO

ROOT_LOGGER = "codeprint"


class LogMode(Enum):
    """Logging output mode."""

    HUMAN = "human"
    VERBOSE = "verbose"
    JSON = "json"


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    GRAY = "\033[90m"


LEVEL_COLORS = {
    logging.DEBUG: Colors.GRAY,
    logging.INFO: Colors.GREEN,
    logging.WARNING: Colors.YELLOW,
    logging.ERROR: Colors.RED,
    logging.CRITICAL: Colors.RED,
}


def _is_tty(stream: TextIO | None) -> bool:
    """Check if the stream is a TTY (supports colors)."""
    return stream is not None and hasattr(stream, "isatty") and stream.isatty()


class HumanFormatter(logging.Formatter):
    """Formats records as ``[LEVEL] message``, optionally with a timestamp."""

    def __init__(self, use_colors: bool = False, show_time: bool = False) -> None:
        super().__init__()
        self.use_colors = use_colors
        self.show_time = show_time

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record."""
        tag = f"[{record.levelname}]"
        if self.use_colors:
            tag = f"{LEVEL_COLORS.get(record.levelno, Colors.RESET)}{tag}{Colors.RESET}"
        if self.show_time:
            tag += datetime.fromtimestamp(record.created).strftime("[%H:%M:%S]")

        message = f"{tag} {record.getMessage()}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


class VerboseFormatter(HumanFormatter):
    """Human format with an ``[HH:MM:SS]`` timestamp."""

    def __init__(self, use_colors: bool = False) -> None:
        super().__init__(use_colors=use_colors, show_time=True)


class JSONFormatter(logging.Formatter):
    """Formatter for JSON lines output (machine-readable).

    Format: {"level":"INFO","ts":"2026-01-31T19:45:23+00:00","msg":"...","logger":"..."}
    Fields passed to ``CodeprintLogger.structured`` are merged into the object.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_entry: dict[str, Any] = {
            "level": record.levelname,
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "msg": record.getMessage(),
            "logger": record.name,
        }

        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            log_entry.update(extra_data)
        if record.exc_info:
            log_entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class CodeprintLogger(logging.Logger):
    """Logger with structured logging support."""

    def structured(self, level: int, msg: str, **fields: Any) -> None:
        """Log a message with additional structured fields.

        Args:
            level: Log level
            msg: Log message
            **fields: Additional data included in JSON output
        """
        if self.isEnabledFor(level):
            self.log(level, msg, extra={"extra_data": fields}, stacklevel=2)


logging.setLoggerClass(CodeprintLogger)


def get_logger(name: str = ROOT_LOGGER) -> CodeprintLogger:
    """Get a codeprint logger instance."""
    return logging.getLogger(name)  # type: ignore[return-value]


def setup_logging(
    mode: LogMode = LogMode.HUMAN,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> None:
    """Configure the ``codeprint`` logger hierarchy.

    Args:
        mode: Output mode (human, verbose, json)
        level: Minimum log level
        stream: Output stream (default: stderr)
    """
    stream = stream or sys.stderr
    use_colors = _is_tty(stream)

    if mode == LogMode.JSON:
        formatter: logging.Formatter = JSONFormatter()
    elif mode == LogMode.VERBOSE:
        formatter = VerboseFormatter(use_colors=use_colors)
    else:
        formatter = HumanFormatter(use_colors=use_colors)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(handler)


def configure_from_cli(
    verbose: bool = False,
    quiet: bool = False,
    ci: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure logging based on CLI flags.

    Args:
        verbose: Enable verbose mode with timestamps and debug messages
        quiet: Warnings and errors only (wins over verbose)
        ci: Enable JSON output for CI/CD
        stream: Output stream (default: stderr)
    """
    if ci:
        mode = LogMode.JSON
    elif verbose:
        mode = LogMode.VERBOSE
    else:
        mode = LogMode.HUMAN

    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    setup_logging(mode=mode, level=level, stream=stream)
