"""codeprint utilities."""

from codeprint.utils.logging import (
    CodeprintLogger,
    LogMode,
    configure_from_cli,
    get_logger,
    setup_logging,
)

__all__ = [
    "CodeprintLogger",
    "LogMode",
    "configure_from_cli",
    "get_logger",
    "setup_logging",
]
