"""Utility helpers shared across calendarpicker."""

from .logging import (
    VERBOSE,
    AutoColoredFormatter,
    TimestampedFileHandler,
    apply_command_line_overrides,
    get_log_level,
    get_logger,
    setup_logging,
)

__all__ = [
    "VERBOSE",
    "AutoColoredFormatter",
    "TimestampedFileHandler",
    "apply_command_line_overrides",
    "get_log_level",
    "get_logger",
    "setup_logging",
]
