"""Command-line argument parsing for calendarpicker.

This module builds the argument parser of the console harness and turns parsed
arguments into ``PickerSettings``.
"""

import argparse
import logging
from pathlib import Path
from typing import Any

from ..config.settings import LOG_LEVELS, PICKER_CHOICES, PickerSettings

logger = logging.getLogger(__name__)

# argparse dest -> settings field, for options that override configuration
_SETTINGS_OPTIONS = {
    "picker": "picker",
    "mode": "mode",
    "format": "format",
    "locale": "locale",
    "timezone": "timezone",
    "week_start": "week_start",
}


def create_parser() -> argparse.ArgumentParser:
    """Create the command line argument parser.

    Returns:
        Configured ArgumentParser instance

    Example:
        >>> parser = create_parser()
        >>> args = parser.parse_args(["--picker", "month", "--verbose"])
        >>> args.picker
        'month'
    """
    parser = argparse.ArgumentParser(
        prog="calendarpicker",
        description="calendarpicker - keyboard driven date picker for the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                               # Pick a date
  %(prog)s --picker month                # Pick a month
  %(prog)s --show-time --value "2024-03-01 12:00:00"
  %(prog)s --picker quarter --format "%%Y Q%%q"
  %(prog)s --blur-to-cancel --verbose
        """,
    )

    parser.add_argument(
        "--version", action="version", version="%(prog)s 1.0.0", help="Show version information"
    )

    parser.add_argument(
        "--config", type=Path, metavar="FILE", help="YAML configuration file to load"
    )

    picker_group = parser.add_argument_group("picker", "Picker behaviour options")

    picker_group.add_argument(
        "--picker",
        choices=PICKER_CHOICES,
        default=None,
        help="Granularity the picker ends on (default: date)",
    )

    picker_group.add_argument(
        "--mode",
        default=None,
        help="Pin the panel mode, e.g. decade or year (unknown names fall back to the picker)",
    )

    picker_group.add_argument(
        "--show-time", action="store_true", help="Select a time of day along with the date"
    )

    picker_group.add_argument(
        "--format", default=None, help="strftime pattern of the input text (%%q is the quarter)"
    )

    picker_group.add_argument("--locale", default=None, help="Locale tag, e.g. en_US or de_DE")

    picker_group.add_argument(
        "--week-start",
        type=int,
        choices=range(7),
        default=None,
        help="First day of the week for the locale (0=Monday .. 6=Sunday)",
    )

    picker_group.add_argument("--timezone", default=None, help="IANA time zone for 'now'")

    picker_group.add_argument(
        "--value", default=None, help="Initially committed value, written in the input format"
    )

    picker_group.add_argument(
        "--blur-to-cancel",
        action="store_true",
        help="Cancel instead of closing when focus leaves the picker",
    )

    logging_group = parser.add_argument_group("logging", "Logging configuration options")

    logging_group.add_argument(
        "--log-level", choices=LOG_LEVELS, help="Set both console and file log levels"
    )

    logging_group.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    logging_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only show errors on console (sets console level to ERROR)",
    )

    logging_group.add_argument(
        "--log-dir", type=Path, help="Write a log file per session into this directory"
    )

    logging_group.add_argument(
        "--no-log-colors", action="store_true", help="Disable colored console output"
    )

    return parser


def build_settings(args: Any) -> PickerSettings:
    """Create settings from parsed arguments; given options override env and YAML.

    Raises:
        ConfigError: If an option value or the configuration file is invalid
    """
    overrides: dict[str, Any] = {
        field: getattr(args, dest)
        for dest, field in _SETTINGS_OPTIONS.items()
        if getattr(args, dest, None) is not None
    }

    if getattr(args, "show_time", False):
        overrides["show_time"] = True
    if getattr(args, "blur_to_cancel", False):
        overrides["blur_to_cancel"] = True
    if getattr(args, "config", None):
        overrides["config_file"] = args.config

    logger.debug(f"Command line overrides: {sorted(overrides)}")
    return PickerSettings(**overrides)


__all__ = [
    "build_settings",
    "create_parser",
]
