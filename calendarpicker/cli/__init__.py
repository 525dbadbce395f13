"""CLI module for calendarpicker: argument parsing and the console harness."""

from typing import Optional

from ..config.exceptions import ConfigError
from ..utils.logging import apply_command_line_overrides, setup_logging
from .console import ConsoleSession, create_picker, run_console_mode
from .parser import build_settings, create_parser


async def main_entry(argv: Optional[list[str]] = None) -> int:
    """Main entry point with argument parsing.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        settings = build_settings(args)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1

    apply_command_line_overrides(settings, args)
    setup_logging(settings)

    return await run_console_mode(settings, args)


__all__ = [
    "ConsoleSession",
    "build_settings",
    "create_parser",
    "create_picker",
    "main_entry",
    "run_console_mode",
]
