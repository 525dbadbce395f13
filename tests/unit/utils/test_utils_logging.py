"""Tests for calendarpicker.utils.logging module."""

import logging
from argparse import Namespace
from typing import Any
from unittest.mock import patch

import pytest

from calendarpicker.config.settings import LoggingSettings
from calendarpicker.utils.logging import (
    VERBOSE,
    AutoColoredFormatter,
    TimestampedFileHandler,
    apply_command_line_overrides,
    get_log_level,
    get_logger,
    setup_logging,
)


class TestVerboseLogging:
    """Test VERBOSE custom log level functionality."""

    def test_verbose_level_value(self) -> None:
        """Test VERBOSE level sits between DEBUG and INFO."""
        assert VERBOSE == 15
        assert logging.getLevelName(VERBOSE) == "VERBOSE"

    def test_verbose_method_functionality(self) -> None:
        """Test verbose method logs at VERBOSE level."""
        logger = logging.getLogger("test_picker_verbose")
        logger.setLevel(VERBOSE)

        with patch.object(logger, "_log") as mock_log:
            logger.verbose("panel bound", "arg1")  # type: ignore[attr-defined]

            mock_log.assert_called_once_with(VERBOSE, "panel bound", ("arg1",))

    def test_verbose_method_respects_level(self) -> None:
        """Test verbose method respects logger level."""
        logger = logging.getLogger("test_picker_verbose_level")
        logger.setLevel(logging.INFO)

        with patch.object(logger, "_log") as mock_log:
            logger.verbose("ignored")  # type: ignore[attr-defined]

            mock_log.assert_not_called()


class TestGetLogLevel:
    """Test get_log_level function."""

    def test_standard_and_custom_levels(self) -> None:
        assert get_log_level("DEBUG") == logging.DEBUG
        assert get_log_level("warning") == logging.WARNING
        assert get_log_level("verbose") == VERBOSE

    def test_unknown_level_raises(self) -> None:
        with pytest.raises(AttributeError):
            get_log_level("LOUD")


class TestAutoColoredFormatter:
    """Test AutoColoredFormatter class."""

    def test_colors_disabled(self) -> None:
        formatter = AutoColoredFormatter("%(levelname)s %(message)s", enable_colors=False)
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)

        assert formatter.color_mode == "none"
        assert formatter.format(record) == "INFO hello"

    @patch("calendarpicker.utils.logging.sys.stderr")
    def test_color_detection_no_tty(self, mock_stderr: Any) -> None:
        """Test color detection when stderr is not a TTY."""
        mock_stderr.isatty.return_value = False

        assert AutoColoredFormatter("%(message)s").color_mode == "none"

    @patch("calendarpicker.utils.logging.sys.stderr")
    @patch("calendarpicker.utils.logging.os.environ", {"TERM": "xterm-256color"})
    def test_color_detection_truecolor(self, mock_stderr: Any) -> None:
        mock_stderr.isatty.return_value = True

        assert AutoColoredFormatter("%(message)s").color_mode == "truecolor"

    @patch("calendarpicker.utils.logging.sys.stderr")
    @patch("calendarpicker.utils.logging.os.environ", {"TERM": "dumb"})
    def test_color_detection_dumb_terminal(self, mock_stderr: Any) -> None:
        mock_stderr.isatty.return_value = True

        assert AutoColoredFormatter("%(message)s").color_mode == "none"

    def test_level_name_is_colored(self) -> None:
        formatter = AutoColoredFormatter("%(levelname)s %(message)s", enable_colors=False)
        formatter.color_mode = "basic"
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "boom", None, None)

        assert formatter.format(record) == "\033[31mERROR\033[0m boom"


class TestTimestampedFileHandler:
    """Test per-session log files."""

    def test_creates_file_in_directory(self, tmp_path) -> None:
        handler = TimestampedFileHandler(tmp_path / "logs", prefix="session")
        try:
            assert handler.baseFilename.startswith(str(tmp_path / "logs" / "session_"))
            assert handler.baseFilename.endswith(".log")
        finally:
            handler.close()

    def test_cleanup_keeps_newest_files(self, tmp_path) -> None:
        for index in range(4):
            (tmp_path / f"session_2024010{index}_000000.log").write_text("old")

        handler = TimestampedFileHandler(tmp_path, prefix="session", max_files=2)
        handler.close()

        assert len(list(tmp_path.glob("session_*.log"))) == 2


class TestSetupLogging:
    """Test setup_logging function."""

    def test_console_handler(self, settings_factory) -> None:
        settings = settings_factory(logging=LoggingSettings(console_level="WARNING"))

        logger = setup_logging(settings)

        assert logger.name == "calendarpicker"
        assert logger.propagate is False
        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.WARNING
        assert isinstance(logger.handlers[0].formatter, AutoColoredFormatter)

    def test_file_handler_defaults_to_config_dir(self, settings_factory, tmp_path) -> None:
        settings = settings_factory(
            config_dir=tmp_path / "cfg",
            logging=LoggingSettings(console_enabled=False, file_enabled=True, file_level="VERBOSE"),
        )

        logger = setup_logging(settings)

        assert len(logger.handlers) == 1
        handler = logger.handlers[0]
        assert isinstance(handler, TimestampedFileHandler)
        assert handler.log_dir == tmp_path / "cfg" / "logs"
        assert handler.level == VERBOSE

    def test_file_handler_custom_directory(self, settings_factory, tmp_path) -> None:
        settings = settings_factory(
            logging=LoggingSettings(file_enabled=True, file_directory=str(tmp_path / "custom"))
        )

        logger = setup_logging(settings)

        file_handlers = [h for h in logger.handlers if isinstance(h, TimestampedFileHandler)]
        assert file_handlers[0].log_dir == tmp_path / "custom"

    def test_replaces_existing_handlers(self, settings_factory) -> None:
        settings = settings_factory()

        setup_logging(settings)
        logger = setup_logging(settings)

        assert len(logger.handlers) == 1

    def test_third_party_level(self, settings_factory) -> None:
        settings = settings_factory(logging=LoggingSettings(third_party_level="ERROR"))

        setup_logging(settings)

        assert logging.getLogger("dateutil").level == logging.ERROR


class TestGetLogger:
    def test_namespaced(self) -> None:
        assert get_logger("cli").name == "calendarpicker.cli"


class TestApplyCommandLineOverrides:
    """Test command-line overrides of logging settings."""

    def _args(self, **kwargs: Any) -> Namespace:
        defaults = {
            "log_level": None,
            "verbose": False,
            "quiet": False,
            "log_dir": None,
            "no_log_colors": False,
        }
        defaults.update(kwargs)
        return Namespace(**defaults)

    def test_no_overrides(self, settings) -> None:
        result = apply_command_line_overrides(settings, self._args())

        assert result is settings
        assert settings.logging.console_level == "INFO"

    def test_log_level(self, settings) -> None:
        apply_command_line_overrides(settings, self._args(log_level="debug"))

        assert settings.logging.console_level == "DEBUG"
        assert settings.logging.file_level == "DEBUG"

    def test_verbose_wins_over_log_level(self, settings) -> None:
        apply_command_line_overrides(settings, self._args(log_level="ERROR", verbose=True))

        assert settings.logging.console_level == "VERBOSE"

    def test_quiet(self, settings) -> None:
        apply_command_line_overrides(settings, self._args(quiet=True))

        assert settings.logging.console_level == "ERROR"

    def test_log_dir_enables_file_logging(self, settings, tmp_path) -> None:
        apply_command_line_overrides(settings, self._args(log_dir=str(tmp_path)))

        assert settings.logging.file_enabled is True
        assert settings.logging.file_directory == str(tmp_path)

    def test_no_log_colors(self, settings) -> None:
        apply_command_line_overrides(settings, self._args(no_log_colors=True))

        assert settings.logging.console_colors is False

    def test_missing_attributes_are_ignored(self, settings) -> None:
        apply_command_line_overrides(settings, Namespace())

        assert settings.logging.console_level == "INFO"
