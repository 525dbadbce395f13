"""Tests for command-line argument parsing and settings construction."""

import argparse
from pathlib import Path

import pytest

from calendarpicker.cli.parser import build_settings, create_parser
from calendarpicker.config.exceptions import ConfigValidationError


@pytest.fixture(autouse=True)
def isolated_home(monkeypatch, tmp_path):
    """Keep the user's configuration directory out of parsed settings."""
    monkeypatch.setenv("HOME", str(tmp_path))


class TestCreateParser:
    """Test create_parser function."""

    def test_create_parser_returns_argument_parser(self):
        parser = create_parser()

        assert isinstance(parser, argparse.ArgumentParser)
        assert parser.prog == "calendarpicker"

    def test_parser_defaults(self):
        args = create_parser().parse_args([])

        assert args.picker is None
        assert args.mode is None
        assert args.show_time is False
        assert args.blur_to_cancel is False
        assert args.value is None
        assert args.verbose is False
        assert args.quiet is False
        assert args.config is None

    def test_parser_picker_arguments(self):
        args = create_parser().parse_args(
            [
                "--picker",
                "quarter",
                "--mode",
                "year",
                "--format",
                "%Y Q%q",
                "--locale",
                "de_DE",
                "--week-start",
                "0",
                "--timezone",
                "Europe/Berlin",
                "--value",
                "2024 Q2",
                "--blur-to-cancel",
            ]
        )

        assert args.picker == "quarter"
        assert args.mode == "year"
        assert args.format == "%Y Q%q"
        assert args.locale == "de_DE"
        assert args.week_start == 0
        assert args.timezone == "Europe/Berlin"
        assert args.value == "2024 Q2"
        assert args.blur_to_cancel is True

    def test_parser_logging_arguments(self, tmp_path):
        args = create_parser().parse_args(
            ["--log-level", "DEBUG", "-v", "-q", "--log-dir", str(tmp_path), "--no-log-colors"]
        )

        assert args.log_level == "DEBUG"
        assert args.verbose is True
        assert args.quiet is True
        assert args.log_dir == tmp_path
        assert args.no_log_colors is True

    @pytest.mark.parametrize(
        "argv",
        [
            ["--picker", "fortnight"],
            ["--week-start", "7"],
            ["--log-level", "LOUD"],
        ],
    )
    def test_parser_invalid_choice_raises_error(self, argv):
        with pytest.raises(SystemExit):
            create_parser().parse_args(argv)

    def test_parser_version_argument(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert "calendarpicker 1.0.0" in capsys.readouterr().out


class TestBuildSettings:
    """Test build_settings function."""

    def test_defaults(self):
        settings = build_settings(create_parser().parse_args([]))

        assert settings.picker == "date"
        assert settings.show_time is False
        assert settings.blur_to_cancel is False

    def test_options_override_settings(self):
        args = create_parser().parse_args(
            ["--picker", "week", "--locale", "de", "--week-start", "0", "--blur-to-cancel"]
        )

        settings = build_settings(args)

        assert settings.picker == "week"
        assert settings.locale == "de"
        assert settings.week_start == 0
        assert settings.blur_to_cancel is True

    def test_show_time(self):
        settings = build_settings(create_parser().parse_args(["--show-time"]))

        assert settings.show_time is True
        assert settings.effective_format() == "%Y-%m-%d %H:%M:%S"

    def test_config_file(self, tmp_path):
        config = tmp_path / "picker.yaml"
        config.write_text("picker:\n  picker: year\n  locale: fr\n", encoding="utf-8")

        args = create_parser().parse_args(["--config", str(config), "--locale", "it"])
        settings = build_settings(args)

        assert settings.config_file == Path(config)
        assert settings.picker == "year"
        assert settings.locale == "it"

    def test_invalid_timezone_raises_config_error(self):
        args = create_parser().parse_args(["--timezone", "Nowhere/Special"])

        with pytest.raises(ConfigValidationError):
            build_settings(args)
