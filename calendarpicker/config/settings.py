"""Settings management using Pydantic for type validation and configuration."""

import logging
import os
from pathlib import Path
from typing import Any, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import (
    BaseModel,
    Field,
    PrivateAttr,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigFileError, ConfigValidationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "CALENDARPICKER_"

# Granularities a picker may end on
PICKER_CHOICES = ("date", "week", "month", "quarter", "year", "time")

LOG_LEVELS = ("DEBUG", "VERBOSE", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_TIME_FORMAT = "%H:%M:%S"
DEFAULT_12_HOUR_TIME_FORMAT = "%I:%M:%S %p"

DEFAULT_FORMATS = {
    "date": "%Y-%m-%d",
    "week": "%G-W%V",
    "month": "%Y-%m",
    "quarter": "%Y-Q%q",
    "year": "%Y",
    "time": DEFAULT_TIME_FORMAT,
}


def _validate_level(value: str, field_name: str) -> str:
    level = value.upper()
    if level not in LOG_LEVELS:
        raise ConfigValidationError(
            f"Invalid log level, expected one of {', '.join(LOG_LEVELS)}",
            field_name=field_name,
            field_value=value,
        )
    return level


def _as_config_error(error: ValidationError) -> ConfigValidationError:
    """Translate a pydantic validation failure into a ``ConfigValidationError``."""
    first = error.errors()[0]
    field_name = ".".join(str(part) for part in first.get("loc", ()))
    return ConfigValidationError(
        first.get("msg", "Invalid configuration value"),
        field_name=field_name or None,
        field_value=first.get("input"),
    )


class ShowTimeSettings(BaseModel):
    """Time-of-day sub-configuration; its presence turns date pickers into datetime ones.

    Column visibility left as ``None`` is derived from ``format``.
    """

    format: Optional[str] = Field(default=None, description="Time part strftime pattern")
    show_hour: Optional[bool] = Field(default=None, description="Show the hour column")
    show_minute: Optional[bool] = Field(default=None, description="Show the minute column")
    show_second: Optional[bool] = Field(default=None, description="Show the second column")
    hour_step: int = Field(default=1, ge=1, le=23, description="Hour column step")
    minute_step: int = Field(default=1, ge=1, le=59, description="Minute column step")
    second_step: int = Field(default=1, ge=1, le=59, description="Second column step")
    use_12_hours: bool = Field(default=False, description="Display a 12-hour clock")

    @model_validator(mode="after")
    def warn_uneven_steps(self) -> "ShowTimeSettings":
        """Warn when a step does not divide its column evenly."""
        for name, limit in (("hour_step", 24), ("minute_step", 60), ("second_step", 60)):
            step = getattr(self, name)
            if limit % step:
                logger.warning(f"{name}={step} does not divide {limit}; the last cell is uneven")
        return self

    @property
    def time_format(self) -> str:
        if self.format:
            return self.format
        return DEFAULT_12_HOUR_TIME_FORMAT if self.use_12_hours else DEFAULT_TIME_FORMAT

    def visible_columns(self) -> list[str]:
        """Names of the visible time columns, in display order."""
        pattern = self.time_format
        flags = {
            "hour": self.show_hour,
            "minute": self.show_minute,
            "second": self.show_second,
        }
        derived = {
            "hour": "%H" in pattern or "%I" in pattern,
            "minute": "%M" in pattern,
            "second": "%S" in pattern,
        }
        columns = [
            name for name, flag in flags.items() if (derived[name] if flag is None else flag)
        ]
        columns = columns or ["hour"]
        if self.use_12_hours and "hour" in columns:
            columns.append("meridiem")
        return columns

    def step_for(self, column: str) -> int:
        return int(getattr(self, f"{column}_step"))


def time_settings_from(show_time: Any) -> ShowTimeSettings:
    """Normalize a ``show_time`` option (bool, dict or model) into ``ShowTimeSettings``."""
    if isinstance(show_time, ShowTimeSettings):
        return show_time
    if isinstance(show_time, dict):
        return ShowTimeSettings(**show_time)
    return ShowTimeSettings()


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    console_enabled: bool = Field(default=True, description="Enable console logging")
    console_level: str = Field(
        default="INFO",
        description="Console log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    console_colors: bool = Field(
        default=True, description="Enable colored console output (auto-detected)"
    )
    file_enabled: bool = Field(default=False, description="Enable file logging")
    file_level: str = Field(default="DEBUG", description="File log level")
    file_directory: Optional[str] = Field(
        default=None, description="Custom log directory (defaults to config_dir/logs)"
    )
    file_prefix: str = Field(default="calendarpicker", description="Log file prefix")
    max_log_files: int = Field(default=5, ge=1, description="Maximum number of log files to keep")
    include_function_names: bool = Field(
        default=True, description="Include function names and line numbers in file logs"
    )
    third_party_level: str = Field(
        default="WARNING", description="Log level for third-party libraries"
    )

    @field_validator("console_level", "file_level", "third_party_level")
    @classmethod
    def validate_level(cls, v: str, info: Any) -> str:
        return _validate_level(v, info.field_name)


class PickerSettings(BaseSettings):
    """Picker settings with environment variable and YAML file support."""

    _explicit_args: set = PrivateAttr(default_factory=set)

    picker: str = Field(default="date", description="Granularity the picker ends on")
    mode: Optional[str] = Field(default=None, description="Pin the panel mode externally")
    show_time: Union[bool, ShowTimeSettings] = Field(
        default=False, description="Enable time selection (bool or sub-configuration)"
    )
    tab_index: int = Field(default=0, description="Tab order of the input surface")
    blur_to_cancel: bool = Field(
        default=False, description="Cancel, instead of closing, when focus leaves the picker"
    )
    locale: str = Field(default="en_US", description="Locale tag for week start and formats")
    format: Optional[str] = Field(default=None, description="Override the input text format")
    timezone: Optional[str] = Field(default=None, description="IANA time zone for 'now'")
    week_start: Optional[int] = Field(
        default=None, ge=0, le=6, description="First weekday for the locale (0=Monday)"
    )

    config_dir: Path = Field(default_factory=lambda: Path.home() / ".config" / "calendarpicker")
    config_file: Optional[Path] = Field(default=None, description="Explicit YAML config path")

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings, description="Logging settings"
    )

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_assignment=True,
        extra="ignore",
    )

    def __init__(self, **kwargs: Any) -> None:
        env_vars_set = {
            key[len(ENV_PREFIX) :].lower()
            for key in os.environ
            if key.upper().startswith(ENV_PREFIX)
        }

        try:
            super().__init__(**kwargs)
        except ValidationError as e:
            raise _as_config_error(e) from e

        # Explicit arguments and environment variables win over the YAML file
        self._explicit_args = set(kwargs) | env_vars_set
        self._load_yaml_config()

    @field_validator("picker", mode="before")
    @classmethod
    def validate_picker(cls, v: Any) -> str:
        value = str(getattr(v, "value", v)).lower()
        if value not in PICKER_CHOICES:
            raise ConfigValidationError(
                f"Invalid picker, expected one of {', '.join(PICKER_CHOICES)}",
                field_name="picker",
                field_value=v,
            )
        return value

    @field_validator("mode", mode="before")
    @classmethod
    def normalize_mode(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return str(getattr(v, "value", v)).lower()

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigValidationError(
                f"Unknown time zone: {e}", field_name="timezone", field_value=v
            ) from e
        return v

    @property
    def time_settings(self) -> Optional[ShowTimeSettings]:
        """The time sub-configuration, or None when time selection is off."""
        if not self.show_time:
            return None
        return time_settings_from(self.show_time)

    def effective_format(self) -> str:
        """Text format for the input surface, derived from picker and time settings."""
        if self.format:
            return self.format

        time_settings = self.time_settings
        if self.picker == "time":
            return time_settings.time_format if time_settings else DEFAULT_TIME_FORMAT
        if self.picker == "date" and time_settings:
            return f"{DEFAULT_FORMATS['date']} {time_settings.time_format}"
        return DEFAULT_FORMATS[self.picker]

    def _find_config_file(self) -> Optional[Path]:
        """Find the YAML file: explicit path first, then the user config directory."""
        if self.config_file is not None:
            return self.config_file if self.config_file.exists() else None

        user_config = self.config_dir / "config.yaml"
        if user_config.exists():
            return user_config

        return None

    def _load_picker_section(self, section: dict) -> None:
        for key, value in section.items():
            if key not in type(self).model_fields or key in ("logging", "config_file"):
                logger.warning(f"Ignoring unknown picker setting in config file: {key}")
                continue
            if key in self._explicit_args:
                continue
            try:
                setattr(self, key, value)
            except ValidationError as e:
                raise _as_config_error(e) from e

    def _load_logging_section(self, section: dict) -> None:
        if "logging" in self._explicit_args:
            return
        merged = {**self.logging.model_dump(), **section}
        try:
            self.logging = LoggingSettings(**merged)
        except ValidationError as e:
            raise _as_config_error(e) from e

    def _load_yaml_config(self) -> None:
        """Load configuration from the YAML file if it exists.

        Raises:
            ConfigFileError: If the file exists but is not valid YAML
        """
        config_file = self._find_config_file()
        if not config_file:
            return

        try:
            with config_file.open(encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigFileError(
                "Could not read configuration file", file_path=str(config_file), original_error=e
            ) from e

        if not config_data:
            return

        self._load_picker_section(config_data.get("picker") or {})
        self._load_logging_section(config_data.get("logging") or {})
        logger.debug(f"Loaded configuration from {config_file}")


def get_settings() -> PickerSettings:
    """Get the global settings instance, creating it lazily if needed."""
    if globals()["_settings_instance"] is None:
        globals()["_settings_instance"] = PickerSettings()
    return globals()["_settings_instance"]


def reset_settings() -> None:
    """Reset the global settings instance (primarily for testing)."""
    globals()["_settings_instance"] = None


_settings_instance: Optional[PickerSettings] = None
