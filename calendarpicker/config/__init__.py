"""Configuration for calendarpicker: pydantic settings and their exceptions."""

from .exceptions import ConfigError, ConfigFileError, ConfigValidationError
from .settings import (
    LoggingSettings,
    PickerSettings,
    ShowTimeSettings,
    get_settings,
    reset_settings,
    time_settings_from,
)

__all__ = [
    "ConfigError",
    "ConfigFileError",
    "ConfigValidationError",
    "LoggingSettings",
    "PickerSettings",
    "ShowTimeSettings",
    "get_settings",
    "reset_settings",
    "time_settings_from",
]
