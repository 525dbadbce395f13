"""
Configuration exceptions for calendarpicker.

Runtime picker operations never raise; these exceptions are only used while
loading and validating configuration.
"""

from typing import Any, Optional


class ConfigError(Exception):
    """Base exception for all configuration errors.

    Args:
        message: Human-readable error description
        details: Optional dictionary containing additional error context

    Example:
        >>> raise ConfigError("Configuration failed", {"source": "config.yaml"})
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigValidationError(ConfigError):
    """Raised when a configuration value fails validation.

    Args:
        message: Human-readable validation error description
        field_name: Name of the field that failed validation
        field_value: The invalid value that caused the error
        details: Additional context about the validation failure

    Example:
        >>> raise ConfigValidationError(
        ...     "Unknown picker granularity",
        ...     field_name="picker",
        ...     field_value="fortnight",
        ... )
    """

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.field_name = field_name
        self.field_value = field_value

        error_details = details or {}
        if field_name:
            error_details["field_name"] = field_name
        if field_value is not None:
            error_details["field_value"] = str(field_value)

        super().__init__(message, error_details)


class ConfigFileError(ConfigError):
    """Raised when a configuration file exists but cannot be read."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        self.file_path = file_path
        self.original_error = original_error

        error_details: dict[str, Any] = {}
        if file_path:
            error_details["file_path"] = file_path
        if original_error:
            error_details["original_error"] = str(original_error)

        super().__init__(message, error_details)
