"""Errors reading the configuration file (~/.milight/config.json)."""

from typing import Any

from .base import MilightError


class ConfigurationError(MilightError):
    """The configuration cannot be loaded."""


class ConfigFileInvalidError(ConfigurationError):
    """The config file is empty, unreadable or not valid JSON."""

    def __init__(self, file_path: str, parse_error: str):
        reason = parse_error.lower()
        if "trailing comma" in reason:
            user_msg = "Configuration file has a trailing comma"
            recovery = f"Remove the comma after the last entry in {file_path}"
        elif "empty" in reason:
            user_msg = "Configuration file is empty"
            recovery = f"Delete {file_path} or run 'milight config init --force' to recreate it"
        else:
            user_msg = "Configuration file has invalid syntax"
            recovery = (
                f"Fix the JSON in {file_path}, or recreate it with "
                "'milight config init --force'"
            )

        super().__init__(
            user_message=user_msg,
            technical_message=f"JSON parse error in {file_path}: {parse_error}",
            recoverable=True,
            recovery_hint=recovery,
        )
        self.file_path = file_path
        self.parse_error = parse_error


class ConfigValidationError(ConfigurationError):
    """A config value is out of range or of the wrong type."""

    def __init__(self, field: str, value: Any, error_msg: str, file_path: str | None = None):
        """
        Args:
            field: Offending setting ("port", "history_size", ...)
            value: The rejected value
            error_msg: Why it was rejected
            file_path: Config file the value came from
        """
        hints = [f"Update '{field}' in {file_path or 'your configuration'}"]
        if field == "port":
            hints.append("The WiFi box listens on UDP port 8899 unless reconfigured")
        elif field in ("min_packet_delay", "timer_cadence"):
            hints.append("Durations are given in seconds and must be positive")

        super().__init__(
            user_message=f"Invalid configuration value for '{field}': {error_msg}",
            technical_message=f"Config validation failed for {field}={value!r}: {error_msg}",
            recoverable=True,
            recovery_hint="\n".join(hints),
        )
        self.field = field
        self.value = value
        self.file_path = file_path
