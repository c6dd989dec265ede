"""
Translation of low-level errors and logging helpers.

| Failure | Helper |
|---------|--------|
| `OSError` from `sendto` | `wrap_socket_error(e, host, port)` |
| pydantic `ValidationError` while loading the config | `wrap_pydantic_error(e, path)` |
| any error shown by the CLI | `format_error_for_display(e)` |
| work on a background thread | `with ErrorContext("blink group 1", re_raise=False): ...` |

Background threads (command sequences, blinks, timers) have no caller to
raise to, so they run inside an ErrorContext that logs the failure and ends
the thread.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from .base import MilightError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .device import SendFailedError

logger = logging.getLogger(__name__)


class ErrorContext:
    """
    Log (and optionally swallow) the exception leaving a block.

    KeyboardInterrupt and SystemExit always propagate. The exception, if
    any, is kept in ``error`` after the block.

    Example:
        ```python
        with ErrorContext("send sequence 3", logger_instance=logger, re_raise=False) as ctx:
            for packet in packets:
                transport.send_raw(packet)
        if ctx.error:
            ...
        ```
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True,
        log_level: int = logging.ERROR,
    ):
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.log_level = log_level
        self.error: Optional[Exception] = None

    def __enter__(self):
        self.logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.logger.debug(f"Completed: {self.operation}")
            return False
        if not issubclass(exc_type, Exception):
            return False

        self.error = exc_val
        if isinstance(exc_val, MilightError):
            # Library errors carry their own context; no traceback needed
            self.logger.log(self.log_level, f"Failed to {self.operation}: {exc_val.technical_message}")
        else:
            self.logger.log(self.log_level, f"Failed to {self.operation}: {exc_val}", exc_info=True)
        return not self.re_raise


def wrap_socket_error(error: OSError, host: str, port: int) -> MilightError:
    """SendFailedError for an OSError raised while sending to host:port."""
    if isinstance(error, MilightError):
        return error
    return SendFailedError(host, port, original_error=str(error))


def _location(error: dict) -> str:
    return ".".join(str(part) for part in error.get("loc", ())) or "unknown"


def wrap_pydantic_error(error: Exception, file_path: str) -> ConfigurationError:
    """
    ConfigurationError for a failed ``model_validate_json`` of a config file.

    Broken JSON becomes ConfigFileInvalidError; bad values become
    ConfigValidationError naming the field, or "multiple fields" if
    several are wrong.
    """
    if not isinstance(error, ValidationError):
        return ConfigValidationError("unknown", None, str(error), file_path=file_path)

    errors = error.errors()
    for err in errors:
        if err.get("type") == "json_invalid":
            parse_error = (err.get("ctx") or {}).get("error", err.get("msg", "invalid JSON"))
            return ConfigFileInvalidError(file_path, str(parse_error))

    match errors:
        case [single]:
            return ConfigValidationError(
                field=_location(single),
                value=single.get("input"),
                error_msg=single.get("msg", "validation failed"),
                file_path=file_path,
            )
        case []:
            return ConfigValidationError("unknown", None, str(error), file_path=file_path)
        case _:
            lines = "\n".join(
                f"  - {_location(err)}: {err.get('msg', 'validation failed')}" for err in errors
            )
            return ConfigValidationError(
                field="multiple fields",
                value=None,
                error_msg=f"{len(errors)} validation errors:\n{lines}",
                file_path=file_path,
            )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """(message, recovery hint or None) for printing error to a terminal."""
    if isinstance(error, MilightError):
        return error.user_message, error.recovery_hint
    return f"{type(error).__name__}: {error}", None
