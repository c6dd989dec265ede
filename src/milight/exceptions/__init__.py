"""
Custom exception hierarchy for milight.

## Exception Hierarchy

```
MilightError (base)
├── InvalidArgumentError      (also a ValueError)
├── SendFailedError           (also an OSError)
├── HostUnresolvedError
├── EmptyHistoryError
├── TimerStateError
└── ConfigurationError
    ├── ConfigFileInvalidError
    └── ConfigValidationError
```

All custom exceptions inherit from `MilightError`, which provides
`user_message`, `technical_message`, `recoverable` and `recovery_hint`.

Argument errors are raised before any packet leaves the process. Send
failures are raised for single-packet commands only; background command
sequences, blinks and timers log them and stop.
"""

from .base import MilightError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .device import HostUnresolvedError, InvalidArgumentError, SendFailedError
from .handlers import (
    ErrorContext,
    format_error_for_display,
    wrap_pydantic_error,
    wrap_socket_error,
)
from .state import EmptyHistoryError, TimerStateError

__all__ = [
    "ConfigFileInvalidError",
    "ConfigValidationError",
    # Config
    "ConfigurationError",
    # State
    "EmptyHistoryError",
    # Handlers
    "ErrorContext",
    # Device
    "HostUnresolvedError",
    "InvalidArgumentError",
    # Base
    "MilightError",
    "SendFailedError",
    "TimerStateError",
    "format_error_for_display",
    "wrap_pydantic_error",
    "wrap_socket_error",
]
