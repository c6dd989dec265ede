"""Device and transport exceptions.

This module defines exceptions raised while talking to a WiFi box:
- InvalidArgumentError: A group, device value or duration is out of range
- SendFailedError: A datagram could not be sent
- HostUnresolvedError: The box address could not be resolved
"""

from typing import Any, Optional

from .base import MilightError


class InvalidArgumentError(MilightError, ValueError):
    """An argument is outside the range the device accepts.

    Always raised before any packet is sent.
    """

    def __init__(self, name: str, value: Any, expected: str):
        """
        Initialize invalid argument error.

        Args:
            name: Name of the offending argument (e.g., "group")
            value: The rejected value
            expected: Human readable description of the valid range
        """
        super().__init__(
            user_message=f"Invalid {name}: {value!r} (expected {expected})",
            recoverable=True,
            recovery_hint=f"Pass a {name} {expected}",
        )
        self.name = name
        self.value = value
        self.expected = expected


class SendFailedError(MilightError, OSError):
    """A command packet could not be sent to the WiFi box."""

    def __init__(self, host: str, port: int, original_error: Optional[str] = None):
        """
        Initialize send failure.

        Args:
            host: Address of the WiFi box
            port: UDP port of the WiFi box
            original_error: The socket error message
        """
        user_msg = f"Could not send command to {host}:{port}"
        tech_msg = user_msg
        if original_error:
            tech_msg += f"\nOriginal error: {original_error}"

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            recoverable=True,
            recovery_hint="Check that the WiFi box is powered and reachable on the network.",
        )
        self.host = host
        self.port = port


class HostUnresolvedError(MilightError):
    """The WiFi box host name could not be resolved."""

    def __init__(self, host: str, original_error: Optional[str] = None):
        """
        Initialize host resolution error.

        Args:
            host: The host name that failed to resolve
            original_error: The resolver error message
        """
        user_msg = f"Could not resolve WiFi box address '{host}'"
        tech_msg = user_msg
        if original_error:
            tech_msg += f"\nOriginal error: {original_error}"

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            recoverable=True,
            recovery_hint="Use the numeric IP address of the box or fix the host name.",
        )
        self.host = host
