"""Root of the milight exception hierarchy.

Every error raised by the library derives from MilightError and carries two
texts: ``user_message`` for the terminal (the CLI prints it as is) and
``technical_message`` for the log file. ``recovery_hint`` is an optional
next step for the user, and ``recoverable`` says whether retrying the same
call can succeed (a lost packet can; a bad argument cannot).
"""

from typing import Optional


class MilightError(Exception):
    """Base exception for all milight errors."""

    def __init__(
        self,
        user_message: str,
        technical_message: Optional[str] = None,
        recoverable: bool = False,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        return self.user_message

    def get_full_message(self) -> str:
        """User message followed by the recovery hint, if any."""
        if not self.recovery_hint:
            return self.user_message
        return f"{self.user_message}\n\nSuggestion: {self.recovery_hint}"
