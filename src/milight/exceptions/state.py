"""State tracking and animation exceptions."""

from .base import MilightError


class EmptyHistoryError(MilightError):
    """No earlier light state is known for a group."""

    def __init__(self, group: int):
        super().__init__(
            user_message=f"No earlier state recorded for group {group}",
            recoverable=True,
        )
        self.group = group


class TimerStateError(MilightError):
    """A timer was asked to do something its current state does not allow."""

    def __init__(self, state: str, action: str):
        super().__init__(
            user_message=f"Cannot {action} a timer in state {state}",
            recoverable=True,
            recovery_hint="Create a new Timer to run another animation.",
        )
        self.state = state
        self.action = action
