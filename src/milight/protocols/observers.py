"""Listener protocol definitions.

- Light listeners: react to commands a group controller sent
- Timer listeners: react to an animation ending
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from milight.core.timer import Timer

from .events import LightChange


@runtime_checkable
class LightListener(Protocol):
    """
    Listener that receives the events of one group.

    Registered through ``Lights.add_listener`` or ``EventChannel.subscribe``.
    """

    def on_light_event(self, change: LightChange) -> None:
        """
        Handle a light event.

        Args:
            change: The event, its source controller and payload

        Threading:
            Called from the thread that issued the command, which is the
            caller's thread or a blink/timer thread. Implementations must be
            thread-safe and must not block.

        Error Handling:
            Exceptions are caught and logged by the event channel and do not
            reach the code that sent the command.
        """
        ...


@runtime_checkable
class TimerListener(Protocol):
    """Listener notified once when a timer run ends."""

    def on_timer_finished(self, timer: "Timer") -> None:
        """
        Handle the end of a timer run.

        Args:
            timer: The timer that ended. ``timer.state`` is COMPLETED; the run
                may have reached its goal, run out of time, been stopped or
                failed.

        Threading:
            Called from the timer's own thread.
        """
        ...
