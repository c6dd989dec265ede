"""Events and listener protocols for milight."""

from .events import LightChange, LightEvent
from .observers import LightListener, TimerListener

__all__ = [
    # Events
    "LightChange",
    "LightEvent",
    # Listeners
    "LightListener",
    "TimerListener",
]
