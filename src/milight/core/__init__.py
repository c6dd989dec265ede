"""Light control: box, group controllers, state tracking and timers."""

from .box import WiFiBox
from .channel import EventChannel
from .lights import Lights
from .observer import LightObserver
from .timer import Timer, TimerState

__all__ = [
    "EventChannel",
    "LightObserver",
    "Lights",
    "Timer",
    "TimerState",
    "WiFiBox",
]
