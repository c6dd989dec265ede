"""Milight: control Milight / LimitlessLED bulbs through a WiFi box."""

__version__ = "0.1.0"

from .core import Lights, LightObserver, Timer, TimerState, WiFiBox
from .models import LightState, MilightColor, MilightConfig

__all__ = [
    "LightObserver",
    "LightState",
    "Lights",
    "MilightColor",
    "MilightConfig",
    "Timer",
    "TimerState",
    "WiFiBox",
]
