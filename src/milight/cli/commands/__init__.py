"""CLI commands for milight."""

from .config import config
from .lights import blink, brightness, color, disco, off, on, white
from .timer import fade, sleep

__all__ = ["blink", "brightness", "color", "config", "disco", "fade", "off", "on", "sleep", "white"]
