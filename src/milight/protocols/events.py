"""Domain events raised by group controllers.

Every packet a controller dispatches raises exactly one event, except the
hue command, which raises COLORED_MODE followed by COLOR_CHANGED because
the bulb leaves white mode whenever it receives a hue. Events are never
derived from network traffic.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from milight.core.lights import Lights
    from milight.models import MilightColor


class LightEvent(Enum):
    """What changed on a group of lights."""

    SWITCH_ON = "switch_on"                  # Group switched on (or addressed)
    SWITCH_OFF = "switch_off"                # Group switched off
    WHITE_MODE = "white_mode"                # Group entered white mode
    COLORED_MODE = "colored_mode"            # Group entered colored mode
    COLOR_CHANGED = "color_changed"          # New hue sent; payload: color
    BRIGHTNESS_CHANGED = "brightness_changed"  # New brightness sent; payload: brightness
    DISCO_MODE = "disco_mode"                # Disco program started
    DISCO_FASTER = "disco_faster"            # Disco program sped up
    DISCO_SLOWER = "disco_slower"            # Disco program slowed down


@dataclass(frozen=True)
class LightChange:
    """
    One event together with its source and payload.

    Attributes:
        event: The kind of change
        lights: Controller that raised the event
        color: Color just dispatched (COLOR_CHANGED only)
        brightness: Perceptual brightness just dispatched (BRIGHTNESS_CHANGED only)
        timestamp: time.monotonic() when the event was raised. For command
            sequences this is before the packets have actually left.
    """

    event: LightEvent
    lights: "Lights"
    color: Optional["MilightColor"] = None
    brightness: Optional[float] = None
    timestamp: float = field(default_factory=time.monotonic)

    @property
    def group(self) -> int:
        return self.lights.group
