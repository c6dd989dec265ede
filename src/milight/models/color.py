"""Perceptual color model and conversion to device values.

Colors are kept as hue/saturation/brightness floats, hue in [0, 1) and the
others in [0, 1]. The bulbs only understand two narrow integer ranges, so
conversion is lossy:

- Hue: the bulb's color wheel is rotated and reversed relative to HSB,
  ``device_hue = floor(((5/3 - hue) mod 1) * 255)``. HSB blue (2/3) lands on 0,
  green (1/3) on 85 and red (0) on 170.
- Brightness: only 0x02-0x1B produce distinct output. Values outside that
  band are clamped by the bulb or repeat a neighbouring level.

Colors with saturation below 0.5 are shown in white mode, since the bulb
cannot render pale colors.
"""

import colorsys
import math
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, field_validator

from milight.exceptions import InvalidArgumentError
from milight.protocol import MAX_BRIGHTNESS, MAX_COLOR, MIN_BRIGHTNESS, MIN_COLOR

SATURATION_THRESHOLD = 0.5

# hue in degrees 0-360, saturation 0-1, brightness 0-1
NAMED_COLORS = {
    'red': (0, 1.0, 1.0),
    'orange': (30, 1.0, 1.0),
    'yellow': (60, 1.0, 1.0),
    'lime': (90, 1.0, 1.0),
    'green': (120, 1.0, 1.0),
    'teal': (150, 1.0, 1.0),
    'cyan': (180, 1.0, 1.0),
    'sky': (210, 1.0, 1.0),
    'blue': (240, 1.0, 1.0),
    'purple': (270, 1.0, 1.0),
    'magenta': (300, 1.0, 1.0),
    'pink': (330, 1.0, 1.0),
    'white': (0, 0.0, 1.0),
    'black': (0, 0.0, 0.0),
}


class MilightColor(BaseModel):
    """HSB color; hue in [0, 1) with 1.0 wrapping to 0.0, the rest in [0, 1].

    The model is frozen so colors can be shared between threads and used
    as cache keys.
    """

    model_config = ConfigDict(frozen=True)

    hue: float = Field(default=0.0, ge=0.0, le=1.0, description="Hue (0-1)")
    saturation: float = Field(default=0.0, ge=0.0, le=1.0, description="Saturation (0-1)")
    brightness: float = Field(default=1.0, ge=0.0, le=1.0, description="Brightness (0-1)")

    @field_validator("hue")
    @classmethod
    def wrap_full_turn(cls, value: float) -> float:
        """Hue is circular: 1.0 is the same color as 0.0."""
        return 0.0 if value == 1.0 else value

    # =================================================================
    # Constructors
    # =================================================================

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> "MilightColor":
        """Create from 8-bit RGB components."""
        for name, value in (("red", r), ("green", g), ("blue", b)):
            if not 0 <= value <= 255:
                raise InvalidArgumentError(name, value, "between 0 and 255")
        h, s, v = colorsys.rgb_to_hsv(r / 255, g / 255, b / 255)
        return cls(hue=h, saturation=s, brightness=v)

    @classmethod
    def from_hex(cls, value: str) -> "MilightColor":
        """Create from a CSS hex string ('#RRGGBB' or 'RRGGBB')."""
        digits = value.strip().lstrip("#")
        if len(digits) != 6:
            raise InvalidArgumentError("hex color", value, "in the form #RRGGBB")
        try:
            r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
        except ValueError as e:
            raise InvalidArgumentError("hex color", value, "in the form #RRGGBB") from e
        return cls.from_rgb(r, g, b)

    @classmethod
    def named(cls, name: str) -> "MilightColor":
        """Create one of the NAMED_COLORS."""
        try:
            degrees, saturation, brightness = NAMED_COLORS[name.lower()]
        except KeyError:
            raise InvalidArgumentError(
                "color name", name, "one of " + ", ".join(sorted(NAMED_COLORS))
            ) from None
        return cls(hue=degrees / 360, saturation=saturation, brightness=brightness)

    @classmethod
    def parse(cls, value: str) -> "MilightColor":
        """Create from either a color name or a hex string."""
        if value.lower() in NAMED_COLORS:
            return cls.named(value)
        return cls.from_hex(value)

    @classmethod
    def white(cls, brightness: float = 1.0) -> "MilightColor":
        return cls(hue=0.0, saturation=0.0, brightness=brightness)

    # =================================================================
    # Device values
    # =================================================================

    @property
    def device_hue(self) -> int:
        return to_device_hue(self)

    @property
    def device_brightness(self) -> int:
        return to_device_brightness(self)

    @property
    def is_white_mode(self) -> bool:
        return is_white_mode(self)

    @property
    def is_colored_mode(self) -> bool:
        return not is_white_mode(self)

    # =================================================================
    # Derived colors
    # =================================================================

    def with_brightness(self, brightness: float) -> "MilightColor":
        """Copy of this color with another brightness."""
        if not 0.0 <= brightness <= 1.0:
            raise InvalidArgumentError("brightness", brightness, "between 0 and 1")
        return self.model_copy(update={"brightness": brightness})

    def with_device_brightness(self, level: int) -> "MilightColor":
        """Copy of this color whose device brightness equals level."""
        return self.with_brightness(from_device_brightness(level))

    def transition(self, goal: "MilightColor", steps: int) -> "MilightColor":
        """
        One step of a linear RGB blend from this color toward goal.

        Args:
            goal: Color reached after the last step
            steps: Number of steps still to go, including this one

        Returns:
            The color 1/steps of the way to goal, or goal itself when
            steps is 1 or less
        """
        if steps <= 1:
            return goal
        start = self.to_rgb_floats()
        end = goal.to_rgb_floats()
        r, g, b = (s + (e - s) / steps for s, e in zip(start, end))
        h, s, v = colorsys.rgb_to_hsv(*(min(1.0, max(0.0, c)) for c in (r, g, b)))
        return MilightColor(hue=h, saturation=s, brightness=v)

    # =================================================================
    # Export
    # =================================================================

    def to_rgb_floats(self) -> tuple[float, float, float]:
        """RGB components as floats in [0, 1]."""
        return colorsys.hsv_to_rgb(self.hue, self.saturation, self.brightness)

    def to_rgb(self) -> tuple[int, int, int]:
        """Convert to 8-bit RGB tuple."""
        r, g, b = self.to_rgb_floats()
        return (round(r * 255), round(g * 255), round(b * 255))

    def to_hex(self) -> str:
        """Convert to CSS hex color string (e.g., '#FF0000')."""
        r, g, b = self.to_rgb()
        return f"#{r:02X}{g:02X}{b:02X}"


# =================================================================
# Conversion functions
# =================================================================

def to_device_hue(color: MilightColor) -> int:
    """Device hue (0x00-0xFF) for a color."""
    # 0 -> 2/3, 1/3 -> 1/3, 2/3 -> 0 on the device wheel
    shifted = (5 / 3 - color.hue) % 1.0
    return min(MAX_COLOR, max(MIN_COLOR, math.floor(shifted * MAX_COLOR)))


def to_device_brightness(color: MilightColor) -> int:
    """Device brightness (0x02-0x1B) for a color."""
    level = MIN_BRIGHTNESS + math.floor(color.brightness * (MAX_BRIGHTNESS - MIN_BRIGHTNESS))
    return min(MAX_BRIGHTNESS, max(MIN_BRIGHTNESS, level))


@lru_cache(maxsize=MAX_COLOR + 1, typed=True)
def from_device_hue(value: int) -> MilightColor:
    """
    Fully saturated color whose device hue is value.

    The hue is taken from the middle of the quantisation bucket so that
    re-encoding returns the same integer.
    """
    if isinstance(value, bool) or not MIN_COLOR <= value <= MAX_COLOR:
        raise InvalidArgumentError("color value", value, f"between {MIN_COLOR} and {MAX_COLOR}")
    shifted = (value + 0.5) / MAX_COLOR
    return MilightColor(hue=(5 / 3 - shifted) % 1.0, saturation=1.0, brightness=1.0)


def from_device_brightness(value: int) -> float:
    """Perceptual brightness whose device brightness is value."""
    if isinstance(value, bool) or not MIN_BRIGHTNESS <= value <= MAX_BRIGHTNESS:
        raise InvalidArgumentError(
            "brightness level", value, f"between {MIN_BRIGHTNESS} and {MAX_BRIGHTNESS}"
        )
    return min(1.0, (value - MIN_BRIGHTNESS + 0.5) / (MAX_BRIGHTNESS - MIN_BRIGHTNESS))


def is_white_mode(color: MilightColor) -> bool:
    """True if the bulb has to show this color in white mode."""
    return color.saturation < SATURATION_THRESHOLD
