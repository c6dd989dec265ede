"""Data models for milight."""

from .color import (
    NAMED_COLORS,
    SATURATION_THRESHOLD,
    MilightColor,
    from_device_brightness,
    from_device_hue,
    is_white_mode,
    to_device_brightness,
    to_device_hue,
)
from .config import DEFAULT_CONFIG_PATH, DEFAULT_PORT, MilightConfig
from .state import LightState

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_PORT",
    "LightState",
    "MilightColor",
    "MilightConfig",
    "NAMED_COLORS",
    "SATURATION_THRESHOLD",
    "from_device_brightness",
    "from_device_hue",
    "is_white_mode",
    "to_device_brightness",
    "to_device_hue",
]
