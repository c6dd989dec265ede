"""Snapshot of what a group of lights is believed to display."""

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from .color import MilightColor

if TYPE_CHECKING:
    from milight.core.lights import Lights


class LightState(BaseModel):
    """
    Immutable light state snapshot.

    ``brightness`` is the white-mode brightness. The colored-mode brightness
    is carried by ``color``, so switching modes back and forth keeps both.
    """

    model_config = ConfigDict(frozen=True)

    color: MilightColor
    white_mode: bool
    brightness: float = Field(ge=0.0, le=1.0, description="White-mode brightness (0-1)")
    on: bool

    @classmethod
    def initial(cls) -> "LightState":
        """The state assumed before any command was sent: unknown, so off."""
        return cls(
            color=MilightColor(hue=0.0, saturation=1.0, brightness=1.0),
            white_mode=True,
            brightness=1.0,
            on=False,
        )

    def evolve(self, **changes) -> "LightState":
        """Copy with some fields replaced."""
        return self.model_copy(update=changes)

    def apply_to(self, lights: "Lights") -> None:
        """
        Send the commands that make lights display this state.

        White mode is replayed as group on, white mode and brightness;
        colored mode as group on, hue and brightness. Both go out as one
        ordered sequence.
        """
        if self.white_mode:
            lights.set_color_and_brightness(MilightColor.white(self.brightness))
        else:
            lights.set_color_and_brightness(self.color, force_colored_mode=True)
