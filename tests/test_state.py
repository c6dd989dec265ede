"""Tests for LightState snapshots."""

import pytest
from pydantic import ValidationError

from milight.models import LightState, MilightColor


class TestLightState:
    """Test the immutable state snapshot."""

    @pytest.mark.unit
    def test_initial(self):
        """Test the seeded unknown state."""
        state = LightState.initial()
        assert state.white_mode
        assert not state.on
        assert state.brightness == 1.0
        assert state.color.saturation == 1.0
        assert state.color.brightness == 1.0

    @pytest.mark.unit
    def test_equality_is_field_wise(self):
        """Test snapshots with equal fields are equal."""
        assert LightState.initial() == LightState.initial()
        assert LightState.initial() != LightState.initial().evolve(on=True)

    @pytest.mark.unit
    def test_evolve_keeps_original(self):
        """Test evolve returns a copy."""
        state = LightState.initial()
        changed = state.evolve(white_mode=False, color=MilightColor.named("blue"))
        assert state.white_mode
        assert not changed.white_mode
        assert changed.color == MilightColor.named("blue")
        assert changed.brightness == state.brightness

    @pytest.mark.unit
    @pytest.mark.parametrize("brightness", [-0.01, 1.01])
    def test_brightness_range(self, brightness):
        """Test white brightness must be within 0-1."""
        with pytest.raises(ValidationError):
            LightState(color=MilightColor(), white_mode=True, brightness=brightness, on=True)

    @pytest.mark.unit
    def test_frozen(self):
        """Test snapshots cannot be mutated."""
        with pytest.raises(ValidationError):
            LightState.initial().on = True


class TestApplyTo:
    """Test replaying a snapshot through a controller."""

    @pytest.mark.unit
    def test_white_state(self, box, transport):
        """Test white states replay as on, white, brightness."""
        lights = box.get_lights(3)
        state = LightState(color=MilightColor.named("red"), white_mode=True, brightness=0.0, on=True)

        state.apply_to(lights)
        box.wait_idle()

        assert transport.sent_lists == [[0x49, 0x00, 0x55], [0xC9, 0x00, 0x55], [0x4E, 0x02, 0x55]]

    @pytest.mark.unit
    def test_colored_state(self, box, transport):
        """Test colored states replay as on, hue, brightness even for pale colors."""
        lights = box.get_lights(1)
        pale = MilightColor(hue=2 / 3, saturation=0.1, brightness=1.0)
        state = LightState(color=pale, white_mode=False, brightness=1.0, on=True)

        state.apply_to(lights)
        box.wait_idle()

        assert transport.sent_lists == [[0x45, 0x00, 0x55], [0x40, 0x00, 0x55], [0x4E, 0x1B, 0x55]]
