"""Tests for open-loop state tracking and restore."""

import time

import pytest

from milight.core import WiFiBox
from milight.exceptions import EmptyHistoryError, InvalidArgumentError
from milight.models import LightState, MilightColor
from milight.protocols import LightChange, LightEvent

# Far apart compared to the 0.03s debounce window of the test config
SPACING = 1.0


def publish(lights, event, at, **payload):
    lights.box.channel.publish(LightChange(event, lights, timestamp=at, **payload))


class TestTransitions:
    """Test how each event changes the snapshot."""

    @pytest.mark.unit
    def test_seeded_with_initial_state(self, lights):
        """Test the history starts with the unknown state."""
        assert len(lights.observer) == 1
        assert lights.observer.current_state == LightState.initial()

    @pytest.mark.unit
    def test_colored_sequence(self, lights):
        """Test switch, mode, color and brightness transitions."""
        blue = MilightColor.named("blue")
        publish(lights, LightEvent.SWITCH_ON, 0 * SPACING)
        publish(lights, LightEvent.COLORED_MODE, 1 * SPACING)
        publish(lights, LightEvent.COLOR_CHANGED, 2 * SPACING, color=blue)
        publish(lights, LightEvent.BRIGHTNESS_CHANGED, 3 * SPACING, brightness=0.5)

        state = lights.observer.current_state
        assert state.on
        assert not state.white_mode
        assert state.color == blue.with_brightness(0.5)
        assert state.brightness == 1.0
        assert len(lights.observer) == 5

    @pytest.mark.unit
    def test_white_brightness_kept_separately(self, lights):
        """Test white-mode brightness does not touch the color."""
        publish(lights, LightEvent.COLORED_MODE, 0 * SPACING)
        publish(lights, LightEvent.BRIGHTNESS_CHANGED, 1 * SPACING, brightness=0.5)
        publish(lights, LightEvent.WHITE_MODE, 2 * SPACING)
        publish(lights, LightEvent.BRIGHTNESS_CHANGED, 3 * SPACING, brightness=0.2)

        state = lights.observer.current_state
        assert state.white_mode
        assert state.brightness == 0.2
        assert state.color.brightness == 0.5

    @pytest.mark.unit
    def test_disco_does_not_change_state(self, lights):
        """Test disco events leave the snapshot alone."""
        publish(lights, LightEvent.DISCO_MODE, 0 * SPACING)
        publish(lights, LightEvent.DISCO_FASTER, 1 * SPACING)
        publish(lights, LightEvent.DISCO_SLOWER, 2 * SPACING)
        assert len(lights.observer) == 1

    @pytest.mark.unit
    def test_dedup(self, lights):
        """Test events that change nothing add no entry."""
        publish(lights, LightEvent.SWITCH_OFF, 0 * SPACING)
        publish(lights, LightEvent.WHITE_MODE, 1 * SPACING)
        assert len(lights.observer) == 1

    @pytest.mark.unit
    def test_history_never_empty(self, lights):
        """Test the history keeps at least one entry through any sequence."""
        events = [LightEvent.SWITCH_ON, LightEvent.SWITCH_OFF] * 10
        for i, event in enumerate(events):
            publish(lights, event, i * 0.001)
            assert len(lights.observer) >= 1


class TestDebounce:
    """Test bursts collapse into one entry."""

    @pytest.mark.unit
    def test_color_burst_collapses(self, lights):
        """Test two color changes inside the window add one entry."""
        before = len(lights.observer)
        publish(lights, LightEvent.COLOR_CHANGED, 10.0, color=MilightColor.named("red"))
        publish(lights, LightEvent.COLOR_CHANGED, 10.01, color=MilightColor.named("blue"))

        assert len(lights.observer) == before + 1
        assert lights.observer.current_state.color == MilightColor.named("blue")

    @pytest.mark.unit
    def test_spaced_events_append(self, lights):
        """Test events outside the window each add an entry."""
        publish(lights, LightEvent.COLOR_CHANGED, 10.0, color=MilightColor.named("red"))
        publish(lights, LightEvent.COLOR_CHANGED, 11.0, color=MilightColor.named("blue"))
        assert len(lights.observer) == 3

    @pytest.mark.unit
    def test_seed_never_replaced(self, lights):
        """Test a burst whose first event changed nothing still appends."""
        publish(lights, LightEvent.SWITCH_OFF, 10.0)
        publish(lights, LightEvent.SWITCH_ON, 10.01)

        history = lights.observer.history
        assert history[0] == LightState.initial()
        assert len(history) == 2
        assert history[1].on

    @pytest.mark.unit
    def test_burst_back_to_previous_state(self, lights):
        """Test a burst that undoes itself leaves no entry."""
        publish(lights, LightEvent.SWITCH_ON, 10.0)
        publish(lights, LightEvent.SWITCH_OFF, 10.01)
        assert lights.observer.history == (LightState.initial(),)

    @pytest.mark.unit
    def test_composite_command_is_one_entry(self, box, lights):
        """Test set_color_and_brightness adds exactly one entry."""
        lights.set_color_and_brightness(MilightColor.named("red"))
        box.wait_idle()

        assert len(lights.observer) == 2
        state = lights.observer.current_state
        assert state.on
        assert not state.white_mode
        assert state.color == MilightColor.named("red")


class TestQueries:
    """Test peeking and eviction."""

    @pytest.mark.unit
    def test_get_last_state(self, lights):
        """Test the previous snapshot is returned."""
        with pytest.raises(EmptyHistoryError):
            lights.observer.get_last_state()
        publish(lights, LightEvent.SWITCH_ON, 0.0)
        assert lights.observer.get_last_state() == LightState.initial()

    @pytest.mark.unit
    def test_history_is_copy(self, lights):
        """Test the history tuple does not alias internal state."""
        history = lights.observer.history
        publish(lights, LightEvent.SWITCH_ON, 0.0)
        assert len(history) == 1

    @pytest.mark.unit
    def test_evict(self, lights):
        """Test the oldest entries are dropped first."""
        for i in range(4):
            publish(lights, LightEvent.SWITCH_ON if i % 2 == 0 else LightEvent.SWITCH_OFF, i * SPACING)
        assert len(lights.observer) == 5

        assert lights.observer.evict(2) == 3
        assert len(lights.observer) == 2
        assert not lights.observer.current_state.on
        assert lights.observer.evict(5) == 0

    @pytest.mark.unit
    def test_evict_keeps_at_least_one(self, lights):
        """Test the history cannot be evicted empty."""
        with pytest.raises(InvalidArgumentError):
            lights.observer.evict(0)

    @pytest.mark.unit
    def test_bounded_history(self, config, transport):
        """Test the history never grows beyond history_size."""
        small = config.model_copy(update={"history_size": 3})
        box = WiFiBox("127.0.0.1", config=small, transport=transport)
        lights = box.get_lights(1)
        for i in range(6):
            publish(lights, LightEvent.SWITCH_ON if i % 2 == 0 else LightEvent.SWITCH_OFF, i * SPACING)

        assert len(lights.observer) == 3
        assert not lights.observer.current_state.on


class TestRestore:
    """Test undo through the controller."""

    @pytest.mark.unit
    def test_restore_previous_state(self, box, lights, transport):
        """Test restore returns to the state before the last command."""
        lights.set_color_and_brightness(MilightColor.named("blue"))
        box.wait_idle()
        blue_state = lights.observer.current_state
        time.sleep(0.05)
        lights.set_color_and_brightness(MilightColor.named("red"))
        box.wait_idle()
        transport.clear()

        restored = lights.observer.restore()
        box.wait_idle()

        assert restored == blue_state
        assert lights.observer.current_state == blue_state
        assert len(lights.observer) == 2
        blue = MilightColor.named("blue")
        assert transport.sent_lists == [
            [0x45, 0x00, 0x55],
            [0x40, blue.device_hue, 0x55],
            [0x4E, blue.device_brightness, 0x55],
        ]

    @pytest.mark.unit
    def test_restore_to_seed_then_empty(self, box, lights, transport):
        """Test restoring down to the seed, then failing."""
        lights.set_color_and_brightness(MilightColor.named("green"))
        box.wait_idle()
        transport.clear()

        assert lights.restore() == LightState.initial()
        box.wait_idle()
        assert transport.sent_lists == [[0x45, 0x00, 0x55], [0xC5, 0x00, 0x55], [0x4E, 0x1B, 0x55]]
        assert len(lights.observer) == 1

        with pytest.raises(EmptyHistoryError):
            lights.restore()

    @pytest.mark.unit
    def test_restore_on_fresh_observer(self, lights, transport):
        """Test restore with only the seed fails and sends nothing."""
        with pytest.raises(EmptyHistoryError):
            lights.observer.restore()
        assert transport.sent == []
