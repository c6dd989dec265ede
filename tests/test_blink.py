"""Tests for the blink effect."""

import threading

import pytest

from milight.core import WiFiBox
from milight.exceptions import InvalidArgumentError
from milight.models import MilightColor

from conftest import RecordingTransport


@pytest.fixture
def slow_lights(config):
    """Group 1 on a box paced at the real 0.1s packet delay."""
    paced = config.model_copy(update={"min_packet_delay": 0.1})
    box = WiFiBox("127.0.0.1", config=paced, transport=RecordingTransport(min_packet_delay=0.1))
    return box.get_lights(1)


class TestBlinkValidation:
    """Test arguments are checked before anything is sent."""

    @pytest.mark.unit
    def test_color_time_below_pacing_floor(self, slow_lights):
        """Test 0.15s is too short with a 0.1s packet delay."""
        with pytest.raises(InvalidArgumentError):
            slow_lights.blink(MilightColor.named("red"), times=3, color_time=0.15, restore_time=0.3)
        assert slow_lights.box.transport.sent == []

    @pytest.mark.unit
    def test_restore_time_below_pacing_floor(self, slow_lights):
        """Test the restore time has the same floor."""
        with pytest.raises(InvalidArgumentError):
            slow_lights.blink(MilightColor.named("red"), times=1, color_time=0.3, restore_time=0.19)

    @pytest.mark.unit
    @pytest.mark.parametrize("times", [0, -2])
    def test_times_must_be_positive(self, slow_lights, times):
        """Test the blink count must be positive."""
        with pytest.raises(InvalidArgumentError):
            slow_lights.blink(MilightColor.named("red"), times=times)

    @pytest.mark.unit
    def test_floor_is_inclusive(self, slow_lights):
        """Test exactly twice the packet delay is accepted."""
        thread = slow_lights.blink(MilightColor.named("red"), times=1, color_time=0.2, restore_time=0.2)
        assert isinstance(thread, threading.Thread)
        thread.join(timeout=5.0)

    @pytest.mark.unit
    def test_color_required(self, lights):
        """Test only MilightColor is accepted."""
        with pytest.raises(InvalidArgumentError):
            lights.blink("red")


class TestBlinkRun:
    """Test the background blink loop."""

    @pytest.mark.unit
    def test_alternates_color_and_prior_state(self, box, lights, transport):
        """Test each blink shows the color, then replays the state from before."""
        red = MilightColor.named("red")
        thread = lights.blink(red, times=2, color_time=0.05, restore_time=0.05)
        assert thread.daemon
        thread.join(timeout=5.0)
        box.wait_idle()

        hue = [0x40, red.device_hue, 0x55]
        replay = [[0x45, 0x00, 0x55], [0xC5, 0x00, 0x55], [0x4E, 0x1B, 0x55]]
        sent = transport.sent_lists
        assert sent.count(hue) == 2
        assert sent[-3:] == replay
        assert sent.index(hue) < sent.index(replay[1])

    @pytest.mark.unit
    def test_failure_ends_thread(self, box, lights, transport, caplog):
        """Test a send failure stops the blink and is logged."""
        lights.on()
        transport.clear()
        transport.fail_opcodes.add(0x40)

        thread = lights.blink(MilightColor.named("blue"), times=3, color_time=0.05, restore_time=0.05)
        thread.join(timeout=5.0)

        assert not thread.is_alive()
        assert transport.sent == []
        assert "Failed to blink group 1" in caplog.text
