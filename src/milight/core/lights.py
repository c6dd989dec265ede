"""Controller for one group of lights behind a WiFi box."""

import logging
import threading
import time
from collections.abc import Iterable
from typing import TYPE_CHECKING, Optional

from milight.exceptions import ErrorContext, InvalidArgumentError
from milight.models import LightState, MilightColor, from_device_brightness, from_device_hue
from milight.protocol import Packet, codec, validate_group
from milight.protocols import LightChange, LightEvent, LightListener

from .observer import LightObserver

if TYPE_CHECKING:
    from .box import WiFiBox

logger = logging.getLogger(__name__)


class Lights:
    """
    High level commands for one group (1-4).

    Every operation validates its arguments before sending anything, then
    dispatches its packets and finally publishes one event per packet on the
    box's event channel.

    Group-less commands (hue, brightness, disco) are applied by the box to
    the active group. When this group is already active they go out as a
    single synchronous packet; otherwise they are preceded by a group-on
    packet and sent as a background sequence.

    Obtain instances through ``WiFiBox.get_lights(group)``.
    """

    def __init__(self, box: "WiFiBox", group: int):
        self.group = validate_group(group)
        self.box = box
        self._transport = box.transport
        self.observer = LightObserver(
            self,
            history_size=box.config.history_size,
            debounce_window=box.config.debounce_window,
        )

    @property
    def min_packet_delay(self) -> float:
        return self._transport.min_packet_delay

    # =================================================================
    # Dispatch helpers
    # =================================================================

    def _publish(
        self,
        event: LightEvent,
        color: Optional[MilightColor] = None,
        brightness: Optional[float] = None,
    ) -> None:
        # Payloads only ride on the events that describe them
        change = LightChange(
            event,
            self,
            color=color if event is LightEvent.COLOR_CHANGED else None,
            brightness=brightness if event is LightEvent.BRIGHTNESS_CHANGED else None,
        )
        self.box.channel.publish(change)

    def _publish_events(
        self,
        events: Iterable[LightEvent],
        color: Optional[MilightColor] = None,
        brightness: Optional[float] = None,
    ) -> None:
        for event in events:
            self._publish(event, color=color, brightness=brightness)

    def _send_sequence(
        self,
        packets: list[Packet],
        events: Iterable[LightEvent],
        color: Optional[MilightColor] = None,
        brightness: Optional[float] = None,
    ) -> threading.Thread:
        thread = self._transport.send_sequence(packets)
        self._publish_events(events, color=color, brightness=brightness)
        return thread

    def _send_targeted(
        self,
        packet: Packet,
        events: list[LightEvent],
        color: Optional[MilightColor] = None,
        brightness: Optional[float] = None,
    ) -> Optional[threading.Thread]:
        if self._transport.active_group == self.group:
            self._transport.send_raw(packet)
            self._publish_events(events, color=color, brightness=brightness)
            return None
        return self._send_sequence(
            [codec.switch_on(self.group), packet],
            [LightEvent.SWITCH_ON, *events],
            color=color,
            brightness=brightness,
        )

    @staticmethod
    def _check_color(color: MilightColor) -> MilightColor:
        if not isinstance(color, MilightColor):
            raise InvalidArgumentError("color", color, "a MilightColor")
        return color

    # =================================================================
    # Switching
    # =================================================================

    def on(self) -> None:
        """Switch the group on. Also makes it the active group."""
        self._transport.send_raw(codec.switch_on(self.group))
        self._publish(LightEvent.SWITCH_ON)

    def off(self) -> None:
        """Switch the group off. Also makes it the active group."""
        self._transport.send_raw(codec.switch_off(self.group))
        self._publish(LightEvent.SWITCH_OFF)

    def white(self) -> threading.Thread:
        """Put the group in white mode."""
        return self._send_sequence(
            [codec.switch_on(self.group), codec.white_mode(self.group)],
            [LightEvent.SWITCH_ON, LightEvent.WHITE_MODE],
        )

    # =================================================================
    # Color and brightness
    # =================================================================

    def set_brightness(self, level: int) -> Optional[threading.Thread]:
        """
        Set the device brightness of the group.

        Args:
            level: Device brightness (0x02-0x1B)

        Returns:
            The sequence thread, or None if a single packet was sent

        Raises:
            InvalidArgumentError: If level is out of range
        """
        packet = codec.brightness(level)
        return self._send_targeted(
            packet, [LightEvent.BRIGHTNESS_CHANGED], brightness=from_device_brightness(level)
        )

    def set_hue(self, value: int) -> Optional[threading.Thread]:
        """
        Set a raw device hue (0x00-0xFF); leaves white mode.

        Raises:
            InvalidArgumentError: If value is out of range
        """
        packet = codec.color(value)
        return self._send_targeted(
            packet,
            [LightEvent.COLORED_MODE, LightEvent.COLOR_CHANGED],
            color=from_device_hue(value),
        )

    def set_color(
        self, color: MilightColor, force_colored_mode: bool = False
    ) -> Optional[threading.Thread]:
        """
        Show the hue of color, or white mode for pale colors.

        Brightness is left as it is; use ``set_color_and_brightness`` to
        change both.

        Args:
            color: Color to display
            force_colored_mode: Send the hue even if color would be shown
                in white mode

        Returns:
            The sequence thread, or None if a single packet was sent
        """
        self._check_color(color)
        if not (force_colored_mode or color.is_colored_mode):
            return self.white()
        return self._send_targeted(
            codec.color(color.device_hue),
            [LightEvent.COLORED_MODE, LightEvent.COLOR_CHANGED],
            color=color,
        )

    def set_color_and_brightness(
        self, color: MilightColor, force_colored_mode: bool = False
    ) -> threading.Thread:
        """
        Show color including its brightness.

        Always sent as the sequence group on, hue (or white mode), brightness.
        This is the call animations and samplers use on every step.

        Args:
            color: Color to display
            force_colored_mode: Send the hue even if color would be shown
                in white mode

        Returns:
            The sequence thread
        """
        self._check_color(color)

        if force_colored_mode or color.is_colored_mode:
            mode_packet = codec.color(color.device_hue)
            mode_events = [LightEvent.COLORED_MODE, LightEvent.COLOR_CHANGED]
        else:
            mode_packet = codec.white_mode(self.group)
            mode_events = [LightEvent.WHITE_MODE]

        return self._send_sequence(
            [codec.switch_on(self.group), mode_packet, codec.brightness(color.device_brightness)],
            [LightEvent.SWITCH_ON, *mode_events, LightEvent.BRIGHTNESS_CHANGED],
            color=color,
            brightness=color.brightness,
        )

    # =================================================================
    # Disco
    # =================================================================

    def disco_mode(self) -> Optional[threading.Thread]:
        """Start the built-in disco program on this group."""
        return self._send_targeted(codec.disco(), [LightEvent.DISCO_MODE])

    def disco_faster(self) -> None:
        """Speed up the disco program of the active group."""
        self._transport.send_raw(codec.disco_faster())
        self._publish(LightEvent.DISCO_FASTER)

    def disco_slower(self) -> None:
        """Slow down the disco program of the active group."""
        self._transport.send_raw(codec.disco_slower())
        self._publish(LightEvent.DISCO_SLOWER)

    # =================================================================
    # Effects
    # =================================================================

    def blink(
        self,
        color: MilightColor,
        times: int = 3,
        color_time: float = 1.0,
        restore_time: float = 1.0,
    ) -> threading.Thread:
        """
        Alternate between color and the current state in the background.

        Args:
            color: Color shown on each blink (always in colored mode)
            times: Number of blinks
            color_time: Seconds color stays on
            restore_time: Seconds the previous state stays on between blinks

        Returns:
            The (daemon) blink thread

        Raises:
            InvalidArgumentError: If times is not positive or a duration is
                shorter than two packet delays
        """
        self._check_color(color)
        if isinstance(times, bool) or not isinstance(times, int) or times <= 0:
            raise InvalidArgumentError("times", times, "a positive integer")
        floor = 2 * self.min_packet_delay
        for name, value in (("color_time", color_time), ("restore_time", restore_time)):
            if value < floor:
                raise InvalidArgumentError(name, value, f"of at least {floor:g} seconds")

        prior = self.observer.current_state
        thread = threading.Thread(
            target=self._run_blink,
            args=(color, prior, times, color_time, restore_time),
            name=f"milight-blink-{self.group}",
            daemon=True,
        )
        thread.start()
        return thread

    def _run_blink(
        self,
        color: MilightColor,
        prior: LightState,
        times: int,
        color_time: float,
        restore_time: float,
    ) -> None:
        with ErrorContext(
            f"blink group {self.group}",
            logger_instance=logger,
            re_raise=False,
            log_level=logging.WARNING,
        ):
            for _ in range(times):
                self.set_color(color, force_colored_mode=True)
                time.sleep(color_time)
                prior.apply_to(self)
                time.sleep(restore_time)

    # =================================================================
    # Listeners
    # =================================================================

    def add_listener(self, listener: LightListener) -> None:
        """Receive the events of this group."""
        self.box.channel.subscribe(self.group, listener)

    def remove_listener(self, listener: LightListener) -> None:
        self.box.channel.unsubscribe(self.group, listener)

    def restore(self) -> LightState:
        """Undo the last change (see ``LightObserver.restore``)."""
        return self.observer.restore()

    def __repr__(self) -> str:
        return f"Lights(group={self.group}, box={self.box.host!r})"
