"""WiFi box: one UDP endpoint and the four groups of lights behind it."""

import logging
import threading
from typing import Optional

from milight.models import DEFAULT_PORT, MilightConfig
from milight.protocol import GROUPS, codec, validate_group
from milight.protocols import LightChange, LightEvent
from milight.transport import UdpTransport

from .channel import EventChannel
from .lights import Lights

logger = logging.getLogger(__name__)


class WiFiBox:
    """
    Entry point for controlling lights.

    Owns the transport, the event channel and one cached ``Lights``
    controller per group, each with its state observer.

    Example:
        ```python
        with WiFiBox("192.168.1.100") as box:
            lights = box.get_lights(1)
            lights.set_color(MilightColor.named("red"))
        ```
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        *,
        config: Optional[MilightConfig] = None,
        transport: Optional[UdpTransport] = None,
    ):
        """
        Initialize the box and resolve its address.

        Args:
            host: IP address or host name of the box
            port: UDP port of the box
            config: Timing and history settings; host and port given here
                take precedence over the ones it carries
            transport: Transport to use instead of a new UdpTransport

        Raises:
            HostUnresolvedError: If host cannot be resolved
        """
        base = config or MilightConfig()
        self.config = base.model_copy(update={"host": host, "port": port})
        self.transport = transport or UdpTransport(
            self.config.host, self.config.port, self.config.min_packet_delay
        )
        self.channel = EventChannel()
        self._lights: dict[int, Lights] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: MilightConfig) -> "WiFiBox":
        return cls(config.host, config.port, config=config)

    @property
    def host(self) -> str:
        return self.config.host

    @property
    def port(self) -> int:
        return self.config.port

    @property
    def active_group(self) -> Optional[int]:
        """Group that group-less commands currently apply to."""
        return self.transport.active_group

    def get_lights(self, group: int) -> Lights:
        """
        Controller for one group; the same object on every call.

        Raises:
            InvalidArgumentError: If group is not 1-4
        """
        validate_group(group)
        with self._lock:
            lights = self._lights.get(group)
            if lights is None:
                lights = self._lights[group] = Lights(self, group)
                logger.debug(f"Created controller for group {group}")
            return lights

    def all_lights(self) -> list[Lights]:
        return [self.get_lights(group) for group in GROUPS]

    # =================================================================
    # Box-wide commands
    # =================================================================

    def _publish_all(self, *events: LightEvent) -> None:
        for lights in self.all_lights():
            for event in events:
                self.channel.publish(LightChange(event, lights))

    def all_on(self) -> None:
        """Switch every group on."""
        self.transport.send_raw(codec.all_on())
        self._publish_all(LightEvent.SWITCH_ON)

    def all_off(self) -> None:
        """Switch every group off."""
        self.transport.send_raw(codec.all_off())
        self._publish_all(LightEvent.SWITCH_OFF)

    def all_white(self) -> threading.Thread:
        """Switch every group on in white mode."""
        thread = self.transport.send_sequence([codec.all_on(), codec.all_white()])
        self._publish_all(LightEvent.SWITCH_ON, LightEvent.WHITE_MODE)
        return thread

    # =================================================================
    # Lifecycle
    # =================================================================

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until every background command sequence has been sent."""
        return self.transport.wait_idle(timeout)

    def close(self) -> None:
        self.transport.close()
        self.channel.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"WiFiBox({self.host!r}, port={self.port})"
