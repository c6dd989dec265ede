"""Pytest fixtures for tests."""

import socket
import threading
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from milight.core import WiFiBox
from milight.models import MilightConfig
from milight.protocol import Packet, decode
from milight.protocols import LightChange
from milight.transport import UdpTransport

FAST_DELAY = 0.01


class RecordingTransport(UdpTransport):
    """UdpTransport that records packets instead of sending them."""

    def __init__(self, host: str = "127.0.0.1", port: int = 8899, min_packet_delay: float = FAST_DELAY):
        super().__init__(host, port, min_packet_delay)
        self.sent: list[Packet] = []
        self.fail_opcodes: set[int] = set()
        self._record_lock = threading.Lock()

    def _send_datagram(self, payload: bytes) -> None:
        packet = decode(payload)
        if packet.opcode in self.fail_opcodes:
            raise OSError("simulated network failure")
        with self._record_lock:
            self.sent.append(packet)

    @property
    def sent_lists(self) -> list[list[int]]:
        with self._record_lock:
            return [p.to_list() for p in self.sent]

    @property
    def sent_opcodes(self) -> list[int]:
        with self._record_lock:
            return [p.opcode for p in self.sent]

    def clear(self) -> None:
        with self._record_lock:
            self.sent.clear()


class EventRecorder:
    """LightListener collecting every change it receives."""

    def __init__(self):
        self.changes: list[LightChange] = []
        self._lock = threading.Lock()

    def on_light_event(self, change: LightChange) -> None:
        with self._lock:
            self.changes.append(change)

    @property
    def events(self):
        with self._lock:
            return [c.event for c in self.changes]


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config():
    """Config with short delays so background sequences finish quickly."""
    return MilightConfig(
        host="127.0.0.1",
        min_packet_delay=FAST_DELAY,
        timer_cadence=0.05,
        history_size=100,
    )


@pytest.fixture
def transport():
    """Recording transport to 127.0.0.1."""
    return RecordingTransport()


@pytest.fixture
def box(config, transport):
    """WiFiBox wired to the recording transport."""
    with WiFiBox("127.0.0.1", config=config, transport=transport) as wifi_box:
        yield wifi_box


@pytest.fixture
def lights(box):
    """Controller for group 1."""
    return box.get_lights(1)


@pytest.fixture
def recorder(lights):
    """Event recorder subscribed to group 1."""
    rec = EventRecorder()
    lights.add_listener(rec)
    return rec


@pytest.fixture
def udp_receiver():
    """UDP socket bound to an ephemeral loopback port."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()
