"""Network transport to the WiFi box."""

from .udp import DEFAULT_MIN_PACKET_DELAY, DEFAULT_PORT, UdpTransport

__all__ = ["DEFAULT_MIN_PACKET_DELAY", "DEFAULT_PORT", "UdpTransport"]
