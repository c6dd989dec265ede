"""UDP transport to a WiFi box.

The box accepts 3-byte datagrams and never answers. Commands made of
several packets must be paced: packets arriving closer together than
``min_packet_delay`` are dropped by the box. Such sequences are sent from
a background thread so the caller never waits for the pacing.
"""

import ipaddress
import itertools
import logging
import socket
import threading
import time
from collections.abc import Iterable
from typing import Optional

from milight.exceptions import (
    ErrorContext,
    HostUnresolvedError,
    InvalidArgumentError,
    wrap_socket_error,
)
from milight.protocol import Packet, group_for_opcode

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8899
DEFAULT_MIN_PACKET_DELAY = 0.1


class UdpTransport:
    """
    Fire-and-forget packet sender for one box endpoint.

    Besides sending, the transport remembers the "active group": the group
    addressed by the last on/off packet that went out. The box applies
    group-less commands (color, brightness, disco) to that group.

    Threading:
        ``send_raw`` runs on the caller's thread. ``send_sequence`` starts one
        daemon thread per sequence. Packets of one sequence are strictly
        ordered; packets of concurrent sequences may interleave.
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        min_packet_delay: float = DEFAULT_MIN_PACKET_DELAY,
    ):
        """
        Initialize the transport and resolve the box address.

        Args:
            host: IP address or host name of the box
            port: UDP port of the box
            min_packet_delay: Pause after each packet of a sequence (seconds)

        Raises:
            HostUnresolvedError: If host cannot be resolved
            InvalidArgumentError: If port or delay is out of range
        """
        if not 1 <= port <= 65535:
            raise InvalidArgumentError("port", port, "between 1 and 65535")
        if min_packet_delay < 0:
            raise InvalidArgumentError("min_packet_delay", min_packet_delay, "of at least 0 seconds")

        self.host = host
        self.port = port
        self.min_packet_delay = min_packet_delay
        self._family, self._sockaddr = self._resolve(host, port)

        self._lock = threading.Lock()
        self._active_group: Optional[int] = None
        self._sequences: set[threading.Thread] = set()
        self._sequence_ids = itertools.count(1)

        logger.info(f"UdpTransport ready for {host}:{port} ({self._sockaddr[0]})")

    @staticmethod
    def _resolve(host: str, port: int) -> tuple[int, tuple]:
        """Resolve host once; numeric addresses skip DNS."""
        try:
            address = ipaddress.ip_address(host)
        except ValueError:
            pass
        else:
            if address.version == 6:
                return socket.AF_INET6, (str(address), port, 0, 0)
            return socket.AF_INET, (str(address), port)

        try:
            infos = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)
        except (socket.gaierror, UnicodeError) as e:
            raise HostUnresolvedError(host, str(e)) from e
        if not infos:
            raise HostUnresolvedError(host)
        family, _, _, _, sockaddr = infos[0]
        return family, sockaddr

    @property
    def address(self) -> str:
        """Resolved numeric address of the box."""
        return self._sockaddr[0]

    @property
    def active_group(self) -> Optional[int]:
        """Group addressed by the last on/off packet sent, or None."""
        with self._lock:
            return self._active_group

    # =================================================================
    # Sending
    # =================================================================

    def _send_datagram(self, payload: bytes) -> None:
        with socket.socket(self._family, socket.SOCK_DGRAM) as sock:
            sock.sendto(payload, self._sockaddr)

    def send_raw(self, packet: Packet) -> None:
        """
        Send one packet now.

        Args:
            packet: The packet to send

        Raises:
            SendFailedError: If the socket reports an error
        """
        logger.debug(f"Sending {packet!r} to {self.host}:{self.port}")
        try:
            self._send_datagram(bytes(packet))
        except OSError as e:
            raise wrap_socket_error(e, self.host, self.port) from e

        group = group_for_opcode(packet.opcode)
        if group is not None:
            with self._lock:
                self._active_group = group

    def send_sequence(
        self, packets: Iterable[Packet], delay: Optional[float] = None
    ) -> threading.Thread:
        """
        Send packets in order from a background thread and return at once.

        Each packet is followed by a pause of ``delay`` seconds. The first
        failure aborts the rest of the sequence; it is logged, not raised.

        Args:
            packets: Packets to send, in order
            delay: Pause after each packet (defaults to min_packet_delay)

        Returns:
            The (daemon) thread sending the sequence

        Raises:
            InvalidArgumentError: If an item is not a Packet or delay is too short
        """
        packets = list(packets)
        for packet in packets:
            if not isinstance(packet, Packet):
                raise InvalidArgumentError("packet", packet, "a Packet instance")
        if delay is None:
            delay = self.min_packet_delay
        elif delay < self.min_packet_delay:
            raise InvalidArgumentError(
                "delay", delay, f"of at least {self.min_packet_delay} seconds"
            )

        sequence_id = next(self._sequence_ids)
        thread = threading.Thread(
            target=self._run_sequence,
            args=(sequence_id, packets, delay),
            name=f"milight-sequence-{sequence_id}",
            daemon=True,
        )
        with self._lock:
            self._sequences.add(thread)
        thread.start()
        return thread

    def _run_sequence(self, sequence_id: int, packets: list[Packet], delay: float) -> None:
        try:
            with ErrorContext(
                f"send sequence {sequence_id} ({len(packets)} packets)",
                logger_instance=logger,
                re_raise=False,
                log_level=logging.WARNING,
            ):
                for packet in packets:
                    self.send_raw(packet)
                    time.sleep(delay)
        finally:
            with self._lock:
                self._sequences.discard(threading.current_thread())

    # =================================================================
    # Lifecycle
    # =================================================================

    @property
    def pending_sequences(self) -> int:
        """Number of sequences still being sent."""
        with self._lock:
            return len(self._sequences)

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """
        Block until every sequence started so far has finished.

        Args:
            timeout: Maximum time to wait in seconds (None waits forever)

        Returns:
            True if no sequence is pending anymore
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            with self._lock:
                pending = [t for t in self._sequences if t is not threading.current_thread()]
            if not pending:
                return True
            for thread in pending:
                remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
                thread.join(remaining)
            if deadline is not None and time.monotonic() >= deadline:
                return self.pending_sequences == 0

    def close(self) -> None:
        """Wait for pending sequences; the transport holds no open socket."""
        if not self.wait_idle(timeout=5.0):
            logger.warning(f"{self.pending_sequences} sequence(s) still sending on close")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"UdpTransport({self.host!r}, port={self.port})"
