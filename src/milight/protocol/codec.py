"""
Low-level packet builder for the WiFi box.

Packets: The Box's Whole Vocabulary
===================================

Every command the box understands is a single 3-byte UDP datagram::

    [opcode] [parameter] [0x55]
       │         │          └─ Fixed terminator
       │         └─ Payload for two-byte commands, 0x00 otherwise
       └─ Command code (see opcodes.py)

One-byte commands (on, off, white, disco) carry no payload::

    switch_on(2)       -> [0x47, 0x00, 0x55]

Two-byte commands carry a device value::

    color(0xAA)        -> [0x40, 0xAA, 0x55]
    brightness(0x1B)   -> [0x4E, 0x1B, 0x55]

Group-less commands
-------------------

Color, brightness and disco commands carry no group. The box applies them
to the group addressed most recently by an on/off command, which is why
the controller usually sends ``switch_on(group)`` first.

Key Design Principle
--------------------

**Hardware abstraction boundary**: this module is the lowest level of the
protocol. It knows opcodes and bytes, not colors or groups of lights. It
never touches the network.
"""

from dataclasses import dataclass

from milight.exceptions import InvalidArgumentError

from .opcodes import (
    MAX_BRIGHTNESS,
    MAX_COLOR,
    MIN_BRIGHTNESS,
    MIN_COLOR,
    TERMINATOR,
    Opcode,
    switch_off_opcode,
    switch_on_opcode,
    white_mode_opcode,
)

PACKET_SIZE = 3


def _check_byte(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 0xFF:
        raise InvalidArgumentError(name, value, "an integer between 0x00 and 0xFF")
    return value


@dataclass(frozen=True)
class Packet:
    """One 3-byte command datagram."""

    opcode: int
    parameter: int = 0x00

    def __post_init__(self) -> None:
        _check_byte("opcode", self.opcode)
        _check_byte("parameter", self.parameter)

    @property
    def terminator(self) -> int:
        return TERMINATOR

    def __bytes__(self) -> bytes:
        return bytes((self.opcode, self.parameter, TERMINATOR))

    def to_list(self) -> list[int]:
        """Packet as a list of three ints."""
        return [self.opcode, self.parameter, TERMINATOR]

    def __repr__(self) -> str:
        return f"Packet([0x{self.opcode:02X}, 0x{self.parameter:02X}, 0x{TERMINATOR:02X}])"


def encode_one_byte(opcode: int) -> Packet:
    """Build a command without payload."""
    return Packet(_check_byte("opcode", opcode), 0x00)


def encode_two_byte(opcode: int, value: int) -> Packet:
    """Build a command carrying a one byte payload."""
    return Packet(_check_byte("opcode", opcode), _check_byte("value", value))


def decode(data: bytes) -> Packet:
    """
    Parse a received datagram back into a Packet.

    Args:
        data: Raw datagram payload

    Raises:
        InvalidArgumentError: If the payload is not a well-formed packet
    """
    if len(data) != PACKET_SIZE:
        raise InvalidArgumentError("packet", bytes(data), f"exactly {PACKET_SIZE} bytes")
    if data[2] != TERMINATOR:
        raise InvalidArgumentError("packet", bytes(data), f"terminator 0x{TERMINATOR:02X}")
    return Packet(data[0], data[1])


# =================================================================
# Command builders
# =================================================================

def switch_on(group: int) -> Packet:
    return encode_one_byte(switch_on_opcode(group))


def switch_off(group: int) -> Packet:
    return encode_one_byte(switch_off_opcode(group))


def white_mode(group: int) -> Packet:
    return encode_one_byte(white_mode_opcode(group))


def all_on() -> Packet:
    return encode_one_byte(Opcode.ALL_ON)


def all_off() -> Packet:
    return encode_one_byte(Opcode.ALL_OFF)


def all_white() -> Packet:
    return encode_one_byte(Opcode.ALL_WHITE)


def disco() -> Packet:
    return encode_one_byte(Opcode.DISCO)


def disco_faster() -> Packet:
    return encode_one_byte(Opcode.DISCO_FASTER)


def disco_slower() -> Packet:
    return encode_one_byte(Opcode.DISCO_SLOWER)


def color(hue: int) -> Packet:
    """
    Direct color command.

    Args:
        hue: Device hue (0x00-0xFF)
    """
    if isinstance(hue, bool) or not isinstance(hue, int) or not MIN_COLOR <= hue <= MAX_COLOR:
        raise InvalidArgumentError("color value", hue, f"between 0x{MIN_COLOR:02X} and 0x{MAX_COLOR:02X}")
    return encode_two_byte(Opcode.COLOR, hue)


def brightness(level: int) -> Packet:
    """
    Direct brightness command.

    Args:
        level: Device brightness (0x02-0x1B)
    """
    if (
        isinstance(level, bool)
        or not isinstance(level, int)
        or not MIN_BRIGHTNESS <= level <= MAX_BRIGHTNESS
    ):
        raise InvalidArgumentError(
            "brightness level", level, f"between 0x{MIN_BRIGHTNESS:02X} and 0x{MAX_BRIGHTNESS:02X}"
        )
    return encode_two_byte(Opcode.BRIGHTNESS, level)
