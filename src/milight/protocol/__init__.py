"""Wire protocol of the WiFi box: opcodes and 3-byte packets."""

from . import codec
from .codec import PACKET_SIZE, Packet, decode, encode_one_byte, encode_two_byte
from .opcodes import (
    GROUPS,
    MAX_BRIGHTNESS,
    MAX_COLOR,
    MIN_BRIGHTNESS,
    MIN_COLOR,
    TERMINATOR,
    Opcode,
    group_for_opcode,
    switch_off_opcode,
    switch_on_opcode,
    validate_group,
    white_mode_opcode,
)

__all__ = [
    "GROUPS",
    "MAX_BRIGHTNESS",
    "MAX_COLOR",
    "MIN_BRIGHTNESS",
    "MIN_COLOR",
    "Opcode",
    "PACKET_SIZE",
    "Packet",
    "TERMINATOR",
    "codec",
    "decode",
    "encode_one_byte",
    "encode_two_byte",
    "group_for_opcode",
    "switch_off_opcode",
    "switch_on_opcode",
    "validate_group",
    "white_mode_opcode",
]
