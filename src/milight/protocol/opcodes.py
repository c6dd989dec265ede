"""Opcode table for the WiFi box command protocol.

Group addressed opcodes follow a fixed layout::

    group N on    = 0x45 + 2 * (N - 1)     0x45 0x47 0x49 0x4B
    group N off   = 0x46 + 2 * (N - 1)     0x46 0x48 0x4A 0x4C
    group N white = group N on + 0x80      0xC5 0xC7 0xC9 0xCB

Everything else is group-less and acts on whichever group was addressed
last by an on/off command (the "active group").
"""

from enum import IntEnum
from typing import Optional

from milight.exceptions import InvalidArgumentError

GROUPS = (1, 2, 3, 4)

# Parameter ranges accepted by the two-byte commands
MIN_COLOR = 0x00
MAX_COLOR = 0xFF
MIN_BRIGHTNESS = 0x02
MAX_BRIGHTNESS = 0x1B

TERMINATOR = 0x55

_WHITE_OFFSET = 0x80


class Opcode(IntEnum):
    """Every opcode understood by the box."""

    ALL_OFF = 0x41
    ALL_ON = 0x42
    ALL_WHITE = 0xC2

    GROUP_1_ON = 0x45
    GROUP_1_OFF = 0x46
    GROUP_2_ON = 0x47
    GROUP_2_OFF = 0x48
    GROUP_3_ON = 0x49
    GROUP_3_OFF = 0x4A
    GROUP_4_ON = 0x4B
    GROUP_4_OFF = 0x4C

    GROUP_1_WHITE = 0xC5
    GROUP_2_WHITE = 0xC7
    GROUP_3_WHITE = 0xC9
    GROUP_4_WHITE = 0xCB

    DISCO = 0x4D
    DISCO_FASTER = 0x44
    DISCO_SLOWER = 0x43

    COLOR = 0x40
    BRIGHTNESS = 0x4E


def validate_group(group: int) -> int:
    """Return group unchanged, or raise InvalidArgumentError outside 1-4."""
    if isinstance(group, bool) or group not in GROUPS:
        raise InvalidArgumentError("group", group, "between 1 and 4")
    return group


def switch_on_opcode(group: int) -> Opcode:
    """Opcode switching on (and addressing) one group."""
    return Opcode(Opcode.GROUP_1_ON + 2 * (validate_group(group) - 1))


def switch_off_opcode(group: int) -> Opcode:
    """Opcode switching off (and addressing) one group."""
    return Opcode(Opcode.GROUP_1_OFF + 2 * (validate_group(group) - 1))


def white_mode_opcode(group: int) -> Opcode:
    """Opcode putting one group into white mode."""
    return Opcode(switch_on_opcode(group) + _WHITE_OFFSET)


_GROUP_BY_ADDRESSING_OPCODE = {
    **{switch_on_opcode(g): g for g in GROUPS},
    **{switch_off_opcode(g): g for g in GROUPS},
}


def group_for_opcode(opcode: int) -> Optional[int]:
    """
    Return the group latched as active by an opcode.

    Only the per-group on/off opcodes change the active group.

    Args:
        opcode: Raw opcode byte

    Returns:
        Group number, or None if the opcode does not address a group
    """
    return _GROUP_BY_ADDRESSING_OPCODE.get(opcode)
