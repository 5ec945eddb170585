from __future__ import annotations

from enum import IntEnum
from typing import Dict, Union


class MsgType(IntEnum):
    """
    Frame types understood by client and server.
    Any other int32 is legal on the wire and handled as a logged no-op.
    """

    DATA = 1
    ACK = 2
    TERMINATE = 3


DESCRIPTIONS: Dict[int, str] = {
    MsgType.DATA.value: "Type 1: Base64-encoded message",
    MsgType.ACK.value: "Type 2: Acknowledgment (ACK) message",
    MsgType.TERMINATE.value: "Type 3: Termination message",
}


def normalize_command(command: Union[int, MsgType]) -> int:
    """Convert enum/int into the raw wire value."""
    return command.value if isinstance(command, MsgType) else int(command)


def is_command(value: int) -> bool:
    """Check if `value` is a known frame type."""
    try:
        MsgType(value)
        return True
    except ValueError:
        return False


def describe(command: Union[int, MsgType]) -> str:
    """Human-readable label for console output."""
    value = normalize_command(command)
    return DESCRIPTIONS.get(value, f"Unknown message type: {value}")


__all__ = [
    "MsgType",
    "DESCRIPTIONS",
    "normalize_command",
    "is_command",
    "describe",
]
