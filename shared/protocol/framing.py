from __future__ import annotations

import asyncio
import struct
from typing import Optional

from .constants import ENCODING, FRAME_FORMAT, FRAME_SIZE, MSG_LEN
from .errors import FrameError
from .messages import Frame

_FRAME = struct.Struct(FRAME_FORMAT)


def encode_frame(frame: Frame) -> bytes:
    """
    Pack a frame into its fixed-size wire form.
    Content is truncated at byte level to MSG_LEN - 1 bytes, backing off to the
    last whole character so no multi-byte sequence is split. The rest of the
    buffer is NUL padded so the receiver always finds a terminator.
    """
    content = frame.content.encode(ENCODING)
    if len(content) > MSG_LEN - 1:
        content = content[: MSG_LEN - 1].decode(ENCODING, errors="ignore").encode(ENCODING)
    return _FRAME.pack(frame.type, content)


def decode_frame(data: bytes) -> Frame:
    """Unpack exactly FRAME_SIZE bytes into a frame."""
    if len(data) != FRAME_SIZE:
        raise FrameError(f"Expected {FRAME_SIZE} bytes, got {len(data)}")
    msg_type, raw = _FRAME.unpack(data)
    content = raw.split(b"\x00", 1)[0].decode(ENCODING, errors="replace")
    return Frame(type=msg_type, content=content)


async def async_read_frame(reader: asyncio.StreamReader) -> Optional[Frame]:
    """
    Read a single frame from the stream.
    Returns None on end-of-stream, including a frame cut short by the peer.
    """
    try:
        data = await reader.readexactly(FRAME_SIZE)
    except asyncio.IncompleteReadError:
        return None
    return decode_frame(data)


__all__ = ["encode_frame", "decode_frame", "async_read_frame"]
