"""
Shared protocol package that centralizes frame types, the Base64 codec, the
wire framing and the transport bindings for both client and server.
"""

from .codec import decode, encode
from .commands import MsgType, describe, is_command, normalize_command
from .constants import ACK_CONTENT, ENCODING, FRAME_SIZE, MAX_INPUT_LEN, MSG_LEN, TERMINATE_CONTENT
from .errors import CodecError, ErrorCode, FrameError, ProtocolError, StatusCode, TransportError
from .framing import async_read_frame, decode_frame, encode_frame
from .messages import Frame
from .transport import DatagramTransport, StreamTransport, Transport, open_datagram, open_stream

__all__ = [
    "MsgType",
    "describe",
    "is_command",
    "normalize_command",
    "ACK_CONTENT",
    "ENCODING",
    "FRAME_SIZE",
    "MAX_INPUT_LEN",
    "MSG_LEN",
    "TERMINATE_CONTENT",
    "CodecError",
    "ErrorCode",
    "FrameError",
    "ProtocolError",
    "StatusCode",
    "TransportError",
    "encode",
    "decode",
    "encode_frame",
    "decode_frame",
    "async_read_frame",
    "Frame",
    "Transport",
    "StreamTransport",
    "DatagramTransport",
    "open_stream",
    "open_datagram",
]
