"""Protocol-wide constants shared by client and server."""

import struct

ENCODING = "utf-8"

MSG_LEN = 1024  # content buffer including NUL terminator
MAX_INPUT_LEN = 768  # ceil(768 / 3) * 4 == MSG_LEN

FRAME_FORMAT = "<i%ds" % MSG_LEN  # type (int32) + fixed content buffer
FRAME_SIZE = struct.calcsize(FRAME_FORMAT)

ACK_CONTENT = "ACK"
TERMINATE_CONTENT = "TERMINATE"

BASE64_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
BASE64_PAD = "="

__all__ = [
    "ENCODING",
    "MSG_LEN",
    "MAX_INPUT_LEN",
    "FRAME_FORMAT",
    "FRAME_SIZE",
    "ACK_CONTENT",
    "TERMINATE_CONTENT",
    "BASE64_ALPHABET",
    "BASE64_PAD",
]
