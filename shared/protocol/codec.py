"""
Base64 codec (RFC 4648 alphabet and padding) used for DATA frame payloads.

Both directions are pure functions. The reverse lookup table is an immutable
tuple built once at import time.
"""

from __future__ import annotations

from typing import Tuple, Union

from .constants import BASE64_ALPHABET, BASE64_PAD, ENCODING, MAX_INPUT_LEN
from .errors import CodecError, ErrorCode

INVALID = -1


def _build_decode_table() -> Tuple[int, ...]:
    table = [INVALID] * 256
    for index, char in enumerate(BASE64_ALPHABET):
        table[ord(char)] = index
    return tuple(table)


DECODE_TABLE: Tuple[int, ...] = _build_decode_table()


def encode(data: Union[bytes, str]) -> str:
    """
    Encode up to MAX_INPUT_LEN bytes into padded Base64 text.

    Text input is encoded with ENCODING first. Empty input is an error rather
    than an empty string.
    """
    if isinstance(data, str):
        data = data.encode(ENCODING)
    if not data:
        raise CodecError(ErrorCode.EMPTY_INPUT, "Nothing to encode")
    if len(data) > MAX_INPUT_LEN:
        raise CodecError(
            ErrorCode.INPUT_TOO_LARGE,
            f"Input of {len(data)} bytes exceeds {MAX_INPUT_LEN} byte limit",
        )

    out = []
    for start in range(0, len(data), 3):
        group = data[start : start + 3]
        triple = int.from_bytes(group.ljust(3, b"\x00"), "big")
        out.append(BASE64_ALPHABET[(triple >> 18) & 0x3F])
        out.append(BASE64_ALPHABET[(triple >> 12) & 0x3F])
        out.append(BASE64_ALPHABET[(triple >> 6) & 0x3F] if len(group) > 1 else BASE64_PAD)
        out.append(BASE64_ALPHABET[triple & 0x3F] if len(group) > 2 else BASE64_PAD)
    return "".join(out)


def _padding(text: str) -> int:
    padding = len(text) - len(text.rstrip(BASE64_PAD))
    if padding > 2:
        raise CodecError(ErrorCode.INVALID_PADDING, f"Too much padding ({padding} '=' characters)")
    if BASE64_PAD in text[: len(text) - padding]:
        raise CodecError(ErrorCode.INVALID_PADDING, "Padding character inside the data")
    return padding


def decode(text: str) -> bytes:
    """
    Decode padded Base64 text.

    Malformed input (wrong length, foreign characters, misplaced padding)
    raises CodecError instead of producing garbage.
    """
    if not text:
        raise CodecError(ErrorCode.EMPTY_INPUT, "Nothing to decode")
    if len(text) % 4:
        raise CodecError(ErrorCode.INVALID_LENGTH, f"Length {len(text)} is not a multiple of 4")

    padding = _padding(text)
    values = []
    for position, char in enumerate(text[: len(text) - padding]):
        code = ord(char)
        value = DECODE_TABLE[code] if code < 256 else INVALID
        if value == INVALID:
            raise CodecError(ErrorCode.INVALID_CHARACTER, f"Invalid character {char!r} at position {position}")
        values.append(value)
    values.extend([0] * padding)

    output_len = len(text) * 3 // 4 - padding
    output = bytearray()
    for start in range(0, len(values), 4):
        a, b, c, d = values[start : start + 4]
        triple = (a << 18) | (b << 12) | (c << 6) | d
        output.extend(((triple >> 16) & 0xFF, (triple >> 8) & 0xFF, triple & 0xFF))
    del output[output_len:]
    return bytes(output)


__all__ = ["encode", "decode", "DECODE_TABLE"]
