from __future__ import annotations

import struct

import pytest

from shared.protocol import (
    FRAME_SIZE,
    MSG_LEN,
    Frame,
    FrameError,
    MsgType,
    ProtocolError,
    decode_frame,
    describe,
    encode_frame,
    is_command,
)


def test_frame_encode_decode_roundtrip():
    frame = Frame.data("aGk=")
    raw = encode_frame(frame)
    assert len(raw) == FRAME_SIZE
    decoded = decode_frame(raw)
    assert decoded == frame
    assert decoded.kind is MsgType.DATA


def test_wire_layout_matches_c_struct():
    raw = encode_frame(Frame.ack())
    msg_type, content = struct.unpack("<i1024s", raw)
    assert msg_type == 2
    assert content.startswith(b"ACK\x00")
    assert content[3:] == b"\x00" * (MSG_LEN - 3)


def test_content_is_truncated_to_buffer():
    frame = Frame(type=MsgType.DATA, content="A" * 5000)
    raw = encode_frame(frame)
    assert len(raw) == FRAME_SIZE
    assert raw[-1:] == b"\x00"
    assert decode_frame(raw).content == "A" * (MSG_LEN - 1)


def test_truncation_keeps_multibyte_characters_whole():
    # two-byte characters; MSG_LEN - 1 is odd so the cut falls mid-character
    raw = encode_frame(Frame(type=MsgType.DATA, content="\u00e9" * 600))
    content = decode_frame(raw).content
    assert content == "\u00e9" * ((MSG_LEN - 1) // 2)
    assert "\ufffd" not in content


def test_content_stops_at_first_nul():
    raw = struct.pack("<i1024s", 1, b"aGk=\x00garbage")
    assert decode_frame(raw).content == "aGk="


def test_decode_rejects_wrong_size():
    with pytest.raises(FrameError):
        decode_frame(b"\x01\x00\x00\x00")
    with pytest.raises(FrameError):
        decode_frame(encode_frame(Frame.ack()) + b"\x00")


def test_unknown_type_is_carried():
    frame = decode_frame(struct.pack("<i1024s", 42, b"x"))
    assert frame.type == 42
    assert frame.kind is None
    assert frame.description == "Unknown message type: 42"


def test_frame_type_range():
    with pytest.raises(ProtocolError):
        Frame.from_dict({"type": 2**31, "content": ""})


def test_helpers():
    assert Frame.terminate().content == "TERMINATE"
    assert describe(MsgType.ACK) == "Type 2: Acknowledgment (ACK) message"
    assert is_command(3)
    assert not is_command(0)
