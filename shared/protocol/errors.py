from __future__ import annotations

from enum import IntEnum
from typing import Optional


class StatusCode(IntEnum):
    """Coarse outcome classes used across the protocol layers."""

    BAD_REQUEST = 400
    INTERNAL_ERROR = 500
    SERVICE_UNAVAILABLE = 503


class ErrorCode(IntEnum):
    """Domain specific error codes."""

    EMPTY_INPUT = 1001
    INPUT_TOO_LARGE = 1002
    INVALID_LENGTH = 1003
    INVALID_CHARACTER = 1004
    INVALID_PADDING = 1005
    FRAME_SIZE_MISMATCH = 1006
    CONNECTION_LOST = 1007
    CONNECT_FAILED = 1008


class ProtocolError(Exception):
    """Structured protocol exception carrying status + code + message."""

    def __init__(self, status: StatusCode, code: Optional[ErrorCode] = None, message: str = "") -> None:
        self.status = status
        self.code = code
        self.message = message
        super().__init__(f"{status.name} ({int(status)}): {message} (code={code.name if code else 'n/a'})")


class CodecError(ProtocolError):
    """Base64 encode/decode failure."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(StatusCode.BAD_REQUEST, code, message)


class FrameError(ProtocolError):
    """Raw bytes could not be turned into a frame."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.FRAME_SIZE_MISMATCH) -> None:
        super().__init__(StatusCode.BAD_REQUEST, code, message)


class TransportError(ProtocolError):
    """Socket level failure while sending."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.CONNECTION_LOST) -> None:
        super().__init__(StatusCode.INTERNAL_ERROR, code, message)


__all__ = ["StatusCode", "ErrorCode", "ProtocolError", "CodecError", "FrameError", "TransportError"]
