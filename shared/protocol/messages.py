from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .commands import MsgType, describe
from .constants import ACK_CONTENT, TERMINATE_CONTENT
from .errors import ProtocolError, StatusCode

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


class Frame(BaseModel):
    """One {type, content} unit exchanged as a single transport operation."""

    model_config = ConfigDict(frozen=True)

    type: int = Field(..., ge=INT32_MIN, le=INT32_MAX, description="Frame type, see MsgType")
    content: str = Field(default="", description="Text carried in the fixed content buffer")

    @property
    def kind(self) -> Optional[MsgType]:
        try:
            return MsgType(self.type)
        except ValueError:
            return None

    @property
    def description(self) -> str:
        return describe(self.type)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Frame":
        try:
            return cls(**data)
        except ValidationError as exc:
            raise ProtocolError(StatusCode.BAD_REQUEST, message=f"Frame validation failed: {exc}") from exc

    @classmethod
    def data(cls, encoded: str) -> "Frame":
        return cls(type=MsgType.DATA.value, content=encoded)

    @classmethod
    def ack(cls) -> "Frame":
        return cls(type=MsgType.ACK.value, content=ACK_CONTENT)

    @classmethod
    def terminate(cls) -> "Frame":
        return cls(type=MsgType.TERMINATE.value, content=TERMINATE_CONTENT)


__all__ = ["Frame", "INT32_MIN", "INT32_MAX"]
