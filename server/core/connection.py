from __future__ import annotations

from dataclasses import dataclass, field

from shared.protocol.transport import StreamTransport
from shared.utils import utc_timestamp


@dataclass
class ConnectionContext:
    transport: StreamTransport
    peername: str
    frames_received: int = 0
    opened_at: float = field(default_factory=utc_timestamp)
    last_seen: float = field(default_factory=utc_timestamp)

    def touch(self) -> None:
        self.frames_received += 1
        self.last_seen = utc_timestamp()
