from __future__ import annotations

import time
from typing import Any


def format_peer(addr: Any) -> str:
    """Render a socket address as ip:port for log lines."""
    if isinstance(addr, (tuple, list)) and len(addr) >= 2:
        return f"{addr[0]}:{addr[1]}"
    return str(addr)


def utc_timestamp() -> float:
    """Current UTC timestamp in seconds."""
    return time.time()


__all__ = ["format_peer", "utc_timestamp"]
