from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from client.config import CLIENT_CONFIG
from shared.protocol.errors import ErrorCode, ProtocolError, StatusCode
from shared.protocol.transport import Transport, open_datagram, open_stream

logger = logging.getLogger(__name__)

PROTOCOLS = ("tcp", "udp")


class NetworkError(ProtocolError):
    """Network level error surfaced to higher layers."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.CONNECT_FAILED) -> None:
        super().__init__(StatusCode.SERVICE_UNAVAILABLE, code, message)


class NetworkClient:
    """Establishes the transport binding for one session."""

    def __init__(self, host: str, port: int, protocol: str, config: Optional[Dict[str, Any]] = None) -> None:
        if protocol not in PROTOCOLS:
            raise ValueError(f"Protocol must be 'tcp' or 'udp', got {protocol!r}")
        self.config = config or CLIENT_CONFIG
        self.host = host
        self.port = port
        self.protocol = protocol
        self.max_retries: int = int(self.config["connect_retries"])
        self.backoff: float = float(self.config["reconnect_backoff"])
        self.max_backoff: float = float(self.config["max_reconnect_backoff"])

    @property
    def is_tcp(self) -> bool:
        return self.protocol == "tcp"

    async def connect(self) -> Transport:
        if not self.is_tcp:
            try:
                transport = await open_datagram(self.host, self.port)
            except OSError as exc:
                raise NetworkError(f"Failed to create UDP socket: {exc}") from exc
            logger.info("Using UDP for communication with server %s:%s", self.host, self.port)
            return transport

        retries = 0
        delay = self.backoff
        while True:
            try:
                transport = await open_stream(self.host, self.port)
                logger.info("Connected to server %s:%s using TCP", self.host, self.port)
                return transport
            except OSError as exc:
                retries += 1
                logger.warning("Connect attempt %s failed: %s", retries, exc)
                if retries > self.max_retries:
                    raise NetworkError(f"Failed to connect to server {self.host}:{self.port}: {exc}") from exc
                await asyncio.sleep(delay)
                delay = min(delay * 2, self.max_backoff)
