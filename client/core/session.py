from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional

from client.config import CLIENT_CONFIG
from shared.protocol import codec
from shared.protocol.commands import MsgType
from shared.protocol.errors import CodecError, ProtocolError, StatusCode, TransportError
from shared.protocol.messages import Frame
from shared.protocol.transport import Transport

from .network import NetworkClient

logger = logging.getLogger(__name__)

QUIT_COMMAND = "quit"


class SessionError(ProtocolError):
    def __init__(self, message: str) -> None:
        super().__init__(StatusCode.BAD_REQUEST, message=message)


class SessionState(Enum):
    CONNECTING = "connecting"
    READY = "ready"
    AWAITING_ACK = "awaiting_ack"
    TERMINATED = "terminated"


class Outcome(Enum):
    ACKED = "acked"
    ENCODE_FAILED = "encode_failed"
    NO_ACK = "no_ack"
    QUIT = "quit"


class ClientSession:
    """
    Lock-step send/acknowledge loop over one transport.

    Each non-quit input is Base64-encoded, sent as a DATA frame and followed by
    a blocking wait for exactly one frame. Over UDP a missing ACK is tolerated;
    over TCP it means the connection is gone and the session terminates.
    """

    def __init__(self, network: NetworkClient, config: Optional[Dict[str, Any]] = None) -> None:
        self.network = network
        self.config = config or CLIENT_CONFIG
        self.state = SessionState.CONNECTING
        self.transport: Optional[Transport] = None
        self.last_encoded: Optional[str] = None
        self.last_reply: Optional[Frame] = None

    @property
    def is_tcp(self) -> bool:
        return self.network.is_tcp

    @property
    def ack_timeout(self) -> Optional[float]:
        key = "ack_timeout" if self.is_tcp else "udp_ack_timeout"
        return float(self.config[key]) or None

    async def open(self) -> None:
        self.state = SessionState.CONNECTING
        try:
            self.transport = await self.network.connect()
        except Exception:
            self.state = SessionState.TERMINATED
            raise
        self.state = SessionState.READY

    async def handle_input(self, line: str) -> Outcome:
        if self.state is not SessionState.READY:
            raise SessionError(f"Session is {self.state.value}, not ready for input")
        text = line.rstrip("\r\n")
        if text == QUIT_COMMAND:
            await self.quit()
            return Outcome.QUIT

        try:
            encoded = codec.encode(text)
        except CodecError as exc:
            logger.warning("Failed to encode message: %s", exc.message)
            return Outcome.ENCODE_FAILED
        self.last_encoded = encoded
        return await self._exchange(Frame.data(encoded))

    async def _exchange(self, frame: Frame) -> Outcome:
        if self.transport is None:
            raise SessionError("Session has no open transport")
        self.last_reply = None
        self.transport.discard_pending()
        try:
            await self.transport.send(frame)
        except TransportError as exc:
            logger.warning("Send failed: %s", exc.message)
            return await self._no_ack()

        self.state = SessionState.AWAITING_ACK
        reply = await self.transport.receive(timeout=self.ack_timeout)
        self.last_reply = reply
        if reply is not None and reply.type == MsgType.ACK:
            logger.info("Server response: %s", reply.content)
            self.state = SessionState.READY
            return Outcome.ACKED

        if reply is None:
            logger.warning("Failed to receive acknowledgment from server")
        else:
            logger.warning("Expected ACK, got %s", reply.description)
        return await self._no_ack()

    async def _no_ack(self) -> Outcome:
        if self.is_tcp:
            await self.close()
        else:
            self.state = SessionState.READY
        return Outcome.NO_ACK

    async def quit(self) -> None:
        if self.is_tcp and self.transport is not None and self.state is SessionState.READY:
            logger.info("Sending termination message")
            try:
                await self.transport.send(Frame.terminate())
            except TransportError as exc:
                logger.warning("Termination message failed: %s", exc.message)
        await self.close()

    async def close(self) -> None:
        if self.state is SessionState.TERMINATED:
            return
        self.state = SessionState.TERMINATED
        if self.transport is not None:
            await self.transport.close()
        logger.info("Connection closed")
