from __future__ import annotations

import asyncio
import logging
from typing import Optional, Tuple

from shared.protocol.commands import MsgType
from shared.protocol.errors import FrameError, TransportError
from shared.protocol.framing import decode_frame, encode_frame
from shared.utils import format_peer

from .connection import ConnectionContext
from .router import FrameRouter

logger = logging.getLogger(__name__)


class ConnectionHandler:
    """Receive/decode/ack loop for one accepted TCP connection."""

    def __init__(self, router: FrameRouter, ctx: ConnectionContext) -> None:
        self.router = router
        self.ctx = ctx
        self.label = f"TCP Client {ctx.peername}"

    async def run(self) -> None:
        transport = self.ctx.transport
        try:
            while True:
                frame = await transport.receive()
                if frame is None:
                    logger.info("[%s] Disconnected", self.label)
                    break
                self.ctx.touch()
                logger.info("[%s] %s", self.label, frame.description)

                if frame.type == MsgType.TERMINATE:
                    logger.info("[%s] Requested termination", self.label)
                    break

                reply = self.router.dispatch(frame, self.label)
                if reply is None:
                    continue
                await transport.send(reply)
                logger.info("[%s] Sent %s", self.label, reply.description)
        except TransportError as exc:
            logger.warning("[%s] Connection lost: %s", self.label, exc.message)
        except asyncio.CancelledError:
            logger.info("[%s] Shutting down", self.label)
            raise
        except Exception as exc:
            logger.exception("[%s] Unhandled error: %s", self.label, exc)
        finally:
            await transport.close()
            logger.info("[%s] Connection closed", self.label)


class DatagramHandler(asyncio.DatagramProtocol):
    """Stateless per-datagram handler; replies go to each datagram's source."""

    def __init__(self, router: FrameRouter) -> None:
        self.router = router
        self.transport: Optional[asyncio.DatagramTransport] = None

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self.transport = transport  # type: ignore[assignment]

    def datagram_received(self, data: bytes, addr: Tuple[str, int]) -> None:
        label = f"UDP Client {format_peer(addr)}"
        try:
            frame = decode_frame(data)
        except FrameError as exc:
            logger.warning("[%s] Failed to receive UDP message: %s", label, exc.message)
            return

        logger.info("[%s] %s", label, frame.description)
        reply = self.router.dispatch(frame, label)
        if reply is None or self.transport is None:
            return
        self.transport.sendto(encode_frame(reply), addr)
        logger.info("[%s] Sent %s", label, reply.description)

    def error_received(self, exc: Exception) -> None:
        logger.warning("UDP endpoint error: %s", exc)
