"""
Transport bindings: one send/receive contract over a connected TCP stream or
an unconnected UDP endpoint paired with a target address.

`receive` never raises for disconnects or receive failures; it returns None
(end-of-stream) and lets the caller decide whether to close or carry on.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Tuple

from .constants import FRAME_SIZE
from .errors import TransportError
from .framing import async_read_frame, decode_frame, encode_frame
from .messages import Frame

logger = logging.getLogger(__name__)

Address = Tuple[str, int]


class Transport:
    """Common interface of the stream and datagram bindings."""

    is_stream: bool = False

    @property
    def peer(self) -> Optional[Address]:
        raise NotImplementedError

    @property
    def local_address(self) -> Optional[Address]:
        raise NotImplementedError

    async def send(self, frame: Frame) -> None:
        raise NotImplementedError

    async def receive(self, timeout: Optional[float] = None) -> Optional[Frame]:
        raise NotImplementedError

    def discard_pending(self) -> int:
        """Drop replies that arrived after their exchange gave up on them."""
        return 0

    async def close(self) -> None:
        raise NotImplementedError


class StreamTransport(Transport):
    is_stream = True

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.reader = reader
        self.writer = writer

    @property
    def peer(self) -> Optional[Address]:
        return self.writer.get_extra_info("peername")

    @property
    def local_address(self) -> Optional[Address]:
        return self.writer.get_extra_info("sockname")

    async def send(self, frame: Frame) -> None:
        try:
            self.writer.write(encode_frame(frame))
            await self.writer.drain()
        except (ConnectionError, OSError) as exc:
            raise TransportError(f"Send failed: {exc}") from exc

    async def receive(self, timeout: Optional[float] = None) -> Optional[Frame]:
        try:
            if timeout:
                return await asyncio.wait_for(async_read_frame(self.reader), timeout)
            return await async_read_frame(self.reader)
        except asyncio.TimeoutError:
            logger.debug("No frame from %s within %.1fs", self.peer, timeout)
            return None
        except (ConnectionError, OSError) as exc:
            logger.debug("Receive from %s failed: %s", self.peer, exc)
            return None

    async def close(self) -> None:
        if self.writer.is_closing():
            return
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except (ConnectionError, OSError) as exc:
            logger.debug("Error during writer cleanup: %s", exc)


class DatagramQueue(asyncio.DatagramProtocol):
    """Queues incoming datagrams for DatagramTransport.receive."""

    def __init__(self) -> None:
        self.queue: "asyncio.Queue[Tuple[Optional[bytes], Any]]" = asyncio.Queue()

    def datagram_received(self, data: bytes, addr: Address) -> None:
        self.queue.put_nowait((data, addr))

    def error_received(self, exc: Exception) -> None:
        self.queue.put_nowait((None, exc))

    def connection_lost(self, exc: Optional[Exception]) -> None:
        self.queue.put_nowait((None, exc))


class DatagramTransport(Transport):
    def __init__(
        self,
        transport: asyncio.DatagramTransport,
        protocol: DatagramQueue,
        target: Address,
    ) -> None:
        self.transport = transport
        self.protocol = protocol
        self.target = target

    @property
    def peer(self) -> Optional[Address]:
        return self.target

    @property
    def local_address(self) -> Optional[Address]:
        return self.transport.get_extra_info("sockname")

    async def send(self, frame: Frame) -> None:
        if self.transport.is_closing():
            raise TransportError("Datagram endpoint is closed")
        try:
            self.transport.sendto(encode_frame(frame), self.target)
        except OSError as exc:
            raise TransportError(f"Send failed: {exc}") from exc

    def discard_pending(self) -> int:
        dropped = 0
        while True:
            try:
                self.protocol.queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            dropped += 1
        if dropped:
            logger.debug("Discarded %d stale datagram(s) from %s", dropped, self.target)
        return dropped

    async def receive(self, timeout: Optional[float] = None) -> Optional[Frame]:
        """
        Wait for the next frame from the target address.
        Datagrams from any other source are dropped and do not end the wait.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout if timeout else None
        while True:
            try:
                if deadline is not None:
                    data, source = await asyncio.wait_for(self.protocol.queue.get(), max(deadline - loop.time(), 0))
                else:
                    data, source = await self.protocol.queue.get()
            except asyncio.TimeoutError:
                logger.debug("No datagram within %.1fs", timeout)
                return None
            if data is None:
                logger.warning("Failed to receive UDP message: %s", source)
                return None
            if tuple(source[:2]) != tuple(self.target):
                logger.warning("Ignored datagram from unexpected source %s", source)
                continue
            if len(data) != FRAME_SIZE:
                logger.warning("Dropped %d byte datagram from %s (expected %d)", len(data), source, FRAME_SIZE)
                return None
            return decode_frame(data)

    async def close(self) -> None:
        if not self.transport.is_closing():
            self.transport.close()


async def open_stream(host: str, port: int) -> StreamTransport:
    reader, writer = await asyncio.open_connection(host, port)
    return StreamTransport(reader, writer)


async def open_datagram(host: str, port: int) -> DatagramTransport:
    loop = asyncio.get_running_loop()
    transport, protocol = await loop.create_datagram_endpoint(DatagramQueue, local_addr=("0.0.0.0", 0))
    return DatagramTransport(transport, protocol, (host, port))


__all__ = [
    "Address",
    "Transport",
    "StreamTransport",
    "DatagramQueue",
    "DatagramTransport",
    "open_stream",
    "open_datagram",
]
