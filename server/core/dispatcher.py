from __future__ import annotations

import asyncio
import logging
from typing import Optional, Tuple

from shared.protocol.transport import StreamTransport
from shared.utils import format_peer

from .connection import ConnectionContext
from .connection_manager import ConnectionManager
from .handlers import ConnectionHandler, DatagramHandler
from .router import FrameRouter

logger = logging.getLogger(__name__)


class Dispatcher:
    """
    Serves TCP and UDP on the same port.

    The event loop multiplexes both sockets: every accepted TCP connection gets
    its own supervised handler task, and each UDP datagram is handled inline
    by DatagramHandler without holding up accepts.
    """

    def __init__(
        self,
        host: str,
        port: int,
        router: FrameRouter,
        connection_manager: ConnectionManager,
        backlog: int = 10,
    ) -> None:
        self.host = host
        self.port = port
        self.router = router
        self.connection_manager = connection_manager
        self.backlog = backlog
        self._tcp_server: Optional[asyncio.AbstractServer] = None
        self._udp_transport: Optional[asyncio.DatagramTransport] = None
        self._stopped = asyncio.Event()

    async def start(self) -> None:
        self._tcp_server = await asyncio.start_server(self._handle_client, self.host, self.port, backlog=self.backlog)
        # port 0 asks for an ephemeral port; UDP follows whatever TCP got
        bound_port = self._tcp_server.sockets[0].getsockname()[1]
        loop = asyncio.get_running_loop()
        try:
            self._udp_transport, _ = await loop.create_datagram_endpoint(
                lambda: DatagramHandler(self.router),
                local_addr=(self.host, bound_port),
            )
        except OSError:
            self._tcp_server.close()
            await self._tcp_server.wait_closed()
            self._tcp_server = None
            raise
        self.port = bound_port
        self._stopped.clear()
        logger.info("Server started on port %s (TCP + UDP)", self.port)

    @property
    def tcp_address(self) -> Optional[Tuple[str, int]]:
        if not self._tcp_server or not self._tcp_server.sockets:
            return None
        return self._tcp_server.sockets[0].getsockname()[:2]

    @property
    def udp_address(self) -> Optional[Tuple[str, int]]:
        if not self._udp_transport:
            return None
        return self._udp_transport.get_extra_info("sockname")[:2]

    async def serve_forever(self) -> None:
        await self._stopped.wait()

    async def stop(self) -> None:
        if self._stopped.is_set():
            return
        if self._tcp_server:
            self._tcp_server.close()
        if self._udp_transport:
            self._udp_transport.close()
        await self.connection_manager.close_all()
        if self._tcp_server:
            await self._tcp_server.wait_closed()
        self._tcp_server = None
        self._udp_transport = None
        self._stopped.set()
        logger.info("Server stopped")

    async def _handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        transport = StreamTransport(reader, writer)
        peer = format_peer(transport.peer)
        if not self.connection_manager.can_accept():
            logger.warning(
                "Rejected TCP connection from %s: limit of %s connections reached",
                peer,
                self.connection_manager.max_connections,
            )
            await transport.close()
            return

        logger.info("New TCP connection from %s - Connection Established", peer)
        ctx = ConnectionContext(transport=transport, peername=peer)
        task = asyncio.current_task()
        self.connection_manager.register(task, ctx)
        try:
            await ConnectionHandler(self.router, ctx).run()
        finally:
            self.connection_manager.unregister(task)
