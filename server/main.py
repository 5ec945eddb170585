from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional

from server.config import SERVER_CONFIG, ConfigError, load_server_config
from server.core import ConnectionManager, Dispatcher, FrameRouter
from server.services import MessageService
from shared.protocol.commands import MsgType
from shared.settings import setup_logging

logger = logging.getLogger(__name__)


def build_dispatcher(host: str, port: int, max_connections: int = 0, backlog: int = 10) -> Dispatcher:
    message_service = MessageService()
    router = FrameRouter()
    router.register(MsgType.DATA, message_service.handle_data)
    return Dispatcher(host, port, router, ConnectionManager(max_connections), backlog=backlog)


async def run_server(host: str, port: int, max_connections: int = 0, backlog: int = 10) -> int:
    dispatcher = build_dispatcher(host, port, max_connections, backlog)
    try:
        await dispatcher.start()
    except OSError as exc:
        logger.error("Failed to bind TCP/UDP sockets on %s:%s: %s", host, port, exc)
        return 1
    try:
        await dispatcher.serve_forever()
    finally:
        await dispatcher.stop()
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="server", description="Base64 message server (TCP + UDP on one port).")
    parser.add_argument("port", type=int, help="port bound for both TCP and UDP")
    parser.add_argument("--host", default=None, help="bind address (default from SERVER_HOST)")
    parser.add_argument("--max-connections", type=int, default=None, help="0 means unlimited")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not (0 <= args.port <= 65535):
        parser.error("port must be between 0 and 65535")

    try:
        load_server_config()
        setup_logging(SERVER_CONFIG["log_level"])
    except (ConfigError, ValueError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    host = args.host or SERVER_CONFIG["host"]
    max_connections = SERVER_CONFIG["max_connections"] if args.max_connections is None else args.max_connections
    try:
        return asyncio.run(run_server(host, args.port, max_connections, SERVER_CONFIG["backlog"]))
    except KeyboardInterrupt:
        logger.info("Interrupted, server shut down")
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
