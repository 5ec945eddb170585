from __future__ import annotations

import argparse
import asyncio
import ipaddress
import logging
import sys
from typing import Optional

from client.config import CLIENT_CONFIG, ConfigError, load_config
from client.core import ClientSession, NetworkClient, NetworkError
from client.core.network import PROTOCOLS
from client.ui.cli import PromptCLI
from shared.settings import setup_logging

logger = logging.getLogger(__name__)


async def run_client(host: str, port: int, protocol: str) -> int:
    network = NetworkClient(host, port, protocol)
    session = ClientSession(network)
    try:
        await session.open()
    except NetworkError as exc:
        logger.error("%s", exc.message)
        return 1

    cli = PromptCLI(session)
    try:
        await cli.run()
    finally:
        await session.close()
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="client", description="Send Base64-encoded messages over TCP or UDP.")
    parser.add_argument("server_ip")
    parser.add_argument("server_port", type=int)
    parser.add_argument("protocol", choices=PROTOCOLS, help="Protocol can be 'tcp' or 'udp'")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not (1 <= args.server_port <= 65535):
        parser.error("server_port must be between 1 and 65535")

    try:
        ipaddress.IPv4Address(args.server_ip)
    except ValueError:
        print(f"Invalid server IP address: {args.server_ip}", file=sys.stderr)
        return 1

    try:
        load_config()
        setup_logging(CLIENT_CONFIG["log_level"])
    except (ConfigError, ValueError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    try:
        return asyncio.run(run_client(args.server_ip, args.server_port, args.protocol))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
