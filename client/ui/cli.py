from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable

from client.core import ClientSession, Outcome, SessionState
from shared.protocol.commands import describe
from shared.protocol.constants import MAX_INPUT_LEN
from shared.protocol.messages import Frame
from shared.utils import format_peer

PROMPT = "\nEnter message (or 'quit' to exit): "


class PromptCLI:
    """Console loop feeding lines into a ClientSession."""

    def __init__(self, session: ClientSession, input_func: Callable[[str], str] = input) -> None:
        self.session = session
        self._input = input_func

    async def run(self) -> None:
        self._show_banner()
        while self.session.state is SessionState.READY:
            try:
                line = await self._read_line(PROMPT)
            except EOFError:
                line = "quit"
            outcome = await self.session.handle_input(line)
            self._report(outcome)
        print("Connection closed")

    async def _read_line(self, prompt: str) -> str:
        # daemon thread: a pending input() must not block interpreter exit
        loop = asyncio.get_running_loop()
        future: asyncio.Future[str] = loop.create_future()

        def deliver(result: str | None, error: BaseException | None) -> None:
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(result)

        def reader() -> None:
            try:
                result = (self._input(prompt), None)
            except Exception as exc:
                result = (None, exc)
            try:
                loop.call_soon_threadsafe(deliver, *result)
            except RuntimeError:
                # loop already closed; nobody is waiting for this line
                pass

        threading.Thread(target=reader, name="cli-input", daemon=True).start()
        return await future

    def _show_banner(self) -> None:
        network = self.session.network
        if network.is_tcp:
            print(f"Connected to server {network.host}:{network.port} using TCP")
        else:
            print(f"Using UDP for communication with server {network.host}:{network.port}")
        transport = self.session.transport
        if transport is not None and transport.local_address:
            print(f"Client running on {format_peer(transport.local_address)}")

    def _report(self, outcome: Outcome) -> None:
        match outcome:
            case Outcome.QUIT:
                if self.session.is_tcp:
                    print(f"Sent {describe(Frame.terminate().type)}")
            case Outcome.ENCODE_FAILED:
                print(f"Failed to encode message (1 to {MAX_INPUT_LEN} bytes allowed)")
            case Outcome.ACKED:
                print(f"Base64 encoded message: {self.session.last_encoded}")
                reply = self.session.last_reply
                if reply is not None:
                    print(f"Message Type: {reply.description}")
                    print(f"Server response: {reply.content}")
                print("Received acknowledgment from server")
            case Outcome.NO_ACK:
                print(f"Base64 encoded message: {self.session.last_encoded}")
                print("Failed to receive acknowledgment from server")
