from __future__ import annotations

import asyncio
import logging

from server.core import ConnectionManager, Dispatcher, FrameRouter
from server.main import build_dispatcher
from server.services import MessageService
from shared.protocol import FRAME_SIZE, Frame, MsgType, decode_frame, encode_frame, open_datagram, open_stream

HOST = "127.0.0.1"
TIMEOUT = 2.0
SILENCE = 0.3


def _dispatcher(max_connections: int = 0) -> tuple[Dispatcher, MessageService]:
    service = MessageService()
    router = FrameRouter()
    router.register(MsgType.DATA, service.handle_data)
    return Dispatcher(HOST, 0, router, ConnectionManager(max_connections)), service


async def _wait_for_idle(dispatcher: Dispatcher) -> None:
    for _ in range(50):
        if dispatcher.connection_manager.active_count == 0:
            return
        await asyncio.sleep(0.02)


def test_tcp_and_udp_share_one_port():
    async def scenario():
        dispatcher = build_dispatcher(HOST, 0)
        await dispatcher.start()
        try:
            assert dispatcher.tcp_address[1] == dispatcher.udp_address[1] == dispatcher.port
        finally:
            await dispatcher.stop()

    asyncio.run(scenario())


def test_tcp_data_frame_gets_one_ack():
    async def scenario():
        dispatcher, service = _dispatcher()
        await dispatcher.start()
        try:
            client = await open_stream(HOST, dispatcher.port)
            await client.send(Frame.data("aGk="))
            reply = await client.receive(timeout=TIMEOUT)
            assert reply is not None
            assert reply.type == MsgType.ACK
            assert reply.content == "ACK"
            assert await client.receive(timeout=SILENCE) is None
            assert service.decoded == 1
            await client.close()
        finally:
            await dispatcher.stop()

    asyncio.run(scenario())


def test_tcp_undecodable_content_is_still_acked():
    async def scenario():
        dispatcher, service = _dispatcher()
        await dispatcher.start()
        try:
            client = await open_stream(HOST, dispatcher.port)
            await client.send(Frame.data("not base64!"))
            reply = await client.receive(timeout=TIMEOUT)
            assert reply is not None and reply.type == MsgType.ACK
            assert service.failed == 1
            await client.close()
        finally:
            await dispatcher.stop()

    asyncio.run(scenario())


def test_tcp_terminate_closes_without_ack():
    async def scenario():
        dispatcher, _ = _dispatcher()
        await dispatcher.start()
        try:
            client = await open_stream(HOST, dispatcher.port)
            await client.send(Frame.data("aGk="))
            assert (await client.receive(timeout=TIMEOUT)).type == MsgType.ACK
            assert dispatcher.connection_manager.active_count == 1

            await client.send(Frame.terminate())
            assert await client.receive(timeout=TIMEOUT) is None
            await _wait_for_idle(dispatcher)
            assert dispatcher.connection_manager.active_count == 0
            await client.close()
        finally:
            await dispatcher.stop()

    asyncio.run(scenario())


def test_tcp_unknown_type_is_ignored():
    async def scenario():
        dispatcher, _ = _dispatcher()
        await dispatcher.start()
        try:
            client = await open_stream(HOST, dispatcher.port)
            await client.send(Frame(type=42, content="?"))
            await client.send(Frame.ack())
            await client.send(Frame.data("QQ=="))
            reply = await client.receive(timeout=TIMEOUT)
            assert reply is not None and reply.type == MsgType.ACK
            assert await client.receive(timeout=SILENCE) is None
            await client.close()
        finally:
            await dispatcher.stop()

    asyncio.run(scenario())


def test_tcp_frame_split_across_writes():
    async def scenario():
        dispatcher, service = _dispatcher()
        await dispatcher.start()
        try:
            reader, writer = await asyncio.open_connection(HOST, dispatcher.port)
            raw = encode_frame(Frame.data("aGk="))
            for start in range(0, len(raw), 300):
                writer.write(raw[start : start + 300])
                await writer.drain()
                await asyncio.sleep(0.01)
            reply = decode_frame(await asyncio.wait_for(reader.readexactly(FRAME_SIZE), TIMEOUT))
            assert reply.type == MsgType.ACK
            assert service.decoded == 1
            writer.close()
            await writer.wait_closed()
        finally:
            await dispatcher.stop()

    asyncio.run(scenario())


def test_concurrent_tcp_clients_are_independent(caplog):
    caplog.set_level(logging.INFO)

    async def exchange(port: int, text: str) -> Frame:
        client = await open_stream(HOST, port)
        try:
            await client.send(Frame.data(text))
            return await client.receive(timeout=TIMEOUT)
        finally:
            await client.close()

    async def scenario():
        dispatcher, service = _dispatcher()
        await dispatcher.start()
        try:
            replies = await asyncio.gather(exchange(dispatcher.port, "QQ=="), exchange(dispatcher.port, "Qg=="))
            assert [r.content for r in replies] == ["ACK", "ACK"]
            assert service.decoded == 2
        finally:
            await dispatcher.stop()

    asyncio.run(scenario())
    assert "Decoded message: A" in caplog.text
    assert "Decoded message: B" in caplog.text


def test_udp_data_datagram_is_acked_to_sender():
    async def scenario():
        dispatcher, service = _dispatcher()
        await dispatcher.start()
        try:
            client = await open_datagram(HOST, dispatcher.port)
            await client.send(Frame.data("aGk="))
            reply = await client.receive(timeout=TIMEOUT)
            assert reply is not None
            assert reply.type == MsgType.ACK
            assert reply.content == "ACK"
            assert await client.receive(timeout=SILENCE) is None
            assert service.decoded == 1
            await client.close()
        finally:
            await dispatcher.stop()

    asyncio.run(scenario())


def test_udp_terminate_gets_no_reply():
    async def scenario():
        dispatcher, _ = _dispatcher()
        await dispatcher.start()
        try:
            client = await open_datagram(HOST, dispatcher.port)
            await client.send(Frame.terminate())
            assert await client.receive(timeout=SILENCE) is None
            # the endpoint keeps serving afterwards
            await client.send(Frame.data("aGk="))
            assert (await client.receive(timeout=TIMEOUT)).type == MsgType.ACK
            await client.close()
        finally:
            await dispatcher.stop()

    asyncio.run(scenario())


def test_udp_wrong_size_datagram_is_dropped():
    async def scenario():
        dispatcher, service = _dispatcher()
        await dispatcher.start()
        try:
            client = await open_datagram(HOST, dispatcher.port)
            client.transport.sendto(b"\x01\x00\x00\x00aGk=", client.target)
            assert await client.receive(timeout=SILENCE) is None
            assert service.received == 0
            await client.close()
        finally:
            await dispatcher.stop()

    asyncio.run(scenario())


def test_connection_limit_rejects_extra_clients():
    async def scenario():
        dispatcher, _ = _dispatcher(max_connections=1)
        await dispatcher.start()
        try:
            first = await open_stream(HOST, dispatcher.port)
            await first.send(Frame.data("aGk="))
            assert (await first.receive(timeout=TIMEOUT)).type == MsgType.ACK

            second = await open_stream(HOST, dispatcher.port)
            assert await second.receive(timeout=TIMEOUT) is None
            await second.close()

            await first.send(Frame.data("aGk="))
            assert (await first.receive(timeout=TIMEOUT)).type == MsgType.ACK
            await first.close()
        finally:
            await dispatcher.stop()

    asyncio.run(scenario())


def test_stop_closes_active_connections():
    async def scenario():
        dispatcher, _ = _dispatcher()
        await dispatcher.start()
        client = await open_stream(HOST, dispatcher.port)
        await client.send(Frame.data("aGk="))
        assert (await client.receive(timeout=TIMEOUT)).type == MsgType.ACK

        await dispatcher.stop()
        assert dispatcher.connection_manager.active_count == 0
        assert await client.receive(timeout=TIMEOUT) is None
        await client.close()
        await asyncio.wait_for(dispatcher.serve_forever(), TIMEOUT)

    asyncio.run(scenario())
