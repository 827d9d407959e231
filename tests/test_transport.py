"""Tests for the Socket.IO transport adapter."""

from __future__ import annotations

import anyio
import pytest
from socketio import exceptions as socketio_exceptions

from notification_hub.infrastructure.notifications import SocketIOTransport, TransportError


class StubSocketClient:
    """Stand-in for ``socketio.AsyncClient`` recording calls."""

    def __init__(self, *, refuse: bool = False, gate: anyio.Event | None = None) -> None:
        self.refuse = refuse
        self.gate = gate
        self.connected = False
        self.handlers: dict[str, object] = {}
        self.connect_calls: list[tuple[str, dict]] = []
        self.emitted: list[tuple[str, object]] = []
        self.disconnects = 0

    def on(self, event, handler):
        self.handlers[event] = handler

    async def connect(self, url, **kwargs):
        self.connect_calls.append((url, kwargs))
        if self.gate is not None:
            await self.gate.wait()
        if self.refuse:
            raise socketio_exceptions.ConnectionError("Connection refused by the server")
        self.connected = True

    async def disconnect(self):
        self.disconnects += 1
        self.connected = False

    async def emit(self, event, data=None):
        self.emitted.append((event, data))


@pytest.mark.anyio
async def test_open_passes_auth_query_and_path():
    client = StubSocketClient()
    transport = SocketIOTransport(client=client, socketio_path="ws", wait_timeout=3)

    await transport.open("https://school.example.com", {"token": "t", "userId": "u1"})

    url, kwargs = client.connect_calls[0]
    assert url == "https://school.example.com?userId=u1"
    assert kwargs["auth"] == {"token": "t", "userId": "u1"}
    assert kwargs["transports"] == ["websocket", "polling"]
    assert kwargs["socketio_path"] == "ws"
    assert kwargs["wait_timeout"] == 3
    assert transport.connected


@pytest.mark.anyio
async def test_refused_connection_raises_transport_error():
    transport = SocketIOTransport(client=StubSocketClient(refuse=True))

    with pytest.raises(TransportError, match="refused"):
        await transport.open("https://school.example.com", {"token": "t", "userId": "u1"})


@pytest.mark.anyio
async def test_emit_is_fire_and_forget_and_close_disconnects():
    client = StubSocketClient()
    transport = SocketIOTransport(client=client)
    await transport.open("https://school.example.com", {"token": "t", "userId": "u1"})

    transport.emit("user:online", {"timestamp": "now"})
    await anyio.sleep(0)
    await transport.close()
    await transport.close()

    assert client.emitted == [("user:online", {"timestamp": "now"})]
    assert client.disconnects == 2
    assert not transport.connected


def test_handlers_are_registered_on_the_client():
    client = StubSocketClient()
    transport = SocketIOTransport(client=client)

    def handler(*_args):
        return None

    transport.on("notification:new", handler)

    assert client.handlers["notification:new"] is handler


@pytest.mark.anyio
async def test_close_during_pending_handshake_disconnects_once_it_completes():
    gate = anyio.Event()
    client = StubSocketClient(gate=gate)
    transport = SocketIOTransport(client=client)

    async with anyio.create_task_group() as tg:
        tg.start_soon(transport.open, "https://school.example.com", {"token": "t", "userId": "u1"})
        while not client.connect_calls:
            await anyio.sleep(0)

        await transport.close()
        gate.set()

    assert client.disconnects == 2
    assert not transport.connected
