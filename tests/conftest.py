import dataclasses

import pytest
import pytest_asyncio

from tests.fakes import FakeTransportFactory
from twitch_simple_irc.irc.client import TwitchChatClient
from twitch_simple_irc.irc.options import ClientOptions


@pytest.fixture
def transport_factory() -> FakeTransportFactory:
    return FakeTransportFactory()


@pytest_asyncio.fixture
async def make_client(transport_factory):
    """Build clients wired to the fake transport with test-sized timings."""
    clients: list[TwitchChatClient] = []

    def _make(**overrides) -> TwitchChatClient:
        options = ClientOptions(
            name="tester",
            auth="secret",
            reconnect=False,
            register_timeout=0.2,
            join_timeout=0.2,
            ping_interval=60.0,
            ping_timeout=0.2,
            reconnect_base_interval=0.01,
            max_reconnect_interval=0.08,
        )
        client = TwitchChatClient(
            dataclasses.replace(options, **overrides),
            transport_factory=transport_factory,
        )
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.disconnect()


@pytest_asyncio.fixture
async def client(make_client):
    """A connected, registered client."""
    c = make_client()
    await c.connect()
    return c
