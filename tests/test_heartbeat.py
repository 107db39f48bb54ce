import pytest

from tests.fakes import wait_until
from twitch_simple_irc.errors import KeepaliveTimeoutError
from twitch_simple_irc.irc.events import EventKind
from twitch_simple_irc.irc.models import ConnectionState


@pytest.mark.asyncio
async def test_send_ping_measures_latency(client, transport_factory):
    assert await client.heartbeat.send_ping() is True
    assert transport_factory.current.sent[-1] == "PING"
    assert client.latency is not None
    assert client.session.pending_ping is None


@pytest.mark.asyncio
async def test_only_one_probe_outstanding(client, transport_factory):
    client.session.pending_ping = 1.0
    sent_before = len(transport_factory.current.sent)
    assert await client.heartbeat.send_ping() is False
    assert len(transport_factory.current.sent) == sent_before


@pytest.mark.asyncio
async def test_missing_pong_drops_connection(make_client, transport_factory):
    transport_factory.transport_kwargs = {"auto_pong": False}
    client = make_client(ping_interval=0.01, ping_timeout=0.02)
    disconnects = []
    client.on(EventKind.DISCONNECT, disconnects.append)
    await client.connect()
    await wait_until(lambda: disconnects)
    assert "PING" in transport_factory.current.sent
    assert isinstance(disconnects[0].error, KeepaliveTimeoutError)
    assert str(disconnects[0].error) == "Server did not PONG back"
    assert client.state is ConnectionState.DISCONNECTED
    assert not client.heartbeat.running


@pytest.mark.asyncio
async def test_answered_pings_keep_connection(make_client, transport_factory):
    client = make_client(ping_interval=0.01)
    await client.connect()
    await wait_until(lambda: transport_factory.current.sent.count("PING") >= 3)
    assert client.registered
    assert client.heartbeat.running


@pytest.mark.asyncio
async def test_unsolicited_pong_is_emitted(client, transport_factory):
    pongs = []
    client.on(EventKind.PONG, pongs.append)
    transport_factory.current.feed(":tmi.twitch.tv PONG tmi.twitch.tv :tmi.twitch.tv")
    await wait_until(lambda: pongs)
    assert client.heartbeat.running
