"""
Reconnect loop and backoff behaviour
"""

import asyncio

import pytest

from tests.fakes import wait_until
from twitch_simple_irc.errors import TransportError
from twitch_simple_irc.irc.events import EventKind
from twitch_simple_irc.irc.models import ConnectionState


@pytest.fixture
def recorded_sleeps(monkeypatch):
    """Replace asyncio.sleep with a recorder that yields without waiting."""
    delays: list[float] = []
    real_sleep = asyncio.sleep

    async def mock_sleep(delay, *args, **kwargs):
        delays.append(delay)
        await real_sleep(0)

    monkeypatch.setattr(asyncio, "sleep", mock_sleep)
    return delays


@pytest.mark.asyncio
async def test_backoff_doubles_caps_and_resets(make_client, transport_factory, recorded_sleeps, monkeypatch):
    transport_factory.open_failures = 5
    client = make_client(reconnect=True, reconnect_base_interval=1.0, max_reconnect_interval=4.0)
    monkeypatch.setattr(client.heartbeat, "start", lambda: None)

    with pytest.raises(TransportError):
        await client.connect()
    await wait_until(lambda: client.registered and not client.reconnecting)

    assert recorded_sleeps == [1.0, 2.0, 4.0, 4.0, 4.0]
    assert client.session.reconnect_interval == 1.0
    assert client.session.reconnect_attempts == 0
    assert len(transport_factory.created) == 6


@pytest.mark.asyncio
async def test_drop_triggers_reconnect_and_rejoin(make_client, transport_factory):
    client = make_client(reconnect=True)
    await client.connect()
    await client.dispatcher.handle_line("@slow=0 :tmi.twitch.tv ROOMSTATE #dallas")
    first = transport_factory.current

    first.drop()
    await wait_until(lambda: len(transport_factory.created) == 2 and client.registered)
    second = transport_factory.current
    await wait_until(lambda: "JOIN #dallas" in second.sent)

    assert second is not first
    assert client.channels["dallas"].room_state == {"slow": False}


@pytest.mark.asyncio
async def test_concurrent_triggers_coalesce(make_client, transport_factory):
    client = make_client(reconnect=True, reconnect_base_interval=0.05)
    await client.connect()
    await client.teardown()
    first = client.reconnect()
    second = client.reconnect()
    assert first is second
    await wait_until(lambda: client.registered)
    assert len(transport_factory.created) == 2


@pytest.mark.asyncio
async def test_disconnect_cancels_pending_reconnect(make_client, transport_factory):
    client = make_client(reconnect=True, reconnect_base_interval=10.0)
    await client.connect()
    transport_factory.current.drop()
    await wait_until(lambda: client.state is ConnectionState.RECONNECTING)

    await client.disconnect()
    await asyncio.sleep(0)

    assert not client.reconnecting
    assert client.state is ConnectionState.DISCONNECTED
    assert len(transport_factory.created) == 1


@pytest.mark.asyncio
async def test_no_reconnect_when_disabled(make_client, transport_factory):
    client = make_client(reconnect=False)
    disconnects = []
    client.on(EventKind.DISCONNECT, disconnects.append)
    await client.connect()
    transport_factory.current.drop()
    await wait_until(lambda: disconnects)
    await asyncio.sleep(0.02)
    assert not client.reconnecting
    assert len(transport_factory.created) == 1


@pytest.mark.asyncio
async def test_next_delay_is_capped(make_client):
    client = make_client(reconnect_base_interval=1.0, max_reconnect_interval=3.0)
    controller = client.connection_controller
    delays = []
    for _ in range(4):
        delays.append(controller.next_delay())
        controller.increase_backoff()
    assert delays == [1.0, 2.0, 3.0, 3.0]
    controller.reset_backoff()
    assert controller.next_delay() == 1.0
