import asyncio

import pytest

from twitch_simple_irc.irc.emitter import EventEmitter
from twitch_simple_irc.irc.events import EventKind, PongEvent, RegisterEvent


@pytest.mark.asyncio
async def test_sync_and_async_listeners_receive_event():
    emitter = EventEmitter()
    seen: list[str] = []

    def sync_listener(event):
        seen.append(f"sync:{event.name}")

    async def async_listener(event):
        await asyncio.sleep(0)
        seen.append(f"async:{event.name}")

    emitter.on(EventKind.REGISTER, sync_listener)
    emitter.on("register", async_listener)
    await emitter.emit(RegisterEvent(name="tester"))
    assert seen == ["sync:tester"]
    assert emitter.pending_tasks == 1
    await emitter.drain()
    assert seen == ["sync:tester", "async:tester"]
    assert emitter.pending_tasks == 0


@pytest.mark.asyncio
async def test_off_and_once():
    emitter = EventEmitter()
    calls: list[str] = []
    listener = emitter.on(EventKind.PONG, lambda e: calls.append("on"))
    emitter.once(EventKind.PONG, lambda e: calls.append("once"))
    await emitter.emit(PongEvent())
    emitter.off(EventKind.PONG, listener)
    await emitter.emit(PongEvent())
    assert calls == ["on", "once"]
    assert emitter.listener_count(EventKind.PONG) == 0


@pytest.mark.asyncio
async def test_listener_error_is_reported_as_error_event():
    emitter = EventEmitter()
    errors = []

    def bad(event):  # noqa: ARG001
        raise RuntimeError("boom")

    emitter.on(EventKind.PONG, bad)
    emitter.on(EventKind.ERROR, errors.append)
    await emitter.emit(PongEvent(raw="PONG"))
    assert len(errors) == 1
    assert isinstance(errors[0].error, RuntimeError)
    assert errors[0].raw == "PONG"


@pytest.mark.asyncio
async def test_failing_error_listener_only_logged():
    emitter = EventEmitter()

    def bad(event):  # noqa: ARG001
        raise RuntimeError("boom")

    emitter.on(EventKind.PONG, bad)
    emitter.on(EventKind.ERROR, bad)
    await emitter.emit(PongEvent())


@pytest.mark.asyncio
async def test_expect_timeout_removes_listener():
    emitter = EventEmitter()
    with pytest.raises(TimeoutError):
        await asyncio.wait_for(emitter.expect(EventKind.PONG), timeout=0.01)
    await asyncio.sleep(0)
    assert emitter.listener_count(EventKind.PONG) == 0


@pytest.mark.asyncio
async def test_expect_with_predicate():
    emitter = EventEmitter()
    future = emitter.expect(EventKind.REGISTER, lambda e: e.name == "b")
    await emitter.emit(RegisterEvent(name="a"))
    assert not future.done()
    await emitter.emit(RegisterEvent(name="b"))
    assert (await future).name == "b"
    await asyncio.sleep(0)
    assert emitter.listener_count(EventKind.REGISTER) == 0


@pytest.mark.asyncio
async def test_off_removes_once_listener_by_original():
    emitter = EventEmitter()
    calls = []

    def listener(event):  # noqa: ARG001
        calls.append("once")

    emitter.once(EventKind.PONG, listener)
    emitter.off(EventKind.PONG, listener)
    await emitter.emit(PongEvent())
    assert calls == []
    assert emitter.listener_count(EventKind.PONG) == 0


@pytest.mark.asyncio
async def test_async_listener_does_not_block_emit():
    emitter = EventEmitter()
    released = asyncio.Event()
    seen = []

    async def waits_for_pong(event):  # noqa: ARG001
        await released.wait()
        seen.append("register")

    emitter.on(EventKind.REGISTER, waits_for_pong)
    emitter.on(EventKind.PONG, lambda e: released.set())
    await emitter.emit(RegisterEvent(name="tester"))
    await emitter.emit(PongEvent())
    await emitter.drain()
    assert seen == ["register"]


@pytest.mark.asyncio
async def test_async_listener_error_is_reported():
    emitter = EventEmitter()
    errors = []

    async def bad(event):  # noqa: ARG001
        raise RuntimeError("boom")

    emitter.on(EventKind.PONG, bad)
    emitter.on(EventKind.ERROR, errors.append)
    await emitter.emit(PongEvent(raw="PONG"))
    await emitter.drain()
    assert len(errors) == 1
    assert errors[0].raw == "PONG"
