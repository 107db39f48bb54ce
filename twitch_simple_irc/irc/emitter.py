"""Typed publish/subscribe registry keyed by :class:`EventKind`."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from ..logs.logger import logger
from .events import ChatEvent, ErrorEvent, EventKind

Listener = Callable[[Any], Any]
Predicate = Callable[[Any], bool]


class EventEmitter:
    """Dispatch events to listeners registered per kind.

    Listeners may be plain callables or coroutine functions. Plain listeners
    run inline; coroutine listeners run as background tasks so they can await
    replies that the read loop has yet to deliver. A listener that raises is
    logged and reported as an ``error`` event; it never breaks the emitting
    code path.
    """

    def __init__(self) -> None:
        self._listeners: dict[EventKind, list[Listener]] = defaultdict(list)
        self._tasks: set[asyncio.Task[None]] = set()

    def on(self, kind: EventKind | str, listener: Listener) -> Listener:
        self._listeners[EventKind(kind)].append(listener)
        return listener

    def off(self, kind: EventKind | str, listener: Listener) -> None:
        listeners = self._listeners.get(EventKind(kind))
        if not listeners:
            return
        for registered in listeners:
            # once() wrappers are removable by the original callable
            if registered == listener or getattr(registered, "__wrapped__", None) == listener:
                listeners.remove(registered)
                return

    def once(self, kind: EventKind | str, listener: Listener) -> Listener:
        kind = EventKind(kind)

        def _once(event: Any) -> Any:
            self.off(kind, _once)
            return listener(event)

        _once.__wrapped__ = listener  # type: ignore[attr-defined]
        return self.on(kind, _once)

    def listener_count(self, kind: EventKind | str) -> int:
        return len(self._listeners.get(EventKind(kind), ()))

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    async def emit(self, event: ChatEvent) -> None:
        # Snapshot: listeners may deregister themselves while running.
        for listener in list(self._listeners.get(event.kind, ())):
            try:
                result = listener(event)
            except Exception as e:  # noqa: BLE001
                await self._report_listener_error(event, e)
                continue
            if inspect.isawaitable(result):
                task = asyncio.create_task(
                    self._run_listener(event, result),
                    name=f"tmi-listener-{event.kind.value}",
                )
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait until every scheduled coroutine listener has finished."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def _run_listener(self, event: ChatEvent, awaitable: Any) -> None:
        try:
            await awaitable
        except Exception as e:  # noqa: BLE001
            await self._report_listener_error(event, e)

    async def _report_listener_error(self, event: ChatEvent, error: Exception) -> None:
        logger.log_event(
            "events",
            "listener_error",
            level=logging.ERROR,
            event_kind=event.kind.value,
            error=str(error),
            error_type=type(error).__name__,
        )
        if event.kind is not EventKind.ERROR:
            await self.emit(ErrorEvent(raw=event.raw, error=error))

    def expect(
        self, kind: EventKind | str, predicate: Predicate | None = None
    ) -> asyncio.Future[Any]:
        """Return a future settled by the next matching event.

        The backing listener is removed as soon as the future is done, which
        includes cancellation by a timeout.
        """
        kind = EventKind(kind)
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()

        def _listener(event: Any) -> None:
            if future.done():
                return
            if predicate is None or predicate(event):
                future.set_result(event)

        self.on(kind, _listener)
        future.add_done_callback(lambda _f: self.off(kind, _listener))
        return future
