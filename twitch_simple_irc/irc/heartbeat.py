"""Keepalive watchdog: periodic client PING with PONG deadline."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from ..errors import KeepaliveTimeoutError
from ..logs.logger import logger
from .events import EventKind

if TYPE_CHECKING:  # pragma: no cover
    from .client import TwitchChatClient


class IRCHeartbeat:
    """Detects connections that died without the transport noticing.

    Armed after registration. Every ``ping_interval`` seconds a bare ``PING``
    is sent; if no ``PONG`` arrives within ``ping_timeout`` the connection is
    declared dead and handed to the client's involuntary disconnect path.
    """

    def __init__(self, client: TwitchChatClient):
        self.client = client
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="tmi-keepalive")

    def stop(self) -> None:
        task, self._task = self._task, None
        self.client.session.pending_ping = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _run(self) -> None:
        interval = self.client.options.ping_interval
        while True:
            await asyncio.sleep(interval)
            if await self.send_ping():
                continue
            logger.log_event(
                "keepalive",
                "timeout",
                level=logging.WARNING,
                user=self.client.name,
                timeout=self.client.options.ping_timeout,
            )
            await self.client.handle_connection_lost(
                KeepaliveTimeoutError("Server did not PONG back")
            )
            return

    async def send_ping(self) -> bool:
        """Send one probe and wait for its reply.

        Returns True when a PONG arrived in time. Only one probe may be
        outstanding; a second concurrent call returns False immediately.
        """
        session = self.client.session
        if session.pending_ping is not None:
            return False
        sent_at = time.monotonic()
        session.pending_ping = sent_at
        pong = self.client.events.expect(EventKind.PONG)
        try:
            if not await self.client.send_raw("PING"):
                pong.cancel()
                return False
            await asyncio.wait_for(pong, timeout=self.client.options.ping_timeout)
        except TimeoutError:
            return False
        finally:
            session.pending_ping = None
        latency = time.monotonic() - sent_at
        self.client.latency = latency
        logger.log_event(
            "keepalive",
            "pong",
            level=logging.DEBUG,
            user=self.client.name,
            latency_ms=round(latency * 1000, 1),
        )
        return True
