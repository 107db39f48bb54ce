"""Reconnection loop and backoff for the chat client."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ..errors import ChatError
from ..logs.logger import logger
from .models import ConnectionState

if TYPE_CHECKING:  # pragma: no cover
    from .client import TwitchChatClient


class IRCConnectionController:
    """Drives reconnect attempts with capped exponential backoff.

    The delay starts at ``reconnect_base_interval`` and doubles after every
    attempt that does not end connected and registered, up to
    ``max_reconnect_interval``. It never gives up on its own; the loop ends on
    success, when auto-reconnect is disabled, or when the caller disconnects.
    """

    def __init__(self, host: TwitchChatClient) -> None:
        self.host = host
        self._task: asyncio.Task[None] | None = None

    @property
    def reconnecting(self) -> bool:
        return self.host.session.reconnecting

    def reconnect(self) -> asyncio.Task[None] | None:
        """Start the reconnect loop unless one is already in flight."""
        host = self.host
        if host.connected or host.session.reconnecting:
            logger.log_event(
                "reconnect", "coalesced", level=logging.DEBUG, user=host.name
            )
            return self._task
        host.session.reconnecting = True
        self._task = asyncio.create_task(self._reconnect_loop(), name="tmi-reconnect")
        return self._task

    def cancel(self) -> None:
        task, self._task = self._task, None
        self.host.session.reconnecting = False
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    def next_delay(self) -> float:
        options = self.host.options
        return min(options.max_reconnect_interval, self.host.session.reconnect_interval)

    def reset_backoff(self) -> None:
        session = self.host.session
        session.reconnect_interval = self.host.options.reconnect_base_interval
        session.reconnect_attempts = 0

    def increase_backoff(self) -> None:
        session = self.host.session
        session.reconnect_interval = min(
            self.host.options.max_reconnect_interval, session.reconnect_interval * 2
        )

    async def _reconnect_loop(self) -> None:
        host = self.host
        session = host.session
        try:
            while host.options.reconnect:
                delay = self.next_delay()
                session.reconnect_attempts += 1
                host.set_state(ConnectionState.RECONNECTING)
                logger.log_event(
                    "reconnect",
                    "scheduled",
                    level=logging.WARNING,
                    user=host.name,
                    delay=delay,
                    attempt=session.reconnect_attempts,
                )
                await asyncio.sleep(delay)
                if not host.options.reconnect:
                    break
                try:
                    await host.connect()
                except ChatError as e:
                    logger.log_event(
                        "reconnect",
                        "failed",
                        level=logging.ERROR,
                        user=host.name,
                        attempt=session.reconnect_attempts,
                        error=str(e),
                        error_type=type(e).__name__,
                    )

                if host.connected and host.registered:
                    logger.log_event(
                        "reconnect",
                        "success",
                        user=host.name,
                        attempt=session.reconnect_attempts,
                    )
                    self.reset_backoff()
                    # Release the guard first: a drop during rejoin must be able
                    # to start a fresh loop.
                    session.reconnecting = False
                    self._task = None
                    await host.join_manager.rejoin_all()
                    return

                self.increase_backoff()
                await host.teardown()
            if host.state is ConnectionState.RECONNECTING:
                host.set_state(ConnectionState.DISCONNECTED)
        finally:
            if self._task is asyncio.current_task():
                self._task = None
                session.reconnecting = False
