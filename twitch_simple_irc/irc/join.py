"""Join/part workflow with server confirmation."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ..errors import NotRegisteredError
from ..logs.logger import logger
from ..utils import normalize_channel
from .events import ChannelEvent, EventKind
from .parser import format_irc_message

if TYPE_CHECKING:  # pragma: no cover
    from .client import TwitchChatClient


class IRCJoinManager:
    def __init__(self, client: TwitchChatClient):
        self.client = client

    async def join_channel(self, channel: str) -> bool:
        return await self._request(channel, "JOIN", EventKind.JOIN)

    async def part_channel(self, channel: str) -> bool:
        return await self._request(channel, "PART", EventKind.PART)

    async def rejoin_all(self) -> dict[str, bool]:
        """Rejoin every channel known to the state store (after reconnect)."""
        channels = self.client.channels.channel_names()
        if not channels:
            return {}
        results = await asyncio.gather(
            *(self.join_channel(channel) for channel in channels),
            return_exceptions=True,
        )
        # A drop mid-rejoin surfaces as NotRegisteredError; count it as a miss.
        outcome = {
            channel: result is True
            for channel, result in zip(channels, results, strict=True)
        }
        logger.log_event(
            "join",
            "rejoin_complete",
            user=self.client.name,
            joined=sum(outcome.values()),
            total=len(channels),
        )
        return outcome

    async def _request(self, channel: str, command: str, kind: EventKind) -> bool:
        if not self.client.registered:
            raise NotRegisteredError(
                f"Cannot {command} before registration", data={"channel": channel}
            )
        channel = normalize_channel(channel)
        action = command.lower()

        def _matches(event: ChannelEvent) -> bool:
            return event.channel == channel

        # Listen before sending so a fast reply cannot be missed.
        confirmation = self.client.events.expect(kind, _matches)
        logger.log_event(
            "join", f"{action}_attempt", level=logging.DEBUG, user=self.client.name, channel=channel
        )
        sent = await self.client.send_raw(format_irc_message(command, [f"#{channel}"]))
        if not sent:
            confirmation.cancel()
            return False
        try:
            await asyncio.wait_for(confirmation, timeout=self.client.options.join_timeout)
        except TimeoutError:
            logger.log_event(
                "join",
                f"{action}_timeout",
                level=logging.WARNING,
                user=self.client.name,
                channel=channel,
                timeout=self.client.options.join_timeout,
            )
            return False
        logger.log_event(
            "join", f"{action}_success", user=self.client.name, channel=channel
        )
        return True
