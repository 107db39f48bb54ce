"""Line splitting and command dispatch."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from ..constants import SERVER_NAME
from ..logs.logger import logger
from ..utils import get_is_action, normalize_action_message, normalize_channel
from .events import (
    ClearChatEvent,
    ClearMessageEvent,
    GlobalUserStateEvent,
    HostTargetEvent,
    JoinEvent,
    MessageEvent,
    NoticeEvent,
    PartEvent,
    PingEvent,
    PongEvent,
    RegisterEvent,
    RoomStateEvent,
    UserNoticeEvent,
    UserStateEvent,
    WhisperEvent,
)
from .parser import IRCMessage, parse_irc_message

if TYPE_CHECKING:  # pragma: no cover
    from .client import TwitchChatClient

Handler = Callable[[IRCMessage], Awaitable[None]]

RPL_WELCOME = "001"
PONG_REPLY = f"PONG :{SERVER_NAME}"


def get_channel_from_message(message: IRCMessage) -> str:
    """First middle parameter without its ``#`` sigil, or '' when absent."""
    if not message.middle:
        return ""
    return normalize_channel(message.middle[0])


def get_user_from_message(message: IRCMessage) -> str:
    return message.prefix.name if message.prefix else ""


class IRCDispatcher:
    def __init__(self, client: TwitchChatClient):
        self.client = client
        self._handlers: dict[str, Handler] = {
            "PING": self._handle_ping,
            "PONG": self._handle_pong,
            RPL_WELCOME: self._handle_welcome,
            "PRIVMSG": self._handle_privmsg,
            "NOTICE": self._handle_notice,
            "USERNOTICE": self._handle_usernotice,
            "WHISPER": self._handle_whisper,
            "GLOBALUSERSTATE": self._handle_globaluserstate,
            "USERSTATE": self._handle_userstate,
            "ROOMSTATE": self._handle_roomstate,
            "JOIN": self._handle_join,
            "PART": self._handle_part,
            "CLEARCHAT": self._handle_clearchat,
            "CLEARMSG": self._handle_clearmsg,
            "HOSTTARGET": self._handle_hosttarget,
        }

    @property
    def supported_commands(self) -> frozenset[str]:
        return frozenset(self._handlers)

    async def process_incoming_data(self, buffer: str, new_data: str) -> str:
        """Dispatch every complete line in ``buffer + new_data``.

        Returns the trailing partial line, to be passed back with the next
        chunk. Lines are handled strictly in arrival order.
        """
        buffer += new_data
        self.client.last_server_activity = time.time()
        while "\r\n" in buffer:
            line, buffer = buffer.split("\r\n", 1)
            if line.strip():
                await self.handle_line(line)
        return buffer

    async def handle_line(self, raw: str) -> None:
        message = parse_irc_message(raw)
        if message.command != "PING":
            logger.log_event(
                "dispatch",
                "raw",
                level=logging.DEBUG,
                user=self.client.name,
                raw=raw,
            )
        handler = self._handlers.get(message.command)
        if handler is None:
            return
        await handler(message)

    async def _handle_ping(self, message: IRCMessage) -> None:
        # Protocol obligation: answered regardless of keepalive state.
        await self.client.send_raw(PONG_REPLY)
        self.client.last_ping_from_server = time.time()
        await self.client.events.emit(
            PingEvent(raw=message.raw, raw_tags=message.tags)
        )

    async def _handle_pong(self, message: IRCMessage) -> None:
        await self.client.events.emit(
            PongEvent(raw=message.raw, raw_tags=message.tags)
        )

    async def _handle_welcome(self, message: IRCMessage) -> None:
        name = message.middle[0] if message.middle else self.client.name
        if self.client.mark_registered(name):
            await self.client.events.emit(
                RegisterEvent(raw=message.raw, raw_tags=message.tags, name=name)
            )

    async def _handle_privmsg(self, message: IRCMessage) -> None:
        text = message.trailing or ""
        is_action = get_is_action(text)
        event = MessageEvent(
            raw=message.raw,
            raw_tags=message.tags,
            channel=get_channel_from_message(message),
            user=get_user_from_message(message),
            message=normalize_action_message(text) if is_action else text,
            is_action=is_action,
        )
        logger.log_event(
            "dispatch",
            "privmsg",
            level=logging.DEBUG,
            user=self.client.name,
            channel=event.channel,
            author=event.user,
            chat_message=event.message,
        )
        await self.client.events.emit(event)

    async def _handle_whisper(self, message: IRCMessage) -> None:
        await self.client.events.emit(
            WhisperEvent(
                raw=message.raw,
                raw_tags=message.tags,
                channel=message.middle[0] if message.middle else "",
                user=get_user_from_message(message),
                message=message.trailing or "",
            )
        )

    async def _handle_notice(self, message: IRCMessage) -> None:
        event = NoticeEvent(
            raw=message.raw,
            raw_tags=message.tags,
            channel=get_channel_from_message(message),
            message=message.trailing or "",
        )
        logger.log_event(
            "dispatch",
            "notice",
            user=self.client.name,
            channel=event.channel,
            notice=event.message,
        )
        await self.client.events.emit(event)

    async def _handle_usernotice(self, message: IRCMessage) -> None:
        await self.client.events.emit(
            UserNoticeEvent(
                raw=message.raw,
                raw_tags=message.tags,
                channel=get_channel_from_message(message),
                message=message.trailing or "",
            )
        )

    async def _handle_clearchat(self, message: IRCMessage) -> None:
        await self.client.events.emit(
            ClearChatEvent(
                raw=message.raw,
                raw_tags=message.tags,
                channel=get_channel_from_message(message),
                message=message.trailing or "",
            )
        )

    async def _handle_clearmsg(self, message: IRCMessage) -> None:
        await self.client.events.emit(
            ClearMessageEvent(
                raw=message.raw,
                raw_tags=message.tags,
                channel=get_channel_from_message(message),
                message=message.trailing or "",
            )
        )

    async def _handle_hosttarget(self, message: IRCMessage) -> None:
        await self.client.events.emit(
            HostTargetEvent(
                raw=message.raw,
                raw_tags=message.tags,
                channel=get_channel_from_message(message),
                message=message.trailing or "",
            )
        )

    async def _handle_globaluserstate(self, message: IRCMessage) -> None:
        event = GlobalUserStateEvent(raw=message.raw, raw_tags=message.tags)
        self.client.channels.update_global_user_state(event.tags)
        await self.client.events.emit(event)

    async def _handle_userstate(self, message: IRCMessage) -> None:
        event = UserStateEvent(
            raw=message.raw,
            raw_tags=message.tags,
            channel=get_channel_from_message(message),
        )
        self.client.channels.update_user_state(event.channel, event.tags)
        await self.client.events.emit(event)

    async def _handle_roomstate(self, message: IRCMessage) -> None:
        event = RoomStateEvent(
            raw=message.raw,
            raw_tags=message.tags,
            channel=get_channel_from_message(message),
        )
        self.client.channels.update_room_state(event.channel, event.tags)
        await self.client.events.emit(event)

    async def _handle_join(self, message: IRCMessage) -> None:
        event = JoinEvent(
            raw=message.raw,
            raw_tags=message.tags,
            channel=get_channel_from_message(message),
            user=get_user_from_message(message),
        )
        logger.log_event(
            "dispatch", "join", level=logging.DEBUG, user=self.client.name, channel=event.channel
        )
        await self.client.events.emit(event)

    async def _handle_part(self, message: IRCMessage) -> None:
        event = PartEvent(
            raw=message.raw,
            raw_tags=message.tags,
            channel=get_channel_from_message(message),
            user=get_user_from_message(message),
        )
        logger.log_event(
            "dispatch", "part", level=logging.DEBUG, user=self.client.name, channel=event.channel
        )
        await self.client.events.emit(event)
