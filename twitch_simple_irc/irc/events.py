"""Typed chat events emitted by the client.

Every event keeps the raw line it came from and the raw tag map. The
normalized ``tags`` are computed on first access and memoized, so events
whose tags are never read only cost a reference to the raw map.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import ClassVar

from .tags import Tags, parse_message_tags


class EventKind(str, Enum):
    CONNECT = "connect"
    DISCONNECT = "disconnect"
    REGISTER = "register"
    PING = "ping"
    PONG = "pong"
    MESSAGE = "message"
    NOTICE = "notice"
    USERNOTICE = "usernotice"
    WHISPER = "whisper"
    GLOBALUSERSTATE = "globaluserstate"
    USERSTATE = "userstate"
    ROOMSTATE = "roomstate"
    JOIN = "join"
    PART = "part"
    CLEARCHAT = "clearchat"
    CLEARMESSAGE = "clearmessage"
    HOSTTARGET = "hosttarget"
    ERROR = "error"


@dataclass(kw_only=True)
class ChatEvent:
    kind: ClassVar[EventKind]

    raw: str = ""
    raw_tags: dict[str, str] = field(default_factory=dict, repr=False)

    @cached_property
    def tags(self) -> Tags:
        return parse_message_tags(self.raw_tags)


@dataclass(kw_only=True)
class ConnectEvent(ChatEvent):
    kind = EventKind.CONNECT


@dataclass(kw_only=True)
class DisconnectEvent(ChatEvent):
    """Emitted after teardown; ``error`` is None for a requested disconnect."""

    kind = EventKind.DISCONNECT
    error: Exception | None = None


@dataclass(kw_only=True)
class RegisterEvent(ChatEvent):
    kind = EventKind.REGISTER
    name: str = ""


@dataclass(kw_only=True)
class PingEvent(ChatEvent):
    kind = EventKind.PING


@dataclass(kw_only=True)
class PongEvent(ChatEvent):
    kind = EventKind.PONG


@dataclass(kw_only=True)
class ChannelEvent(ChatEvent):
    channel: str = ""


@dataclass(kw_only=True)
class MessageEvent(ChannelEvent):
    kind = EventKind.MESSAGE
    message: str = ""
    user: str = ""
    is_action: bool = False


@dataclass(kw_only=True)
class WhisperEvent(ChannelEvent):
    """Private message; ``channel`` holds the recipient login."""

    kind = EventKind.WHISPER
    message: str = ""
    user: str = ""


@dataclass(kw_only=True)
class CommandEvent(ChannelEvent):
    message: str = ""


@dataclass(kw_only=True)
class NoticeEvent(CommandEvent):
    kind = EventKind.NOTICE


@dataclass(kw_only=True)
class UserNoticeEvent(CommandEvent):
    kind = EventKind.USERNOTICE


@dataclass(kw_only=True)
class ClearChatEvent(CommandEvent):
    kind = EventKind.CLEARCHAT


@dataclass(kw_only=True)
class ClearMessageEvent(CommandEvent):
    kind = EventKind.CLEARMESSAGE


@dataclass(kw_only=True)
class HostTargetEvent(CommandEvent):
    kind = EventKind.HOSTTARGET


@dataclass(kw_only=True)
class GlobalUserStateEvent(ChatEvent):
    kind = EventKind.GLOBALUSERSTATE


@dataclass(kw_only=True)
class UserStateEvent(ChannelEvent):
    kind = EventKind.USERSTATE


@dataclass(kw_only=True)
class RoomStateEvent(ChannelEvent):
    kind = EventKind.ROOMSTATE


@dataclass(kw_only=True)
class JoinEvent(ChannelEvent):
    kind = EventKind.JOIN
    user: str = ""


@dataclass(kw_only=True)
class PartEvent(ChannelEvent):
    kind = EventKind.PART
    user: str = ""


@dataclass(kw_only=True)
class ErrorEvent(ChatEvent):
    kind = EventKind.ERROR
    error: Exception | None = None


__all__ = [
    "ChannelEvent",
    "ChatEvent",
    "ClearChatEvent",
    "ClearMessageEvent",
    "CommandEvent",
    "ConnectEvent",
    "DisconnectEvent",
    "ErrorEvent",
    "EventKind",
    "GlobalUserStateEvent",
    "HostTargetEvent",
    "JoinEvent",
    "MessageEvent",
    "NoticeEvent",
    "PartEvent",
    "PingEvent",
    "PongEvent",
    "RegisterEvent",
    "RoomStateEvent",
    "UserNoticeEvent",
    "UserStateEvent",
    "WhisperEvent",
]
