"""Minimal asyncio client for Twitch chat (IRC over TCP/TLS or WebSocket)."""

from . import errors
from .irc import (
    Client,
    ClientOptions,
    ConnectionOptions,
    ConnectionState,
    EventKind,
    TwitchChatClient,
    parse_message_tags,
)
from .irc import events
from .logging_config import configure_logging

__version__ = "0.1.0"

__all__ = [
    "Client",
    "ClientOptions",
    "ConnectionOptions",
    "ConnectionState",
    "EventKind",
    "TwitchChatClient",
    "configure_logging",
    "errors",
    "events",
    "parse_message_tags",
]
