"""IRC protocol layer: parsing, dispatch, connection lifecycle."""

from .client import Client, TwitchChatClient
from .events import EventKind
from .models import ConnectionState
from .options import ClientOptions, ConnectionOptions
from .parser import IRCMessage, format_irc_message, parse_irc_message
from .state import ChannelState, ChannelStateStore
from .tags import parse_message_tags
from .transport import TcpTransport, Transport, WebSocketTransport, create_transport

__all__ = [
    "ChannelState",
    "ChannelStateStore",
    "Client",
    "ClientOptions",
    "ConnectionOptions",
    "ConnectionState",
    "EventKind",
    "IRCMessage",
    "TcpTransport",
    "Transport",
    "TwitchChatClient",
    "WebSocketTransport",
    "create_transport",
    "format_irc_message",
    "parse_irc_message",
    "parse_message_tags",
]
