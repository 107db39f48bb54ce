"""Client configuration objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from ..constants import (
    CONNECT_TIMEOUT,
    JOIN_RESPONSE_TIMEOUT,
    MAX_RECONNECT_INTERVAL,
    PING_INTERVAL,
    PING_RESPONSE_TIMEOUT,
    READ_CHUNK_SIZE,
    RECONNECT_BASE_INTERVAL,
    REGISTER_RESPONSE_TIMEOUT,
    TCP_HOST,
    TCP_PORT_PLAIN,
    TCP_PORT_SECURE,
    WS_URL_PLAIN,
    WS_URL_SECURE,
)


@dataclass(slots=True)
class ConnectionOptions:
    """Transport selection. Unset endpoint fields follow ``secure``."""

    type: Literal["tcp", "ws"] = "ws"
    secure: bool = True
    host: str | None = None
    port: int | None = None
    url: str | None = None
    connect_timeout: float = CONNECT_TIMEOUT
    read_chunk_size: int = READ_CHUNK_SIZE

    def resolved_host(self) -> str:
        return self.host or TCP_HOST

    def resolved_port(self) -> int:
        if self.port:
            return self.port
        return TCP_PORT_SECURE if self.secure else TCP_PORT_PLAIN

    def resolved_url(self) -> str:
        if self.url:
            return self.url
        return WS_URL_SECURE if self.secure else WS_URL_PLAIN


@dataclass(slots=True)
class ClientOptions:
    """Top-level options for :class:`~twitch_simple_irc.irc.client.TwitchChatClient`.

    ``name`` and ``auth`` may be omitted for an anonymous read-only session.
    """

    name: str | None = None
    auth: str | None = None
    reconnect: bool = True
    connection: ConnectionOptions = field(default_factory=ConnectionOptions)
    register_timeout: float = REGISTER_RESPONSE_TIMEOUT
    join_timeout: float = JOIN_RESPONSE_TIMEOUT
    ping_interval: float = PING_INTERVAL
    ping_timeout: float = PING_RESPONSE_TIMEOUT
    reconnect_base_interval: float = RECONNECT_BASE_INTERVAL
    max_reconnect_interval: float = MAX_RECONNECT_INTERVAL
