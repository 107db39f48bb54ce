"""Twitch chat client: connection lifecycle, registration and commands."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

from ..constants import CAPABILITIES
from ..errors import (
    AlreadyConnectedError,
    ConnectionClosedError,
    NotConnectedError,
    RegistrationTimeoutError,
    TransportError,
)
from ..logs.logger import logger
from ..utils import normalize_channel
from .connection import IRCConnectionController
from .dispatcher import IRCDispatcher
from .emitter import EventEmitter, Listener
from .events import ConnectEvent, DisconnectEvent, ErrorEvent, EventKind
from .health import IRCHealthMonitor
from .heartbeat import IRCHeartbeat
from .join import IRCJoinManager
from .models import ConnectionState, Identity, Session
from .options import ClientOptions, ConnectionOptions
from .parser import format_irc_message
from .state import ChannelStateStore
from .tags import Tags
from .transport import Transport, create_transport

TransportFactory = Callable[[ConnectionOptions], Transport]


class TwitchChatClient:  # pylint: disable=too-many-instance-attributes
    """Async client for Twitch chat over TCP/TLS or WebSocket.

    Subscribe with :meth:`on` using an :class:`EventKind` (or its string
    value), then ``await client.connect()``. Per-channel state is available
    through :attr:`channels` and the session-wide user state through
    :attr:`global_user_state`.
    """

    def __init__(
        self,
        options: ClientOptions | None = None,
        *,
        name: str | None = None,
        auth: str | None = None,
        transport_factory: TransportFactory | None = None,
    ) -> None:
        options = options or ClientOptions()
        if name is not None or auth is not None:
            options = dataclasses.replace(
                options,
                name=name if name is not None else options.name,
                auth=auth if auth is not None else options.auth,
            )
        self.options = options
        self.session = Session(
            identity=Identity.create(options.name, options.auth),
            reconnect_interval=options.reconnect_base_interval,
        )
        self.events = EventEmitter()
        self.channels = ChannelStateStore()
        self.transport: Transport | None = None
        self._transport_factory = transport_factory or create_transport
        self._read_task: asyncio.Task[None] | None = None
        self.last_server_activity = 0.0
        self.last_ping_from_server = 0.0
        self.latency: float | None = None
        self.dispatcher = IRCDispatcher(self)
        self.heartbeat = IRCHeartbeat(self)
        self.join_manager = IRCJoinManager(self)
        self.connection_controller = IRCConnectionController(self)
        self.health_monitor = IRCHealthMonitor(self)

    @classmethod
    def create(cls, options: ClientOptions | None = None, **kwargs: Any) -> TwitchChatClient:
        return cls(options, **kwargs)

    # ------------------------------------------------------------------ state

    @property
    def name(self) -> str:
        return self.session.identity.name

    @property
    def state(self) -> ConnectionState:
        return self.session.state

    @property
    def connecting(self) -> bool:
        return self.session.state is ConnectionState.CONNECTING

    @property
    def connected(self) -> bool:
        return self.session.state in (ConnectionState.CONNECTED, ConnectionState.REGISTERED)

    @property
    def registered(self) -> bool:
        return self.session.state is ConnectionState.REGISTERED

    @property
    def reconnecting(self) -> bool:
        return self.session.reconnecting

    @property
    def global_user_state(self) -> Tags | None:
        return self.channels.global_user_state

    def set_state(self, new_state: ConnectionState) -> None:
        if self.session.state != new_state:
            logger.log_event(
                "irc",
                "state_change",
                level=logging.DEBUG,
                user=self.name,
                old_state=self.session.state.name,
                new_state=new_state.name,
            )
            self.session.state = new_state

    # ----------------------------------------------------------------- events

    def on(self, kind: EventKind | str, listener: Listener) -> Listener:
        return self.events.on(kind, listener)

    def off(self, kind: EventKind | str, listener: Listener) -> None:
        self.events.off(kind, listener)

    def once(self, kind: EventKind | str, listener: Listener) -> Listener:
        return self.events.once(kind, listener)

    # ------------------------------------------------------------- lifecycle

    async def connect(self) -> None:
        """Open the transport and register.

        Raises:
            AlreadyConnectedError: a connection is open or being opened.
            TransportError: the transport could not be opened.
            RegistrationTimeoutError: no welcome reply within ``register_timeout``.
        """
        if self.session.state in (
            ConnectionState.CONNECTING,
            ConnectionState.CONNECTED,
            ConnectionState.REGISTERED,
        ):
            raise AlreadyConnectedError(
                "Client is already connecting or connected",
                data={"state": self.session.state.name},
            )
        self.set_state(ConnectionState.CONNECTING)
        transport = self._transport_factory(self.options.connection)
        self.transport = transport
        logger.log_event(
            "irc", "connect_start", user=self.name, endpoint=transport.endpoint
        )
        try:
            await self._open_transport(transport)
        except TransportError as e:
            logger.log_event(
                "irc",
                "connect_failed",
                level=logging.ERROR,
                user=self.name,
                endpoint=transport.endpoint,
                error=str(e),
            )
            await self.handle_connection_lost(e)
            raise

        self.set_state(ConnectionState.CONNECTED)
        self.session.connected_at = time.time()
        self.last_server_activity = time.time()
        self._read_task = asyncio.create_task(
            self._read_loop(transport), name="tmi-reader"
        )
        logger.log_event(
            "irc", "connected", user=self.name, endpoint=transport.endpoint
        )
        await self.events.emit(ConnectEvent())
        await self.register()

    async def _open_transport(self, transport: Transport) -> None:
        timeout = self.options.connection.connect_timeout
        try:
            await asyncio.wait_for(transport.open(), timeout=timeout)
        except TimeoutError as e:
            await transport.close()
            raise TransportError(
                f"Timed out connecting to {transport.endpoint} after {timeout}s"
            ) from e

    async def register(self) -> None:
        """Send the CAP/PASS/NICK handshake and wait for the welcome reply."""
        if not self.connected:
            raise NotConnectedError("Cannot register without an open connection")
        if self.registered:
            return
        identity = self.session.identity
        welcome = self.events.expect(EventKind.REGISTER)
        await self.send_raw(format_irc_message("CAP", ["REQ"], CAPABILITIES))
        await self.send_raw(format_irc_message("PASS", [identity.password]))
        await self.send_raw(format_irc_message("NICK", [identity.name]))
        timeout = self.options.register_timeout
        try:
            await asyncio.wait_for(welcome, timeout=timeout)
        except TimeoutError as e:
            logger.log_event(
                "irc",
                "register_timeout",
                level=logging.ERROR,
                user=self.name,
                timeout=timeout,
            )
            raise RegistrationTimeoutError(
                f"Server did not acknowledge registration within {timeout}s"
            ) from e
        self.heartbeat.start()

    def mark_registered(self, name: str) -> bool:
        """Record the server-assigned nickname; True on first registration."""
        self.session.identity.name = name
        if self.registered:
            return False
        self.set_state(ConnectionState.REGISTERED)
        self.session.registered_at = time.time()
        logger.log_event(
            "irc",
            "registered",
            user=name,
            anonymous=self.session.identity.anonymous,
        )
        return True

    async def disconnect(self) -> None:
        """Close the connection on request; never triggers a reconnect."""
        self.connection_controller.cancel()
        if self.transport is None and not self.connected:
            if self.session.state is ConnectionState.RECONNECTING:
                self.set_state(ConnectionState.DISCONNECTED)
            return
        logger.log_event("irc", "disconnect_requested", user=self.name)
        await self.teardown()
        await self.events.emit(DisconnectEvent())

    async def handle_connection_lost(self, error: Exception) -> None:
        """Involuntary disconnect: tear down, report, then maybe reconnect."""
        if self.transport is None and not self.connected:
            return
        self.session.last_error = str(error)
        logger.log_event(
            "irc",
            "connection_lost",
            level=logging.WARNING,
            user=self.name,
            error=str(error),
            error_type=type(error).__name__,
        )
        await self.teardown()
        await self.events.emit(DisconnectEvent(error=error))
        if self.options.reconnect:
            self.reconnect()

    async def teardown(self) -> None:
        """Release the transport and reset connection bookkeeping."""
        self.heartbeat.stop()
        read_task, self._read_task = self._read_task, None
        if (
            read_task is not None
            and not read_task.done()
            and read_task is not asyncio.current_task()
        ):
            read_task.cancel()
        transport, self.transport = self.transport, None
        if transport is not None:
            await transport.close()
        self.session.pending_ping = None
        self.session.connected_at = None
        self.session.registered_at = None
        self.set_state(ConnectionState.DISCONNECTED)

    def reconnect(self) -> asyncio.Task[None] | None:
        return self.connection_controller.reconnect()

    async def _read_loop(self, transport: Transport) -> None:
        buffer = ""
        error: Exception
        try:
            while True:
                chunk = await transport.receive()
                if chunk is None:
                    break
                buffer = await self.dispatcher.process_incoming_data(buffer, chunk)
        except TransportError as e:
            error = e
        except Exception as e:  # noqa: BLE001
            logger.log_event(
                "irc",
                "read_loop_error",
                level=logging.ERROR,
                user=self.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            await self.events.emit(ErrorEvent(error=e))
            error = e
        else:
            code, reason = transport.close_code, transport.close_reason
            if code is not None:
                error = ConnectionClosedError(f"[{code}] {reason or ''}", code=code, reason=reason)
            else:
                error = ConnectionClosedError()
        if transport is self.transport:
            await self.handle_connection_lost(error)

    # --------------------------------------------------------------- commands

    async def send_raw(self, message: str) -> bool:
        if self.transport is None or not message:
            return False
        try:
            await self.transport.send(message)
        except TransportError as e:
            logger.log_event(
                "irc", "send_failed", level=logging.WARNING, user=self.name, error=str(e)
            )
            return False
        logger.log_event(
            "irc",
            "sent",
            level=logging.DEBUG,
            user=self.name,
            raw="PASS ***" if message.startswith("PASS ") else message,
        )
        return True

    async def say(self, channel: str, message: str) -> bool:
        if not message:
            return False
        line = format_irc_message("PRIVMSG", [f"#{normalize_channel(channel)}"], message)
        return await self.send_raw(line)

    async def send_command(
        self, channel: str, command: str, params: str | Sequence[str] = ""
    ) -> bool:
        command_params = params if isinstance(params, str) else " ".join(params)
        line = format_irc_message(
            "PRIVMSG",
            [f"#{normalize_channel(channel)}"],
            f"/{command} {command_params}",
        )
        return await self.send_raw(line)

    async def join(self, channel: str) -> bool:
        return await self.join_manager.join_channel(channel)

    async def part(self, channel: str) -> bool:
        return await self.join_manager.part_channel(channel)

    # ---------------------------------------------------------------- health

    def get_connection_stats(self) -> dict[str, Any]:
        return self.health_monitor.get_connection_stats()

    def is_healthy(self) -> bool:
        return self.health_monitor.is_healthy()


Client = TwitchChatClient

__all__ = ["Client", "TwitchChatClient", "TransportFactory"]
