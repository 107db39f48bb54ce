"""Line transports: TCP/TLS stream and WebSocket.

Both expose the same small contract so the client never needs to know which
one it is talking to:

    open() -> None                 connect (raises TransportError)
    send(line: str) -> None        write one protocol line
    receive() -> str | None        next chunk of text, None on clean close
    close() -> None                release the connection

Received chunks may contain several ``\\r\\n`` terminated lines; splitting is
done by the dispatcher.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import ssl
from abc import ABC, abstractmethod

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, WebSocketException

from ..errors import TransportError
from ..logs.logger import logger
from .options import ConnectionOptions


class Transport(ABC):
    """Abstract line transport."""

    close_code: int | None = None
    close_reason: str | None = None

    @abstractmethod
    async def open(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def send(self, line: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def receive(self) -> str | None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    async def close(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @property
    @abstractmethod
    def endpoint(self) -> str:  # pragma: no cover - interface
        raise NotImplementedError


class TcpTransport(Transport):
    def __init__(
        self, host: str, port: int, secure: bool = True, chunk_size: int = 4096
    ) -> None:
        self.host = host
        self.port = port
        self.secure = secure
        self.chunk_size = chunk_size
        self.reader: asyncio.StreamReader | None = None
        self.writer: asyncio.StreamWriter | None = None
        # Multibyte characters may straddle two reads
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def endpoint(self) -> str:
        return f"{self.host}:{self.port}"

    async def open(self) -> None:
        self._decoder.reset()
        ssl_context = ssl.create_default_context() if self.secure else None
        try:
            self.reader, self.writer = await asyncio.open_connection(
                self.host, self.port, ssl=ssl_context
            )
        except OSError as e:
            raise TransportError(
                f"Failed to connect to {self.endpoint}: {e}",
                data={"host": self.host, "port": self.port},
            ) from e

    async def send(self, line: str) -> None:
        if not self.writer:
            raise TransportError("Transport is not open")
        try:
            self.writer.write(f"{line}\r\n".encode())
            await self.writer.drain()
        except OSError as e:
            raise TransportError(f"Write failed: {e}") from e

    async def receive(self) -> str | None:
        if not self.reader:
            return None
        try:
            data = await self.reader.read(self.chunk_size)
        except OSError as e:
            raise TransportError(f"Read failed: {e}") from e
        if not data:
            tail = self._decoder.decode(b"", final=True)
            return tail or None
        return self._decoder.decode(data)

    async def close(self) -> None:
        writer, self.writer, self.reader = self.writer, None, None
        if writer is None:
            return
        try:
            writer.close()
            await writer.wait_closed()
        except OSError as e:
            logger.log_event(
                "transport",
                "close_error",
                level=logging.DEBUG,
                endpoint=self.endpoint,
                error=str(e),
            )


class WebSocketTransport(Transport):
    """Chat over WebSocket: one or more lines per text frame, bare lines out."""

    def __init__(self, url: str) -> None:
        self.url = url
        self.ws: ClientConnection | None = None

    @property
    def endpoint(self) -> str:
        return self.url

    async def open(self) -> None:
        try:
            # Liveness is checked with IRC PING/PONG, not WebSocket pings
            self.ws = await connect(self.url, ping_interval=None)
        except (OSError, TimeoutError, WebSocketException) as e:
            raise TransportError(
                f"WebSocket connection to {self.url} failed: {e}", data={"url": self.url}
            ) from e

    async def send(self, line: str) -> None:
        if self.ws is None:
            raise TransportError("Transport is not open")
        try:
            await self.ws.send(line)
        except ConnectionClosed as e:
            raise TransportError(f"Write failed: {e}") from e

    async def receive(self) -> str | None:
        if self.ws is None:
            return None
        try:
            data = await self.ws.recv()
        except ConnectionClosed:
            self._record_close()
            return None
        if isinstance(data, bytes):
            data = data.decode("utf-8", errors="ignore")
        return self._terminate(data)

    def _record_close(self) -> None:
        if self.ws is None:
            return
        self.close_code = getattr(self.ws, "close_code", None)
        reason = getattr(self.ws, "close_reason", None)
        if isinstance(reason, bytes):
            reason = reason.decode("utf-8")
        self.close_reason = reason or None

    @staticmethod
    def _terminate(data: str) -> str:
        # The last line of a frame may lack its terminator
        return data if data.endswith("\r\n") else f"{data}\r\n"

    async def close(self) -> None:
        ws, self.ws = self.ws, None
        if ws is None:
            return
        try:
            await ws.close(code=1000)
        except (OSError, WebSocketException) as e:
            logger.log_event(
                "transport",
                "close_error",
                level=logging.DEBUG,
                endpoint=self.url,
                error=str(e),
            )


def create_transport(options: ConnectionOptions) -> Transport:
    if options.type == "tcp":
        return TcpTransport(
            options.resolved_host(),
            options.resolved_port(),
            secure=options.secure,
            chunk_size=options.read_chunk_size,
        )
    return WebSocketTransport(options.resolved_url())
