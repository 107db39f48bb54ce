"""Centralized chat client error hierarchy.

These exceptions give semantic categories to the failures the client can
surface. Raw ``OSError`` / ``websockets`` / timeout errors raised by a transport
are wrapped into :class:`TransportError` before they reach callers.

Classes:
  ChatError                – Base for all client errors.
  TransportError           – Transport could not be opened or failed mid-stream.
  ConnectionClosedError    – Transport was closed by the remote side.
  RegistrationTimeoutError – Server did not send the welcome reply in time.
  KeepaliveTimeoutError    – Server did not answer a keepalive PING in time.
  ClientStateError         – Operation invoked in the wrong connection state.
"""

from __future__ import annotations

from collections.abc import Mapping


class ChatError(Exception):
    """Base class for all chat client errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class TransportError(ChatError):
    """Exception raised for socket / WebSocket level failures.

    Connection refused, TLS failures, DNS errors and abrupt resets all end up
    here. These trigger the reconnect loop when auto-reconnect is enabled.
    """


class ConnectionClosedError(TransportError):
    """Exception raised when the remote side closed the transport."""

    def __init__(
        self,
        message: str = "Connection closed by server",
        *,
        code: int | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(message, data={"code": code, "reason": reason})
        self.code = code
        self.reason = reason


class RegistrationTimeoutError(ChatError):
    """Exception raised when the 001 welcome reply was not received in time."""


class KeepaliveTimeoutError(ChatError):
    """Exception raised when a client PING got no PONG back in time."""


class ClientStateError(ChatError):
    """Exception raised when an operation is not valid in the current state."""


class NotConnectedError(ClientStateError):
    """Raised when an operation needs an open transport."""


class NotRegisteredError(ClientStateError):
    """Raised when an operation needs a registered session."""


class AlreadyConnectedError(ClientStateError):
    """Raised when ``connect()`` is called while connecting or connected."""


__all__ = [
    "ChatError",
    "TransportError",
    "ConnectionClosedError",
    "RegistrationTimeoutError",
    "KeepaliveTimeoutError",
    "ClientStateError",
    "NotConnectedError",
    "NotRegisteredError",
    "AlreadyConnectedError",
]
