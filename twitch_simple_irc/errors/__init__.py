"""Error types raised by the chat client."""

from .internal import (  # noqa: F401
    AlreadyConnectedError,
    ChatError,
    ClientStateError,
    ConnectionClosedError,
    KeepaliveTimeoutError,
    NotConnectedError,
    NotRegisteredError,
    RegistrationTimeoutError,
    TransportError,
)

__all__ = [
    "AlreadyConnectedError",
    "ChatError",
    "ClientStateError",
    "ConnectionClosedError",
    "KeepaliveTimeoutError",
    "NotConnectedError",
    "NotRegisteredError",
    "RegistrationTimeoutError",
    "TransportError",
]
