"""Shared IRC data models (connection state and session)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from ..constants import ANONYMOUS_PASSWORD
from ..utils import get_random_username


class ConnectionState(Enum):
    DISCONNECTED = auto()
    CONNECTING = auto()
    CONNECTED = auto()
    REGISTERED = auto()
    RECONNECTING = auto()


@dataclass(slots=True)
class Identity:
    name: str
    password: str

    @classmethod
    def create(cls, name: str | None = None, auth: str | None = None) -> Identity:
        if auth:
            password = auth if auth.startswith("oauth:") else f"oauth:{auth}"
        else:
            password = ANONYMOUS_PASSWORD
        return cls(name=(name or get_random_username()).lower(), password=password)

    @property
    def anonymous(self) -> bool:
        return self.password == ANONYMOUS_PASSWORD


@dataclass(slots=True)
class Session:
    """Mutable per-client connection bookkeeping."""

    identity: Identity
    reconnect_interval: float
    state: ConnectionState = ConnectionState.DISCONNECTED
    pending_ping: float | None = None
    reconnecting: bool = False
    connected_at: float | None = None
    registered_at: float | None = None
    reconnect_attempts: int = 0
    last_error: str | None = None
