"""Health checking helpers."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from ..utils import format_duration

if TYPE_CHECKING:  # pragma: no cover
    from .client import TwitchChatClient


class IRCHealthMonitor:
    def __init__(self, host: TwitchChatClient) -> None:
        self.host = host

    def get_connection_stats(self) -> dict[str, Any]:
        host = self.host
        session = host.session
        current_time = time.time()
        reasons = self.get_unhealthy_reasons()
        return {
            "name": host.name,
            "state": session.state.name,
            "connected": host.connected,
            "registered": host.registered,
            "endpoint": host.transport.endpoint if host.transport else None,
            "channels": host.channels.channel_names(),
            "last_server_activity": host.last_server_activity,
            "time_since_activity": (
                current_time - host.last_server_activity
                if host.last_server_activity > 0
                else None
            ),
            "last_ping_from_server": host.last_ping_from_server,
            "latency": host.latency,
            "pending_ping": session.pending_ping is not None,
            "reconnecting": session.reconnecting,
            "reconnect_interval": session.reconnect_interval,
            "reconnect_attempts": session.reconnect_attempts,
            "last_error": session.last_error,
            "uptime": (
                format_duration(current_time - session.registered_at)
                if session.registered_at
                else None
            ),
            "healthy": not reasons,
            "reasons": reasons,
        }

    def is_healthy(self) -> bool:
        return not self.get_unhealthy_reasons()

    def get_unhealthy_reasons(self) -> list[str]:
        h = self.host
        reasons: list[str] = []
        if not h.connected:
            reasons.append("not_connected")
        elif not h.registered:
            reasons.append("not_registered")
        if h.transport is None:
            reasons.append("missing_transport")
        if h.session.reconnecting:
            reasons.append("reconnecting")
        if not h.heartbeat.running and h.registered:
            reasons.append("keepalive_stopped")
        return reasons
