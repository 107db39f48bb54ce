"""General utility helper functions."""

from __future__ import annotations

import secrets

from ..constants import ANONYMOUS_NAME_PREFIX

__all__ = [
    "format_duration",
    "get_random_username",
    "normalize_channel",
    "get_is_action",
    "normalize_action_message",
]

ACTION_PREFIX = "\x01ACTION "
ACTION_SUFFIX = "\x01"


def get_random_username() -> str:
    """Return an anonymous login such as ``justinfan04217``."""
    return f"{ANONYMOUS_NAME_PREFIX}{secrets.randbelow(100000):05d}"


def normalize_channel(channel: str) -> str:
    """Lowercase a channel name and strip its leading ``#``."""
    return channel.strip().lstrip("#").lower()


def get_is_action(message: str | None) -> bool:
    if not message:
        return False
    return message.startswith(ACTION_PREFIX) and message.endswith(ACTION_SUFFIX)


def normalize_action_message(message: str) -> str:
    return message[len(ACTION_PREFIX) : -len(ACTION_SUFFIX)]


def format_duration(total_seconds: int | float | None) -> str:
    """Return a human-friendly Hh Mm Ss string for a duration in seconds.

    Examples:
      65 -> "1m 5s"
      3605 -> "1h 0m 5s"
      59 -> "59s"
    """
    if total_seconds is None:
        return "unknown"
    seconds = int(total_seconds)
    if seconds < 60:
        return f"{seconds}s"
    minutes, sec = divmod(seconds, 60)
    if minutes < 60:
        return f"{minutes}m {sec}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m {sec}s"
