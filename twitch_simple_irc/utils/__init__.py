"""Utility functions package for the chat client.

Exposed functions:
    get_random_username: Generates an anonymous ``justinfan`` login.
    normalize_channel: Canonical channel key (lowercase, no ``#``).
    get_is_action / normalize_action_message: ``/me`` envelope handling.
    format_duration: Formats time durations into human-readable strings.
"""

from .helpers import (
    format_duration,
    get_is_action,
    get_random_username,
    normalize_action_message,
    normalize_channel,
)

__all__ = [
    "format_duration",
    "get_is_action",
    "get_random_username",
    "normalize_action_message",
    "normalize_channel",
]
