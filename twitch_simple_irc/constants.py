"""
Configuration constants for the Twitch chat client

This module contains the protocol literals and timing defaults used throughout
the client. Each timing constant can be overridden by setting an environment
variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Server endpoints
TCP_HOST = "irc.chat.twitch.tv"
TCP_PORT_SECURE = 6697
TCP_PORT_PLAIN = 6667
WS_URL_SECURE = "wss://irc-ws.chat.twitch.tv:443"
WS_URL_PLAIN = "ws://irc-ws.chat.twitch.tv:80"

# Handshake literals
CAPABILITIES = "twitch.tv/tags twitch.tv/commands"
ANONYMOUS_PASSWORD = "SCHMOOPIIE"
ANONYMOUS_NAME_PREFIX = "justinfan"
SERVER_NAME = "tmi.twitch.tv"

# Timeouts (seconds)
REGISTER_RESPONSE_TIMEOUT = _get_env_float(
    "REGISTER_RESPONSE_TIMEOUT", 2.0
)  # Wait for the 001 welcome after NICK
JOIN_RESPONSE_TIMEOUT = _get_env_float(
    "JOIN_RESPONSE_TIMEOUT", 2.0
)  # Wait for JOIN/PART confirmation
CONNECT_TIMEOUT = _get_env_float(
    "CONNECT_TIMEOUT", 10.0
)  # Transport open (TCP/TLS handshake or WebSocket upgrade)

# Keepalive
PING_INTERVAL = _get_env_float(
    "PING_INTERVAL", 5 * 60.0
)  # Seconds between client-initiated PINGs
PING_RESPONSE_TIMEOUT = _get_env_float(
    "PING_RESPONSE_TIMEOUT", 2.0
)  # Seconds to wait for the matching PONG

# Reconnect backoff
RECONNECT_BASE_INTERVAL = _get_env_float(
    "RECONNECT_BASE_INTERVAL", 1.0
)  # First reconnect delay
MAX_RECONNECT_INTERVAL = _get_env_float(
    "MAX_RECONNECT_INTERVAL", 60.0
)  # Backoff ceiling

# Transport
READ_CHUNK_SIZE = _get_env_int("READ_CHUNK_SIZE", 4096)  # Bytes per TCP read
