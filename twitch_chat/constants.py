"""
Configuration constants for the Twitch chat client

This module contains all configurable constants used throughout the client.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

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


def _get_env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return value.strip() if value and value.strip() else default


# Chat server endpoint
TWITCH_IRC_HOST = _get_env_str("TWITCH_IRC_HOST", "irc.chat.twitch.tv")
TWITCH_IRC_PORT = _get_env_int("TWITCH_IRC_PORT", 6667)

# Receive buffer capacity in bytes (one unterminated line may never exceed it)
IRC_RECEIVE_BUFFER_SIZE = _get_env_int("IRC_RECEIVE_BUFFER_SIZE", 200000)

# Connect / write deadlines
IRC_CONNECT_TIMEOUT = _get_env_float(
    "IRC_CONNECT_TIMEOUT", 30.0
)  # Seconds before a pending connect is abandoned
IRC_CONNECT_POLL_INTERVAL = _get_env_float(
    "IRC_CONNECT_POLL_INTERVAL", 0.5
)  # Seconds between readiness checks while connecting
IRC_WRITE_TIMEOUT = _get_env_float(
    "IRC_WRITE_TIMEOUT", 10.0
)  # Seconds to wait for a full socket write

# Protocol
LINE_TERMINATOR = "\r\n"
OAUTH_PREFIX = "oauth:"
CLIENT_NUMBER_MIN = 1
CLIENT_NUMBER_MAX = 3
DEFAULT_CLIENT_NUMBER = 3
