"""Line-oriented Twitch chat client.

Handles the socket, authentication handshake, framing and keep-alive replies
so applications only deal with text lines.
"""

from .client import TwitchChatClient
from .config.model import ClientSettings, Credentials
from .errors.internal import (
    ChatConnectionError,
    ConnectCancelledError,
    ConnectionClosedError,
    ConnectTimeoutError,
    InternalError,
    LineOverflowError,
    NotConnectedError,
    ReaderExhaustedError,
)
from .irc.connection import ConnectionState, ConnectPhase
from .irc.reader import LineReader, PollResult, PollStatus

__version__ = "1.0.0"

__all__ = [
    "TwitchChatClient",
    "ClientSettings",
    "Credentials",
    "ConnectionState",
    "ConnectPhase",
    "LineReader",
    "PollResult",
    "PollStatus",
    "InternalError",
    "ChatConnectionError",
    "ConnectTimeoutError",
    "ConnectCancelledError",
    "ConnectionClosedError",
    "NotConnectedError",
    "LineOverflowError",
    "ReaderExhaustedError",
]
