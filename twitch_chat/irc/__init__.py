"""IRC transport package.

Contains connection, framing, keep-alive and reader modules for the Twitch
chat protocol, plus the outbound command builders they share.
"""

from .connection import (  # noqa: F401
    ConnectAttempt,
    Connection,
    ConnectionManager,
    ConnectionState,
    ConnectPhase,
)
from .framing import LineBuffer  # noqa: F401
from .keepalive import KeepAliveResponder  # noqa: F401
from .reader import LineReader, PollResult, PollStatus  # noqa: F401

__all__ = [
    "ConnectAttempt",
    "Connection",
    "ConnectionManager",
    "ConnectionState",
    "ConnectPhase",
    "KeepAliveResponder",
    "LineBuffer",
    "LineReader",
    "PollResult",
    "PollStatus",
]
