"""Error hierarchy for the chat client."""

from .internal import (  # noqa: F401
    ChatConnectionError,
    ConnectCancelledError,
    ConnectionClosedError,
    ConnectTimeoutError,
    InternalError,
    LineOverflowError,
    NetworkError,
    NotConnectedError,
    ParsingError,
    ReaderExhaustedError,
)

__all__ = [
    "InternalError",
    "NetworkError",
    "ChatConnectionError",
    "ConnectTimeoutError",
    "ConnectCancelledError",
    "ConnectionClosedError",
    "NotConnectedError",
    "ParsingError",
    "LineOverflowError",
    "ReaderExhaustedError",
]
