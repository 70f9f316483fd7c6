"""Centralized internal error hierarchy.

These exceptions provide semantic categories for the transport, framing and
reader layers. Raw ``OSError`` / ``socket`` failures are wrapped at the
connection boundary; callers only ever see these types.

Classes:
  InternalError          – Base for all internal errors.
  NetworkError           – Transport / IO issues.
  ChatConnectionError    – A connect attempt or write could not complete.
  ConnectTimeoutError    – The connect deadline elapsed.
  ConnectCancelledError  – The connect attempt was cancelled by the caller.
  ConnectionClosedError  – The peer closed the stream.
  NotConnectedError      – An operation needs a live connection and has none.
  ParsingError           – Inbound framing issues.
  LineOverflowError      – A single line exceeded the receive buffer.
  ReaderExhaustedError   – ``next()`` called on an empty reader queue.
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for all internal client errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class NetworkError(InternalError):
    """Exception raised for network or transport layer errors."""


class ChatConnectionError(NetworkError):
    """Raised when the socket cannot be brought to (or kept in) a usable state.

    Fatal to the attempt that raised it; the client never retries on its own.
    """


class ConnectTimeoutError(ChatConnectionError):
    """The connect deadline elapsed before the socket reported connected."""


class ConnectCancelledError(ChatConnectionError):
    """The caller's cancellation token fired while connecting."""


class ConnectionClosedError(ChatConnectionError):
    """The remote end closed the stream; the connection is now CLOSED."""


class NotConnectedError(InternalError):
    """Raised by any send/read operation invoked without a connected transport.

    Callers must ``connect()`` first.
    """

    def __init__(
        self,
        message: str = "The bot is not connected to the server.",
        *,
        data: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message, data=data)


class ParsingError(InternalError):
    """Exception raised for inbound framing or decoding issues."""


class LineOverflowError(ParsingError):
    """An unterminated line outgrew the receive buffer and was discarded."""


class ReaderExhaustedError(InternalError, LookupError):
    """``next()`` was called with no pending line.

    This signals misuse (``has_next()`` was not checked), not end of stream.
    """

    def __init__(self, message: str = "No output to process") -> None:
        super().__init__(message)


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
