"""Connection lifecycle for the chat transport.

A ``Connection`` wraps one non-blocking socket and its receive buffer. The
``ConnectionManager`` owns at most one of them at a time, drives the connect
sequence through ``ConnectAttempt`` and sends the authentication handshake.
"""

from __future__ import annotations

import errno
import logging
import os
import select
import socket
import threading
import time
from enum import Enum

from ..config.model import ClientSettings, Credentials
from ..constants import LINE_TERMINATOR
from ..errors.internal import (
    ChatConnectionError,
    ConnectCancelledError,
    ConnectionClosedError,
    ConnectTimeoutError,
    NotConnectedError,
)
from ..logs.logger import logger
from .commands import handshake_lines
from .framing import LineBuffer

_IN_PROGRESS = {errno.EINPROGRESS, errno.EWOULDBLOCK, errno.EALREADY, errno.EAGAIN}


class ConnectionState(Enum):
    """Lifecycle of a single Connection. CLOSED is terminal."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"


class ConnectPhase(Enum):
    """Progress of one non-blocking connect attempt."""

    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


class ConnectAttempt:
    """Step-wise driver for a non-blocking ``connect``.

    Each ``step`` waits at most ``wait`` seconds for the socket to become
    writable and then settles the phase. The attempt never outlives its
    deadline and stops as soon as the cancel event is set.
    """

    def __init__(
        self,
        sock: socket.socket,
        address: tuple,
        deadline: float,
        cancel: threading.Event | None = None,
    ) -> None:
        self.sock = sock
        self.address = address
        self.deadline = deadline
        self.cancel = cancel
        self.error: OSError | None = None
        self.phase = ConnectPhase.CONNECTING
        self._start()

    def _start(self) -> None:
        if self._cancelled():
            self.phase = ConnectPhase.CANCELLED
            return
        code = self.sock.connect_ex(self.address)
        if code == 0:
            self.phase = ConnectPhase.CONNECTED
        elif code not in _IN_PROGRESS:
            self._fail(code)

    def _cancelled(self) -> bool:
        return self.cancel is not None and self.cancel.is_set()

    def _fail(self, code: int) -> None:
        self.error = OSError(code, os.strerror(code))
        self.phase = ConnectPhase.FAILED

    @property
    def remaining(self) -> float:
        return max(0.0, self.deadline - time.monotonic())

    def step(self, wait: float) -> ConnectPhase:
        if self.phase is not ConnectPhase.CONNECTING:
            return self.phase
        if self._cancelled():
            self.phase = ConnectPhase.CANCELLED
            return self.phase
        remaining = self.remaining
        if remaining <= 0:
            self.phase = ConnectPhase.TIMED_OUT
            return self.phase

        _, writable, errored = select.select(
            [], [self.sock], [self.sock], min(wait, remaining)
        )
        if writable or errored:
            code = self.sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
            if code == 0:
                self.phase = ConnectPhase.CONNECTED
            elif code not in _IN_PROGRESS:
                self._fail(code)
        return self.phase

    def run(self, poll_interval: float) -> ConnectPhase:
        while self.phase is ConnectPhase.CONNECTING:
            logger.log_event(
                "irc", "connect_poll", level=logging.DEBUG, remaining=self.remaining
            )
            self.step(poll_interval)
        return self.phase


class Connection:
    """One socket plus its receive buffer, exclusively owned."""

    def __init__(
        self,
        sock: socket.socket,
        buffer_size: int,
        write_timeout: float,
        user: str | None = None,
    ) -> None:
        self.sock: socket.socket | None = sock
        self.line_buffer = LineBuffer(buffer_size)
        self.write_timeout = write_timeout
        self.user = user
        self.state = ConnectionState.CONNECTING

    def set_state(self, new_state: ConnectionState) -> None:
        if self.state != new_state:
            logger.log_event(
                "irc",
                "state_change",
                level=logging.DEBUG,
                user=self.user,
                old_state=self.state.name,
                new_state=new_state.name,
            )
            self.state = new_state

    @property
    def is_open(self) -> bool:
        return self.sock is not None and self.state in (
            ConnectionState.CONNECTING,
            ConnectionState.CONNECTED,
        )

    def send_bytes(self, data: bytes) -> None:
        """Write all of ``data``, waiting for writability up to the deadline."""
        if not self.is_open:
            raise NotConnectedError()
        view = memoryview(data)
        deadline = time.monotonic() + self.write_timeout
        while view:
            try:
                sent = self.sock.send(view)
                view = view[sent:]
                continue
            except (BlockingIOError, InterruptedError):
                pass
            except OSError as e:
                logger.log_event(
                    "irc", "send_failed", level=logging.ERROR, user=self.user, error=str(e)
                )
                self.close()
                raise ChatConnectionError(f"Write failed: {e}") from e
            remaining = deadline - time.monotonic()
            if remaining <= 0 or not self._wait(write=True, timeout=remaining):
                logger.log_event(
                    "irc",
                    "send_failed",
                    level=logging.ERROR,
                    user=self.user,
                    error="write timed out",
                )
                self.close()
                raise ChatConnectionError(
                    f"Write timed out after {self.write_timeout}s",
                    data={"unsent": len(view)},
                )

    def read_lines(self) -> list[str]:
        """One non-blocking read into the buffer, returning completed lines.

        Returns an empty list when no data is available yet.

        Raises:
            ConnectionClosedError: the connection is closed or the peer hung up.
            LineOverflowError: a single line outgrew the receive buffer.
        """
        if not self.is_open:
            raise ConnectionClosedError("Bot is not connected")
        try:
            data = self.sock.recv(self.line_buffer.free_capacity)
        except (BlockingIOError, InterruptedError):
            return []
        except OSError as e:
            self.close()
            raise ConnectionClosedError(f"Read failed: {e}") from e
        if not data:
            logger.log_event("irc", "peer_closed", level=logging.WARNING, user=self.user)
            self.close()
            raise ConnectionClosedError("Server closed the connection")
        logger.log_event("framing", "received", level=logging.DEBUG, size=len(data))
        return self.line_buffer.feed(data)

    def wait_readable(self, timeout: float) -> bool:
        if not self.is_open:
            return False
        return self._wait(write=False, timeout=timeout)

    def _wait(self, *, write: bool, timeout: float) -> bool:
        watched = [self.sock]
        if write:
            _, ready, _ = select.select([], watched, [], max(0.0, timeout))
        else:
            ready, _, _ = select.select(watched, [], [], max(0.0, timeout))
        return bool(ready)

    def close(self) -> None:
        if self.sock is not None:
            try:
                self.sock.close()
            except OSError:
                pass
            self.sock = None
        self.line_buffer.reset()
        self.set_state(ConnectionState.CLOSED)


class ConnectionManager:
    """Owns the client's single Connection and its write path.

    ``send`` is the sole write primitive; every outbound command is a
    formatted line passed through it.
    """

    def __init__(
        self, credentials: Credentials, settings: ClientSettings | None = None
    ) -> None:
        self.credentials = credentials
        self.settings = settings or ClientSettings()
        self._connection: Connection | None = None
        self._write_lock = threading.Lock()

    @property
    def user(self) -> str:
        return self.credentials.nickname

    @property
    def connection(self) -> Connection | None:
        return self._connection

    @property
    def state(self) -> ConnectionState:
        if self._connection is None:
            return ConnectionState.DISCONNECTED
        return self._connection.state

    def connect(
        self, timeout: float | None = None, cancel: threading.Event | None = None
    ) -> None:
        """Open a fresh connection and send the authentication handshake.

        Args:
            timeout: Deadline in seconds; defaults to ``settings.connect_timeout``.
            cancel: Optional event; setting it aborts the attempt.

        Raises:
            ConnectTimeoutError: the socket did not connect before the deadline.
            ConnectCancelledError: ``cancel`` was set while connecting.
            ChatConnectionError: resolution or the connect itself failed.
        """
        self.close()
        settings = self.settings
        limit = settings.connect_timeout if timeout is None else timeout
        deadline = time.monotonic() + limit
        logger.log_event(
            "irc", "connect_start", user=self.user, server=settings.host, port=settings.port
        )

        sock, address = self._open_socket()
        connection = Connection(
            sock, settings.buffer_size, settings.write_timeout, user=self.user
        )
        self._connection = connection

        attempt = ConnectAttempt(sock, address, deadline, cancel)
        phase = attempt.run(settings.poll_interval)
        if phase is not ConnectPhase.CONNECTED:
            connection.close()
            raise self._attempt_error(attempt, phase, limit)

        try:
            for line in handshake_lines(self.credentials):
                connection.send_bytes(line.encode("utf-8", errors="replace"))
        except ChatConnectionError:
            connection.close()
            raise
        logger.log_event(
            "irc",
            "auth_sent",
            level=logging.DEBUG,
            user=self.user,
            client_number=self.credentials.client_number,
        )
        connection.set_state(ConnectionState.CONNECTED)
        logger.log_event(
            "irc", "connect_success", user=self.user, server=settings.host, port=settings.port
        )

    def _open_socket(self) -> tuple[socket.socket, tuple]:
        host, port = self.settings.host, self.settings.port
        try:
            infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
        except OSError as e:
            self._log_connect_failure(e)
            raise ChatConnectionError(
                f"Cannot resolve {host}:{port}: {e}", data={"host": host, "port": port}
            ) from e
        family, socktype, proto, _, address = infos[0]
        sock = socket.socket(family, socktype, proto)
        sock.setblocking(False)
        return sock, address

    def _log_connect_failure(self, error: object) -> None:
        logger.log_event(
            "irc",
            "connect_failed",
            level=logging.ERROR,
            user=self.user,
            server=self.settings.host,
            port=self.settings.port,
            error=str(error),
        )

    def _attempt_error(
        self, attempt: ConnectAttempt, phase: ConnectPhase, limit: float
    ) -> ChatConnectionError:
        host, port = self.settings.host, self.settings.port
        data = {"host": host, "port": port, "phase": phase.value}
        if phase is ConnectPhase.TIMED_OUT:
            logger.log_event(
                "irc",
                "connect_timeout",
                level=logging.ERROR,
                user=self.user,
                server=host,
                port=port,
                timeout=limit,
            )
            return ConnectTimeoutError(
                f"Connection to {host}:{port} timed out after {limit}s", data=data
            )
        if phase is ConnectPhase.CANCELLED:
            logger.log_event(
                "irc",
                "connect_cancelled",
                level=logging.WARNING,
                user=self.user,
                server=host,
                port=port,
            )
            return ConnectCancelledError(f"Connection to {host}:{port} cancelled", data=data)
        self._log_connect_failure(attempt.error)
        return ChatConnectionError(
            f"Failed to connect to {host}:{port}: {attempt.error}", data=data
        )

    def is_connected(self) -> bool:
        connection = self._connection
        return (
            connection is not None
            and connection.sock is not None
            and connection.state is ConnectionState.CONNECTED
        )

    def send(self, line: str) -> None:
        """Write one CRLF-terminated protocol line.

        Raises:
            ValueError: ``line`` is not terminated.
            NotConnectedError: no connected transport exists.
            ChatConnectionError: the write failed or timed out.
        """
        if not line.endswith(LINE_TERMINATOR):
            raise ValueError("line must end with CRLF")
        command = line.split(" ", 1)[0].strip()
        if not self.is_connected():
            logger.log_event(
                "irc",
                "send_not_connected",
                level=logging.WARNING,
                user=self.user,
                command=command,
            )
            raise NotConnectedError()
        with self._write_lock:
            self._connection.send_bytes(line.encode("utf-8", errors="replace"))
        logger.log_event("irc", "send_line", level=logging.DEBUG, user=self.user, command=command)

    def read_lines(self) -> list[str]:
        """Run one decode cycle on the live connection.

        Raises:
            NotConnectedError: ``connect()`` was never called.
            ConnectionClosedError: the connection is closed.
            LineOverflowError: see ``LineBuffer.feed``.
        """
        if self._connection is None:
            raise NotConnectedError()
        return self._connection.read_lines()

    def wait_readable(
        self, timeout: float, cancel: threading.Event | None = None
    ) -> bool:
        """Wait up to ``timeout`` seconds for inbound data.

        The wait is sliced by ``settings.poll_interval`` so a set ``cancel``
        event is noticed promptly.
        """
        connection = self._connection
        if connection is None:
            return False
        deadline = time.monotonic() + max(0.0, timeout)
        while True:
            if cancel is not None and cancel.is_set():
                return False
            remaining = deadline - time.monotonic()
            if connection.wait_readable(min(self.settings.poll_interval, max(0.0, remaining))):
                return True
            if remaining <= 0 or not connection.is_open:
                return False

    def close(self) -> None:
        connection = self._connection
        if connection is None or connection.state is ConnectionState.CLOSED:
            return
        connection.close()
        logger.log_event("irc", "disconnected", level=logging.INFO, user=self.user)
